# backend/task_digest/notion/schemas.py

"""
Notion から取得したデータを内部で扱うためのスキーマ定義。
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Task(BaseModel):
    """
    Notion タスクデータベースの 1 レコードを表現する内部モデル。

    Notion 側が所有するデータで、このシステムからは読み取り専用。
    """

    id: str = Field(..., description="Notion ページ ID")
    title: Optional[str] = Field(
        None,
        description="タスク名（Title / Name の title プロパティ）。無ければ None。",
    )
    status: Optional[str] = Field(None, description="Status（status 値）")
    due_date: Optional[date] = Field(None, description="Due Date（date プロパティの start）")
    last_edited_time: Optional[datetime] = Field(
        None,
        description="ページの最終更新日時。",
    )
    url: str = Field(..., description="Notion 上でタスクを開くための URL")


class TaskQueryResult(BaseModel):
    """
    データベース query 1 回分の結果。

    Notion API がエラーを返しても例外にはせず ok=False で返す。
    「タスクが 0 件」と「取得に失敗した」を呼び出し側で区別できるようにするため、
    tasks だけでなく ok / error を必ず持ち回る。
    """

    ok: bool = Field(True, description="query が成功したかどうか")
    tasks: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Notion API の生のページオブジェクト一覧。失敗時は空。",
    )
    error: Optional[str] = Field(None, description="失敗時のエラーメッセージ")

    @classmethod
    def failure(cls, error: str) -> "TaskQueryResult":
        return cls(ok=False, tasks=[], error=error)
