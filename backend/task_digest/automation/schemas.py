# backend/task_digest/automation/schemas.py

"""
ダイジェスト実行まわりの Pydantic モデル / Enum 定義。
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Period(str, Enum):
    """
    1 日の前半 / 後半。どちらのダイジェストを送るかを決める。
    """

    MORNING = "morning"
    EVENING = "evening"


class SendRecord(BaseModel):
    """
    最後に送信したダイジェストの (日付, 期間)。

    ファイルには {"date": "YYYY-MM-DD", "period": "morning"|"evening"} で保存する。
    """

    date: dt.date = Field(..., description="送信した日（ローカルタイムゾーン基準）")
    period: Period = Field(..., description="送信した期間")


class DigestOutcome(str, Enum):
    """
    1 回の実行の終端状態。

    - SKIPPED: 同じ日・同じ期間で送信済みのため何もしなかった
    - ALREADY_RUNNING: 同一プロセスで別の実行が進行中だった
    - SENT: query → 整形 → 送信 →（必要なら）記録 まで完了
    - FAILED: 通知の送信に失敗した（送信記録は更新しない）
    """

    SKIPPED = "skipped"
    ALREADY_RUNNING = "already_running"
    SENT = "sent"
    FAILED = "failed"


class DigestRunResult(BaseModel):
    """
    DigestService.run() の戻り値。
    """

    outcome: DigestOutcome
    date: dt.date
    period: Period
    message: Optional[str] = Field(None, description="送信（しようと）したメッセージ本文")
    task_count: int = Field(0, ge=0, description="選ばれたダイジェストに含まれるタスク件数")
    query_failures: List[str] = Field(
        default_factory=list,
        description="Notion query の失敗内容。空なら両方成功。",
    )
    error: Optional[str] = Field(None, description="送信失敗時のエラーメッセージ")
