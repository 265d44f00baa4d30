# backend/task_digest/notion/service.py

"""
Notion クライアントと内部スキーマをつなぐサービス層。

- 朝 / 夜のダイジェスト用フィルタの組み立てと query
- Notion API レスポンス → Task への変換
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence

from .client import NotionClient
from .filters import due_on_and_not_done, edited_between_with_status
from .schemas import Task, TaskQueryResult

TITLE_PROPERTIES = ("Title", "Name")


def task_url(task_id: str, web_base_url: str = "https://www.notion.so") -> str:
    """
    ページ ID からタスクを開く URL を組み立てる。ID 中の '-' は取り除く。
    """
    return f"{web_base_url}/{task_id.replace('-', '')}"


def _extract_title_text(prop: Dict[str, Any]) -> Optional[str]:
    """
    Notion の title プロパティから先頭要素の plain_text を抽出する。
    """
    if not isinstance(prop, dict):
        return None

    items = prop.get("title")
    if isinstance(items, list) and items:
        first = items[0]
        if isinstance(first, dict):
            text = first.get("plain_text")
            if isinstance(text, str) and text:
                return text

    return None


def extract_title(properties: Dict[str, Any]) -> Optional[str]:
    """
    Title → Name の順に title プロパティを探す。どちらも無ければ None。
    """
    for name in TITLE_PROPERTIES:
        text = _extract_title_text(properties.get(name, {}))
        if text:
            return text
    return None


def extract_status(prop: Dict[str, Any]) -> Optional[str]:
    """
    Notion の status プロパティから name を抽出する。
    """
    if not isinstance(prop, dict):
        return None
    status = prop.get("status")
    if isinstance(status, dict):
        name = status.get("name")
        if isinstance(name, str) and name:
            return name
    return None


def _extract_date(prop: Dict[str, Any]) -> Optional[date]:
    """
    Notion の date プロパティから start の日付部分を抽出する。
    """
    if not isinstance(prop, dict):
        return None
    value = prop.get("date")
    if not isinstance(value, dict):
        return None

    start = value.get("start")
    if not isinstance(start, str):
        return None

    try:
        return date.fromisoformat(start[:10])
    except ValueError:
        return None


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    try:
        # Notion は ISO8601 (末尾 Z) で返すので fromisoformat 用に置き換える
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_task(
    page: Dict[str, Any],
    *,
    status_property: str = "Status",
    due_property: str = "Due Date",
    web_base_url: str = "https://www.notion.so",
) -> Task:
    """
    Notion API の生ページを Task に変換する。
    """
    page_id = str(page.get("id", ""))
    properties: Dict[str, Any] = page.get("properties", {}) or {}

    return Task(
        id=page_id,
        title=extract_title(properties),
        status=extract_status(properties.get(status_property, {})),
        due_date=_extract_date(properties.get(due_property, {})),
        last_edited_time=_parse_timestamp(page.get("last_edited_time")),
        url=task_url(page_id, web_base_url),
    )


class TaskService:
    """
    NotionClient を利用して、ダイジェストに必要な 2 種類の query を提供するサービス。

    - 今日が期限で未完了のタスク（朝）
    - 今日更新され、進行中 / 完了のタスク（夜）
    """

    def __init__(
        self,
        client: Optional[NotionClient] = None,
        *,
        status_property: str = "Status",
        due_property: str = "Due Date",
        done_status: str = "Concluída",
        in_progress_status: str = "Em Progresso",
        web_base_url: Optional[str] = None,
    ) -> None:
        self.client = client or NotionClient()
        self.web_base_url = web_base_url or self.client.config.web_base_url
        self.status_property = status_property
        self.due_property = due_property
        self.done_status = done_status
        self.in_progress_status = in_progress_status

    def fetch_due_today(self, today: date) -> TaskQueryResult:
        filter_ = due_on_and_not_done(
            today,
            due_property=self.due_property,
            status_property=self.status_property,
            done_status=self.done_status,
        )
        return self.client.query_database(filter_)

    def fetch_changed_between(self, start: datetime, end: datetime) -> TaskQueryResult:
        filter_ = edited_between_with_status(
            start,
            end,
            status_property=self.status_property,
            statuses=(self.in_progress_status, self.done_status),
        )
        return self.client.query_database(filter_)

    def to_tasks(self, pages: Sequence[Dict[str, Any]]) -> List[Task]:
        """
        生ページ一覧を Task 一覧に変換する（順序は維持）。
        """
        return [
            parse_task(
                page,
                status_property=self.status_property,
                due_property=self.due_property,
                web_base_url=self.web_base_url,
            )
            for page in pages
        ]
