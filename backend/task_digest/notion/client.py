# backend/task_digest/notion/client.py

"""
Notion API との通信を担当するクライアントモジュール。
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import NotionConfig, get_notion_config
from .filters import TaskQueryFilter
from .schemas import TaskQueryResult

logger = logging.getLogger(__name__)


class NotionClientError(RuntimeError):
    """Notion クライアント全般の例外。"""


class NotionAuthError(NotionClientError):
    """認証・権限関連のエラー。"""


class NotionAPIError(NotionClientError):
    """その他 Notion API 呼び出し時のエラー。"""


class NotionClient:
    """
    Notion API の薄いラッパークライアント。

    - データベースの query（フィルタ木を受け取る）
    """

    def __init__(
        self,
        config: Optional[NotionConfig] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.config = config or get_notion_config()
        self._timeout = timeout if timeout is not None else self.config.timeout_seconds

    def _build_headers(self) -> Dict[str, str]:
        """
        Notion API 呼び出しに必要なヘッダーを構築。
        """
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Notion-Version": self.config.api_version,
            "Content-Type": "application/json",
        }

    def _raise_for_status(self, response: httpx.Response) -> None:
        """
        HTTP レスポンスコードに応じて適切な例外を投げる。
        """
        if response.status_code == 401:
            raise NotionAuthError("Unauthorized. Check NOTION_API_KEY.")
        if response.status_code == 403:
            raise NotionAuthError("Forbidden. Check Notion integration permissions.")
        if response.status_code >= 400:
            raise NotionAPIError(
                f"Notion API error: {response.status_code} {response.text}"
            )

    def _post_query(self, filter_: TaskQueryFilter) -> List[Dict[str, Any]]:
        """
        query エンドポイントを叩き、results を返す。エラー時は NotionClientError を投げる。
        """
        url = f"{self.config.api_base_url}/databases/{self.config.database_id}/query"
        payload: Dict[str, Any] = {"filter": filter_.to_notion()}

        try:
            response = httpx.post(
                url,
                headers=self._build_headers(),
                json=payload,
                timeout=self._timeout,
            )
        except httpx.RequestError as exc:
            raise NotionClientError(f"Failed to call Notion API: {exc}") from exc

        self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError as exc:
            raise NotionAPIError("Notion API returned a non-JSON response.") from exc

        if not isinstance(data, dict):
            raise NotionAPIError("Unexpected Notion API response format: body is not an object.")

        results = data.get("results") or []
        if not isinstance(results, list):
            raise NotionAPIError("Unexpected Notion API response format: 'results' is not a list.")

        return results

    def query_database(self, filter_: TaskQueryFilter) -> TaskQueryResult:
        """
        フィルタに一致するページをデータベースから取得する。

        Notion 側のエラーや通信エラーでは例外を投げず、
        エラー内容をログに出したうえで ok=False の結果を返す。
        """
        try:
            pages = self._post_query(filter_)
        except NotionClientError as exc:
            logger.error("Notion query failed: %s", exc)
            return TaskQueryResult.failure(str(exc))

        return TaskQueryResult(ok=True, tasks=pages)

    def query(self, filter_: TaskQueryFilter) -> List[Dict[str, Any]]:
        """
        query_database の結果からページ一覧だけを返す。失敗時は空リスト。
        """
        return self.query_database(filter_).tasks
