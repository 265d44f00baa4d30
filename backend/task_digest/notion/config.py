# backend/task_digest/notion/config.py

"""
Notion 連携に必要な設定値をまとめるモジュール。
"""

from dataclasses import dataclass
from functools import lru_cache

from task_digest.utils.config import get_env, get_env_float


@dataclass(frozen=True)
class NotionConfig:
    """Notion API 用の設定値コンテナ。"""

    api_key: str
    database_id: str
    api_base_url: str = "https://api.notion.com/v1"
    api_version: str = "2022-06-28"
    web_base_url: str = "https://www.notion.so"
    timeout_seconds: float = 10.0


@lru_cache()
def get_notion_config() -> NotionConfig:
    """
    環境変数から Notion 設定を読み込む。

    必須:
      - NOTION_API_KEY
      - NOTION_DATABASE_ID

    任意:
      - NOTION_API_BASE_URL  (デフォルト: https://api.notion.com/v1)
      - NOTION_API_VERSION   (デフォルト: 2022-06-28)
      - NOTION_WEB_BASE_URL  (デフォルト: https://www.notion.so)
      - HTTP_TIMEOUT_SECONDS (デフォルト: 10)
    """
    api_key = get_env("NOTION_API_KEY")
    database_id = get_env("NOTION_DATABASE_ID")

    api_base_url = get_env(
        "NOTION_API_BASE_URL",
        default="https://api.notion.com/v1",
        required=False,
    )
    api_version = get_env(
        "NOTION_API_VERSION",
        default="2022-06-28",
        required=False,
    )
    web_base_url = get_env(
        "NOTION_WEB_BASE_URL",
        default="https://www.notion.so",
        required=False,
    )

    return NotionConfig(
        api_key=api_key,
        database_id=database_id,
        api_base_url=api_base_url.rstrip("/"),
        api_version=api_version,
        web_base_url=web_base_url.rstrip("/"),
        timeout_seconds=get_env_float("HTTP_TIMEOUT_SECONDS", 10.0),
    )
