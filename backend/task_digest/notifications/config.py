# backend/task_digest/notifications/config.py

"""
Slack 通知に必要な設定値をまとめるモジュール。
"""

from dataclasses import dataclass
from functools import lru_cache

from task_digest.utils.config import get_env, get_env_float


@dataclass(frozen=True)
class SlackConfig:
    """Slack Incoming Webhook 用の設定値コンテナ。"""

    webhook_url: str
    timeout_seconds: float = 10.0


@lru_cache()
def get_slack_config() -> SlackConfig:
    """
    環境変数から Slack 設定を読み込む。

    必須:
      - SLACK_WEBHOOK_URL

    任意:
      - HTTP_TIMEOUT_SECONDS (デフォルト: 10)
    """
    return SlackConfig(
        webhook_url=get_env("SLACK_WEBHOOK_URL"),
        timeout_seconds=get_env_float("HTTP_TIMEOUT_SECONDS", 10.0),
    )
