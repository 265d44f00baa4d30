# backend/task_digest/notifications/schemas.py

"""
通知メッセージの共通スキーマ定義。

- 通知のチャンネル種別（どこに送るか）
- 通知の重要度
- タイトル＋本文

を扱う。Slack に投稿されるのは body だけで、title はログ用の短い見出し。

※ NotificationMessage 自体には API キーや Webhook URL などの機密情報は含めないこと。
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class NotificationChannel(str, Enum):
    """
    通知の論理的なチャンネル種別。

    - INTERNAL_LOG: アプリ内部ログ（dry-run 用）
    - SLACK: Slack Incoming Webhook
    """

    INTERNAL_LOG = "internal_log"
    SLACK = "slack"


class NotificationSeverity(str, Enum):
    """
    通知の重要度。

    Notion の query に失敗した回のダイジェストは WARNING で送る。
    """

    INFO = "info"
    WARNING = "warning"


class NotificationMessage(BaseModel):
    """
    通知 1件分の情報。

    body は Slack の mrkdwn を含むプレーンテキスト想定。
    """

    channel: NotificationChannel = Field(
        NotificationChannel.SLACK,
        description="論理的な通知チャンネル。",
    )
    severity: NotificationSeverity = Field(
        NotificationSeverity.INFO,
        description="通知の重要度。",
    )
    title: str = Field(
        ...,
        description="短いタイトル（ログの見出しなど）。",
    )
    body: str = Field(
        ...,
        description="本文。Slack にはこの文字列がそのまま text として投稿される。",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="通知生成時刻（UTC）。",
    )
