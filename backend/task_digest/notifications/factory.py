# backend/task_digest/notifications/factory.py

"""
通知 Sender の簡易ファクトリ。

- 通常は Slack Webhook Sender を返す
- dry_run=True の場合はログ出力のみの Sender を返す
"""

from __future__ import annotations

from .schemas import NotificationChannel
from .service import LoggingNotificationSender, NotificationSender, SlackWebhookSender


def get_notification_sender(*, dry_run: bool = False) -> NotificationSender:
    """
    エントリーポイントから使う NotificationSender を生成する。
    """
    if dry_run:
        return LoggingNotificationSender()
    return SlackWebhookSender()


def channel_for(sender: NotificationSender) -> NotificationChannel:
    """
    Sender の種類に対応する論理チャンネルを返す。
    """
    if isinstance(sender, LoggingNotificationSender):
        return NotificationChannel.INTERNAL_LOG
    return NotificationChannel.SLACK


__all__ = [
    "get_notification_sender",
    "channel_for",
]
