# backend/task_digest/notifications/service.py

"""
通知送信インターフェースと実装。

- NotificationMessage を受け取る send() インターフェース
- Slack Incoming Webhook に投稿する SlackWebhookSender
- ログ出力のみ行う LoggingNotificationSender（dry-run 用）

送信失敗時は NotificationError を投げる。握りつぶすか上位に伝えるかは
呼び出し側（DigestService）のポリシーで決める。
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from .config import SlackConfig, get_slack_config
from .schemas import NotificationMessage, NotificationSeverity

logger = logging.getLogger(__name__)


class NotificationError(RuntimeError):
    """通知の送信に失敗した場合の例外。"""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotificationSender(Protocol):
    """
    通知送信の最小インターフェース。

    実装:
    - SlackWebhookSender: Slack Webhook 経由で送信
    - LoggingNotificationSender: ログ出力のみ
    """

    def send(self, message: NotificationMessage) -> None:  # pragma: no cover - Protocol
        ...


class SlackWebhookSender:
    """
    Slack Incoming Webhook に {"text": body} を POST する Sender。
    """

    def __init__(self, config: Optional[SlackConfig] = None) -> None:
        self._config = config or get_slack_config()

    def send(self, message: NotificationMessage) -> None:
        """
        メッセージ本文を Webhook に投稿する。

        :raises NotificationError: 2xx 以外のレスポンス、または接続エラー時。
        """
        try:
            response = httpx.post(
                self._config.webhook_url,
                json={"text": message.body},
                timeout=self._config.timeout_seconds,
            )
        except httpx.RequestError as exc:
            logger.error("Failed to reach Slack webhook: %s", exc)
            raise NotificationError(f"Failed to reach Slack webhook: {exc}") from exc

        if response.status_code // 100 != 2:
            logger.error(
                "Slack webhook returned %s: %s", response.status_code, response.text
            )
            raise NotificationError(
                f"Slack webhook error: {response.status_code} {response.text}",
                status_code=response.status_code,
            )

        logger.debug("Slack message delivered: %s", message.title)


class LoggingNotificationSender:
    """
    NotificationMessage を Python の logger に記録するだけの Sender。

    - 外部サービスへの送信は行わない
    """

    def __init__(self, logger_: logging.Logger | None = None) -> None:
        self._logger = logger_ or logger

    def send(self, message: NotificationMessage) -> None:
        """
        通知メッセージを重要度に応じたログレベルで出力する。
        """
        text = f"[{message.channel.value}][{message.severity.value}] {message.title}\n{message.body}"

        if message.severity == NotificationSeverity.WARNING:
            self._logger.warning(text)
        else:
            self._logger.info(text)
