# backend/task_digest/automation/digest_service.py

"""
Notion → Slack ダイジェストの実行本体。

1 回の run() の流れ:
1. 指定タイムゾーンで現在時刻を求め、今日の日付・1 日の開始/終了・期間（朝/夜）を決める
2. 送信記録を読み、(今日, 期間) が送信済みなら何もせず SKIPPED
3. 「今日が期限で未完了」と「今日更新された進行中/完了」の 2 種類を query
4. 期間に応じたメッセージを選ぶ
5. 送信
6. 送信記録を更新して SENT

送信に失敗した場合は記録を更新しないので、次回の実行で同じ期間を再送する。
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo

from task_digest.notifications.schemas import (
    NotificationChannel,
    NotificationMessage,
    NotificationSeverity,
)
from task_digest.notifications.service import NotificationError, NotificationSender
from task_digest.notion.schemas import TaskQueryResult
from task_digest.notion.service import TaskService

from .config import DigestSettings
from .formatter import format_query_failure, format_tasks
from .lock import NullRunLock, RunLock
from .schemas import DigestOutcome, DigestRunResult, Period, SendRecord
from .state import SendStateStore

logger = logging.getLogger(__name__)


def compute_period(now: datetime, cutoff_hour: int) -> Period:
    """
    now.hour < cutoff_hour なら朝、それ以外は夜。
    """
    return Period.MORNING if now.hour < cutoff_hour else Period.EVENING


def day_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """
    now と同じタイムゾーンでの 1 日の開始（00:00）と終了（23:59:59.999999）を返す。
    """
    start = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
    end = start + timedelta(days=1) - timedelta(microseconds=1)
    return start, end


def build_task_service(settings: DigestSettings) -> TaskService:
    """
    設定のプロパティ名・ステータス名を使って TaskService を組み立てる。
    """
    return TaskService(
        status_property=settings.status_property,
        due_property=settings.due_property,
        done_status=settings.done_status,
        in_progress_status=settings.in_progress_status,
    )


class DigestService:
    """
    ダイジェストの query・整形・送信・送信記録をまとめて実行するサービス。

    - state_store=None の場合は送信記録を参照も更新もしない（HTTP エントリーポイント用）
    - raise_on_notification_error=True の場合、送信失敗は NotificationError として上位に伝える
    """

    def __init__(
        self,
        *,
        task_service: TaskService,
        sender: NotificationSender,
        settings: Optional[DigestSettings] = None,
        state_store: Optional[SendStateStore] = None,
        run_lock: Optional[RunLock] = None,
        raise_on_notification_error: bool = False,
        channel: NotificationChannel = NotificationChannel.SLACK,
    ) -> None:
        self._tasks = task_service
        self._sender = sender
        self._settings = settings or DigestSettings()
        self._store = state_store
        self._lock = run_lock or NullRunLock()
        self._raise_on_notification_error = raise_on_notification_error
        self._channel = channel

    # ------------------------------------------------------------------
    # 内部ユーティリティ
    # ------------------------------------------------------------------
    def _localize(self, now: Optional[datetime]) -> datetime:
        """
        設定のタイムゾーンでの現在時刻を返す。naive な datetime は UTC として扱う。
        """
        tz = ZoneInfo(self._settings.timezone)
        if now is None:
            return datetime.now(tz)
        if now.tzinfo is None:
            now = now.replace(tzinfo=ZoneInfo("UTC"))
        return now.astimezone(tz)

    def _render(self, result: TaskQueryResult, title: str) -> Tuple[str, int]:
        """
        query 結果をメッセージ本文とタスク件数に変換する。
        """
        if not result.ok:
            return format_query_failure(title, result.error), 0
        tasks = self._tasks.to_tasks(result.tasks)
        return format_tasks(tasks, title), len(tasks)

    # ------------------------------------------------------------------
    # 公開 API
    # ------------------------------------------------------------------
    def run(
        self,
        now: Optional[datetime] = None,
        *,
        period: Optional[Period] = None,
        force: bool = False,
    ) -> DigestRunResult:
        """
        ダイジェストを 1 回実行する。

        :param now: 現在時刻（テスト用）。省略時は実時刻。
        :param period: 期間を固定したい場合に指定。省略時は時刻から決める。
        :param force: True の場合、送信記録による重複チェックを行わない。
        :raises NotificationError: raise_on_notification_error=True で送信に失敗した場合。
        """
        local_now = self._localize(now)
        today = local_now.date()
        current_period = period or compute_period(local_now, self._settings.morning_cutoff_hour)

        with self._lock.hold() as acquired:
            if not acquired:
                logger.warning("Digest run already in progress in this process. Skipping.")
                return DigestRunResult(
                    outcome=DigestOutcome.ALREADY_RUNNING,
                    date=today,
                    period=current_period,
                )
            return self._run_locked(local_now, today, current_period, force=force)

    def _run_locked(
        self,
        local_now: datetime,
        today: date,
        period: Period,
        *,
        force: bool,
    ) -> DigestRunResult:
        if self._store is not None and not force and self._store.already_sent(today, period):
            logger.info(
                "Digest for period %s of %s was already sent. Exiting.",
                period.value,
                today.isoformat(),
            )
            return DigestRunResult(outcome=DigestOutcome.SKIPPED, date=today, period=period)

        start_of_day, end_of_day = day_bounds(local_now)
        due_today = self._tasks.fetch_due_today(today)
        changed_today = self._tasks.fetch_changed_between(start_of_day, end_of_day)

        morning_message, morning_count = self._render(due_today, self._settings.morning_title)
        evening_message, evening_count = self._render(changed_today, self._settings.evening_title)

        if period == Period.MORNING:
            message, task_count, selected = morning_message, morning_count, due_today
        else:
            message, task_count, selected = evening_message, evening_count, changed_today

        query_failures: List[str] = [
            result.error or "unknown error"
            for result in (due_today, changed_today)
            if not result.ok
        ]

        logger.info(
            "Current time: %s - sending digest for period: %s",
            local_now.isoformat(),
            period.value,
        )

        notification = NotificationMessage(
            channel=self._channel,
            severity=NotificationSeverity.INFO if selected.ok else NotificationSeverity.WARNING,
            title=f"{period.value} digest {today.isoformat()}",
            body=message,
        )

        try:
            self._sender.send(notification)
        except NotificationError as exc:
            logger.error("Failed to send digest for period %s: %s", period.value, exc)
            if self._raise_on_notification_error:
                raise
            return DigestRunResult(
                outcome=DigestOutcome.FAILED,
                date=today,
                period=period,
                message=message,
                task_count=task_count,
                query_failures=query_failures,
                error=str(exc),
            )

        if self._store is not None:
            self._store.write(SendRecord(date=today, period=period))

        logger.info("Digest for period %s sent.", period.value)
        return DigestRunResult(
            outcome=DigestOutcome.SENT,
            date=today,
            period=period,
            message=message,
            task_count=task_count,
            query_failures=query_failures,
        )
