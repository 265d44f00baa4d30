# backend/task_digest/automation/jobs.py
from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime
from typing import List, Optional

from dotenv import load_dotenv

from task_digest.notifications.factory import channel_for, get_notification_sender
from task_digest.notifications.service import NotificationSender
from task_digest.notion.service import TaskService
from task_digest.utils.config import require_env
from task_digest.utils.logging import configure_logging

from .config import (
    CLI_MORNING_CUTOFF_HOUR,
    REQUIRED_ENV_VARS,
    DigestSettings,
    get_digest_settings,
)
from .digest_service import DigestService, build_task_service
from .lock import RunLock
from .schemas import DigestOutcome, DigestRunResult, Period
from .state import SendStateStore

logger = logging.getLogger(__name__)

# 同一プロセス内で共有するロック。DigestService には引数として渡す。
_process_run_lock = RunLock()


def get_process_run_lock() -> RunLock:
    return _process_run_lock


def run_guarded_digest(
    *,
    settings: Optional[DigestSettings] = None,
    task_service: Optional[TaskService] = None,
    sender: Optional[NotificationSender] = None,
    state_store: Optional[SendStateStore] = None,
    run_lock: Optional[RunLock] = None,
    now: Optional[datetime] = None,
    period: Optional[Period] = None,
    force: bool = False,
    dry_run: bool = False,
) -> DigestRunResult:
    """
    送信記録ファイルで重複送信を防ぎながらダイジェストを 1 回実行する。

    - 送信失敗はログに残して FAILED を返す（例外にはしない）
    - dry_run=True の場合はログ出力のみで、送信記録も読み書きしない
    """
    settings = settings or get_digest_settings(CLI_MORNING_CUTOFF_HOUR)
    task_service = task_service or build_task_service(settings)
    sender = sender or get_notification_sender(dry_run=dry_run)
    if dry_run:
        state_store = None
    else:
        state_store = state_store or SendStateStore(settings.state_file)

    service = DigestService(
        task_service=task_service,
        sender=sender,
        settings=settings,
        state_store=state_store,
        run_lock=run_lock or get_process_run_lock(),
        raise_on_notification_error=False,
        channel=channel_for(sender),
    )
    return service.run(now, period=period, force=force)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Notion -> Slack task digest runner")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="ダイジェストを送信する")
    run_parser.add_argument(
        "--period",
        choices=[p.value for p in Period],
        help="期間を固定する（省略時は現在時刻から判定）",
    )
    run_parser.add_argument(
        "--force",
        action="store_true",
        help="送信済みでも再送する",
    )
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Slack に送らずログに出力する",
    )
    run_parser.add_argument("--state-file", help="送信記録ファイルのパス")

    status_parser = subparsers.add_parser("status", help="最後の送信記録を表示する")
    status_parser.add_argument("--state-file", help="送信記録ファイルのパス")

    parser.add_argument("--log-level", help="ログレベル（デフォルト: LOG_LEVEL or INFO）")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    簡易 CLI エントリーポイント。

    例:
        python -m task_digest.automation.jobs run
        python -m task_digest.automation.jobs run --period evening --force
        python -m task_digest.automation.jobs status

    cron などから 1 時間おきに呼び出しても、期間ごとに 1 回しか送信しない。
    """
    load_dotenv()
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level)

    settings = get_digest_settings(CLI_MORNING_CUTOFF_HOUR)
    state_file = args.state_file or settings.state_file

    if args.command == "status":
        record = SendStateStore(state_file).read()
        print(json.dumps(record.model_dump(mode="json") if record else None))
        return 0

    required = REQUIRED_ENV_VARS
    if args.dry_run:
        required = tuple(name for name in REQUIRED_ENV_VARS if name != "SLACK_WEBHOOK_URL")
    require_env(required)

    result = run_guarded_digest(
        settings=settings,
        state_store=SendStateStore(state_file),
        period=Period(args.period) if args.period else None,
        force=args.force,
        dry_run=args.dry_run,
    )
    logger.info("Digest run finished: %s", result.outcome.value)
    return 1 if result.outcome == DigestOutcome.FAILED else 0


if __name__ == "__main__":
    raise SystemExit(main())
