# backend/tests/test_automation_digest_service.py
from datetime import date, datetime, timedelta, timezone

import pytest

from fakes import DummyNotionClient, DummySender, make_page, make_task_service
from task_digest.automation.config import (
    CLI_MORNING_CUTOFF_HOUR,
    HTTP_MORNING_CUTOFF_HOUR,
    DigestSettings,
)
from task_digest.automation.digest_service import (
    DigestService,
    build_task_service,
    compute_period,
    day_bounds,
)
from task_digest.automation.lock import RunLock
from task_digest.automation.schemas import DigestOutcome, Period, SendRecord
from task_digest.automation.state import SendStateStore
from task_digest.notifications.schemas import NotificationSeverity
from task_digest.notifications.service import NotificationError
from task_digest.notion.schemas import TaskQueryResult


def _utc(hour: int) -> datetime:
    # America/Sao_Paulo は UTC-3（2019 年以降サマータイム無し）
    return datetime(2025, 1, 2, hour, 0, tzinfo=timezone.utc)


def _service(client, sender, store=None, *, cutoff=CLI_MORNING_CUTOFF_HOUR, **kwargs):
    return DigestService(
        task_service=make_task_service(client),
        sender=sender,
        settings=DigestSettings(morning_cutoff_hour=cutoff),
        state_store=store,
        **kwargs,
    )


def test_compute_period_uses_cutoff() -> None:
    tz = timezone(timedelta(hours=-3))
    now = datetime(2025, 1, 2, 13, 30, tzinfo=tz)

    assert compute_period(now, CLI_MORNING_CUTOFF_HOUR) == Period.EVENING
    assert compute_period(now, HTTP_MORNING_CUTOFF_HOUR) == Period.MORNING


def test_day_bounds_cover_the_local_day() -> None:
    tz = timezone(timedelta(hours=-3))
    start, end = day_bounds(datetime(2025, 1, 2, 13, 30, tzinfo=tz))

    assert start == datetime(2025, 1, 2, 0, 0, tzinfo=tz)
    assert end.date() == date(2025, 1, 2)
    assert end == datetime(2025, 1, 2, 23, 59, 59, 999999, tzinfo=tz)


def test_already_sent_skips_queries_and_send(tmp_path) -> None:
    store = SendStateStore(tmp_path / "state.json")
    store.write(SendRecord(date=date(2025, 1, 2), period=Period.MORNING))
    client = DummyNotionClient()
    sender = DummySender()

    result = _service(client, sender, store).run(_utc(12))  # 09:00 local

    assert result.outcome == DigestOutcome.SKIPPED
    assert client.filters == []
    assert sender.messages == []


def test_stale_record_runs_two_queries_and_one_send(tmp_path) -> None:
    store = SendStateStore(tmp_path / "state.json")
    store.write(SendRecord(date=date(2025, 1, 1), period=Period.EVENING))
    client = DummyNotionClient(
        [
            TaskQueryResult(ok=True, tasks=[make_page("a-1", title="Due A", status="A fazer")]),
            TaskQueryResult(ok=True, tasks=[]),
        ]
    )
    sender = DummySender()

    result = _service(client, sender, store).run(_utc(12))

    assert result.outcome == DigestOutcome.SENT
    assert result.period == Period.MORNING
    assert result.task_count == 1
    assert len(client.filters) == 2
    assert len(sender.messages) == 1
    assert sender.messages[0].body == (
        "*Bom dia! Estas são as tarefas para hoje:*\n"
        "• *<https://www.notion.so/a1|Due A>* – A fazer"
    )
    assert store.read() == SendRecord(date=date(2025, 1, 2), period=Period.MORNING)


def test_missing_record_sends_evening_digest(tmp_path) -> None:
    store = SendStateStore(tmp_path / "state.json")
    client = DummyNotionClient(
        [
            TaskQueryResult(ok=True, tasks=[make_page("a", title="Due")]),
            TaskQueryResult(ok=True, tasks=[]),
        ]
    )
    sender = DummySender()

    result = _service(client, sender, store).run(_utc(18))  # 15:00 local

    assert result.outcome == DigestOutcome.SENT
    assert result.period == Period.EVENING
    assert sender.messages[0].body == "*Resumo do dia – alterações:*\nNenhuma tarefa encontrada."
    assert store.read().period == Period.EVENING


def test_cutoff_hour_changes_selected_period() -> None:
    sender = DummySender()

    # 14:00 local: CLI デフォルト (12) では夜、HTTP デフォルト (15) では朝
    cli = _service(DummyNotionClient(), sender, cutoff=CLI_MORNING_CUTOFF_HOUR).run(_utc(17))
    http = _service(DummyNotionClient(), sender, cutoff=HTTP_MORNING_CUTOFF_HOUR).run(_utc(17))

    assert cli.period == Period.EVENING
    assert http.period == Period.MORNING


def test_send_failure_does_not_update_store(tmp_path) -> None:
    store = SendStateStore(tmp_path / "state.json")
    client = DummyNotionClient()
    sender = DummySender(fail=True)

    result = _service(client, sender, store).run(_utc(12))

    assert result.outcome == DigestOutcome.FAILED
    assert "500" in result.error
    assert store.read() is None


def test_send_failure_is_raised_when_configured(tmp_path) -> None:
    store = SendStateStore(tmp_path / "state.json")
    sender = DummySender(fail=True)
    service = _service(DummyNotionClient(), sender, store, raise_on_notification_error=True)

    with pytest.raises(NotificationError):
        service.run(_utc(12))

    assert store.read() is None


def test_query_failure_is_reported_visibly() -> None:
    client = DummyNotionClient(
        [
            TaskQueryResult.failure("Notion API error: 502 Bad Gateway"),
            TaskQueryResult(ok=True, tasks=[]),
        ]
    )
    sender = DummySender()

    result = _service(client, sender).run(_utc(12))

    assert result.outcome == DigestOutcome.SENT
    assert result.query_failures == ["Notion API error: 502 Bad Gateway"]
    message = sender.messages[0]
    assert message.severity == NotificationSeverity.WARNING
    assert "Nenhuma tarefa encontrada." not in message.body
    assert "502 Bad Gateway" in message.body


def test_force_bypasses_send_record(tmp_path) -> None:
    store = SendStateStore(tmp_path / "state.json")
    store.write(SendRecord(date=date(2025, 1, 2), period=Period.MORNING))
    sender = DummySender()

    result = _service(DummyNotionClient(), sender, store).run(_utc(12), force=True)

    assert result.outcome == DigestOutcome.SENT
    assert len(sender.messages) == 1


def test_period_override() -> None:
    sender = DummySender()

    result = _service(DummyNotionClient(), sender).run(_utc(12), period=Period.EVENING)

    assert result.period == Period.EVENING
    assert sender.messages[0].body.startswith("*Resumo do dia")


def test_held_run_lock_prevents_second_run(tmp_path) -> None:
    lock = RunLock()
    client = DummyNotionClient()
    sender = DummySender()
    store = SendStateStore(tmp_path / "state.json")
    service = _service(client, sender, store, run_lock=lock)

    assert lock.acquire() is True
    try:
        result = service.run(_utc(12))
    finally:
        lock.release()

    assert result.outcome == DigestOutcome.ALREADY_RUNNING
    assert client.filters == []
    assert sender.messages == []
    assert store.read() is None

    # ロック解放後は通常どおり実行できる
    assert service.run(_utc(12)).outcome == DigestOutcome.SENT
    assert lock.locked is False


def test_lock_released_after_send_error(tmp_path) -> None:
    lock = RunLock()
    service = _service(
        DummyNotionClient(),
        DummySender(fail=True),
        run_lock=lock,
        raise_on_notification_error=True,
    )

    with pytest.raises(NotificationError):
        service.run(_utc(12))

    assert lock.locked is False


def test_build_task_service_uses_settings() -> None:
    settings = DigestSettings(
        status_property="Estado",
        due_property="Prazo",
        done_status="Feito",
        in_progress_status="Fazendo",
    )

    service = build_task_service(settings)

    assert service.status_property == "Estado"
    assert service.due_property == "Prazo"
    assert service.done_status == "Feito"
    assert service.in_progress_status == "Fazendo"
