# backend/tests/test_automation_state.py

import json
from datetime import date

from task_digest.automation.schemas import Period, SendRecord
from task_digest.automation.state import SendStateStore


def test_read_missing_file_returns_none(tmp_path) -> None:
    store = SendStateStore(tmp_path / "missing.json")

    assert store.read() is None


def test_read_corrupt_file_returns_none(tmp_path) -> None:
    path = tmp_path / "state.json"
    path.write_text("{not json", encoding="utf-8")

    assert SendStateStore(path).read() is None


def test_read_invalid_period_returns_none(tmp_path) -> None:
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"date": "2025-01-02", "period": "noon"}), encoding="utf-8")

    assert SendStateStore(path).read() is None


def test_write_uses_plain_json_format(tmp_path) -> None:
    path = tmp_path / "state.json"
    store = SendStateStore(path)

    assert store.write(SendRecord(date=date(2025, 1, 2), period=Period.EVENING)) is True

    assert json.loads(path.read_text(encoding="utf-8")) == {
        "date": "2025-01-02",
        "period": "evening",
    }
    assert store.already_sent(date(2025, 1, 2), Period.EVENING) is True
    assert store.already_sent(date(2025, 1, 2), Period.MORNING) is False
    assert store.already_sent(date(2025, 1, 3), Period.EVENING) is False


def test_write_failure_is_swallowed(tmp_path) -> None:
    # 書き込み先がディレクトリなので OSError になる
    store = SendStateStore(tmp_path)

    assert store.write(SendRecord(date=date(2025, 1, 2), period=Period.MORNING)) is False


def test_read_non_utf8_file_returns_none(tmp_path) -> None:
    path = tmp_path / "state.json"
    path.write_bytes(b"\xff\xfe\x00garbage")
    store = SendStateStore(path)

    assert store.read() is None
    assert store.already_sent(date(2025, 1, 2), Period.MORNING) is False
