# backend/task_digest/automation/state.py

"""
「最後にいつ送ったか」を 1 件だけ保持する送信記録ストア。

- read(): ファイルが無い / 壊れている場合は None（例外は投げない）
- write(): 書き込みに失敗してもログを出して False を返すだけ

複数プロセスからの同時書き込みは考慮していない（後勝ち）。
"""

from __future__ import annotations

import datetime as dt
import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from .schemas import Period, SendRecord

logger = logging.getLogger(__name__)


class SendStateStore:
    """
    SendRecord を JSON ファイル 1 つに保存するストア。
    """

    def __init__(self, path: Union[str, Path] = "./.last_send.json") -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> Optional[SendRecord]:
        """
        保存済みの SendRecord を返す。読めない場合は「未送信」とみなして None。
        """
        try:
            content = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read send state file %s: %s", self._path, exc)
            return None

        try:
            data = json.loads(content)
            return SendRecord.model_validate(data)
        except (ValueError, ValidationError) as exc:
            logger.warning("Ignoring corrupt send state file %s: %s", self._path, exc)
            return None

    def write(self, record: SendRecord) -> bool:
        """
        SendRecord を上書き保存する。失敗時はログに残して False を返す。
        """
        payload = {"date": record.date.isoformat(), "period": record.period.value}
        try:
            self._path.write_text(json.dumps(payload), encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to save send state file %s: %s", self._path, exc)
            return False
        return True

    def already_sent(self, date: dt.date, period: Period) -> bool:
        """
        (date, period) のダイジェストが送信済みかどうか。
        """
        record = self.read()
        return record is not None and record.date == date and record.period == period
