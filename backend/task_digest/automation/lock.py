# backend/task_digest/automation/lock.py

"""
同一プロセス内での二重実行を防ぐためのロック。

グローバル変数ではなく DigestService に注入して使う。
別プロセス間の排他はしない。
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class RunLock:
    """
    ノンブロッキングで取得を試みるロック。

    取得できなかった場合は「既に実行中」とみなす。
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def acquire(self) -> bool:
        return self._lock.acquire(blocking=False)

    def release(self) -> None:
        self._lock.release()

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def hold(self) -> Iterator[bool]:
        """
        with 文用。取得できたかどうかを bool で返し、取得できた場合のみ解放する。
        """
        acquired = self.acquire()
        try:
            yield acquired
        finally:
            if acquired:
                self.release()


class NullRunLock(RunLock):
    """常に取得できるロック（HTTP エントリーポイントなど、排他不要な場合用）。"""

    def acquire(self) -> bool:
        return True

    def release(self) -> None:
        return None

    @property
    def locked(self) -> bool:
        return False
