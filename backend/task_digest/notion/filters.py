# backend/task_digest/notion/filters.py

"""
Notion データベース query 用のフィルタ木。

AND / OR と、ステータス一致・日付一致・最終更新日時の範囲といった
葉条件を組み合わせ、`to_notion()` で Notion API の filter JSON に変換する。
呼び出しごとに組み立てるだけで、永続化はしない。
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Protocol, Sequence, Tuple


class TaskQueryFilter(Protocol):
    """フィルタ木のノードが満たすインターフェース。"""

    def to_notion(self) -> Dict[str, Any]:  # pragma: no cover - Protocol
        ...


@dataclass(frozen=True)
class And:
    children: Tuple[TaskQueryFilter, ...]

    def to_notion(self) -> Dict[str, Any]:
        return {"and": [child.to_notion() for child in self.children]}


@dataclass(frozen=True)
class Or:
    children: Tuple[TaskQueryFilter, ...]

    def to_notion(self) -> Dict[str, Any]:
        return {"or": [child.to_notion() for child in self.children]}


@dataclass(frozen=True)
class StatusEquals:
    property: str
    value: str

    def to_notion(self) -> Dict[str, Any]:
        return {"property": self.property, "status": {"equals": self.value}}


@dataclass(frozen=True)
class StatusDoesNotEqual:
    property: str
    value: str

    def to_notion(self) -> Dict[str, Any]:
        return {"property": self.property, "status": {"does_not_equal": self.value}}


@dataclass(frozen=True)
class DateEquals:
    property: str
    value: date

    def to_notion(self) -> Dict[str, Any]:
        return {"property": self.property, "date": {"equals": self.value.isoformat()}}


@dataclass(frozen=True)
class LastEditedBetween:
    """last_edited_time タイムスタンプが [on_or_after, on_or_before] に入る条件。"""

    on_or_after: datetime
    on_or_before: datetime

    def to_notion(self) -> Dict[str, Any]:
        return {
            "timestamp": "last_edited_time",
            "last_edited_time": {
                "on_or_after": self.on_or_after.isoformat(),
                "on_or_before": self.on_or_before.isoformat(),
            },
        }


def all_of(*children: TaskQueryFilter) -> And:
    return And(tuple(children))


def any_of(*children: TaskQueryFilter) -> Or:
    return Or(tuple(children))


def due_on_and_not_done(
    day: date,
    *,
    due_property: str,
    status_property: str,
    done_status: str,
) -> And:
    """
    朝のダイジェスト用: 期限が day で、まだ完了していないタスク。
    """
    return all_of(
        DateEquals(due_property, day),
        StatusDoesNotEqual(status_property, done_status),
    )


def edited_between_with_status(
    start: datetime,
    end: datetime,
    *,
    status_property: str,
    statuses: Sequence[str],
) -> And:
    """
    夜のダイジェスト用: start〜end の間に更新され、ステータスが statuses のいずれかのタスク。
    """
    return all_of(
        LastEditedBetween(start, end),
        any_of(*(StatusEquals(status_property, status) for status in statuses)),
    )
