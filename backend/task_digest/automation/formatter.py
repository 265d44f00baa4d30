# backend/task_digest/automation/formatter.py

"""
タスク一覧を Slack 向けのテキストに整形する。

外部 I/O は一切行わない純粋関数だけを置く。
"""

from __future__ import annotations

from typing import Sequence

from task_digest.notion.schemas import Task

NO_TASKS_TEXT = "Nenhuma tarefa encontrada."
NO_TITLE_TEXT = "Sem título"
NO_STATUS_TEXT = "Sem status"
QUERY_FAILED_TEXT = "⚠️ Não foi possível consultar o Notion"


def format_task_line(task: Task) -> str:
    """
    `• *<url|name>* – status` 形式の 1 行を返す。
    """
    name = task.title or NO_TITLE_TEXT
    status = task.status or NO_STATUS_TEXT
    return f"• *<{task.url}|{name}>* – {status}"


def format_tasks(tasks: Sequence[Task], title: str) -> str:
    """
    見出し行 + タスクごとの箇条書きを返す。タスクが無ければ「見つからない」旨の 1 行。
    """
    header = f"*{title}*"
    if not tasks:
        return f"{header}\n{NO_TASKS_TEXT}"

    lines = [format_task_line(task) for task in tasks]
    return header + "\n" + "\n".join(lines)


def format_query_failure(title: str, error: str | None) -> str:
    """
    Notion の query に失敗した場合のメッセージ。空のダイジェストとは区別して表示する。
    """
    detail = f": {error}" if error else "."
    return f"*{title}*\n{QUERY_FAILED_TEXT}{detail}"
