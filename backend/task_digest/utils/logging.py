# backend/task_digest/utils/logging.py

"""
ログ出力の初期化ユーティリティ。

各モジュールは `logging.getLogger(__name__)` を使うだけにして、
ハンドラやフォーマットの設定はエントリーポイントからここを呼んで行う。
"""

from __future__ import annotations

import logging
from typing import Optional

from .config import get_env

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    ルートロガーを設定する。

    level を省略した場合は LOG_LEVEL 環境変数（デフォルト INFO）を使う。
    既にハンドラが設定済みの場合、basicConfig は何もしない。
    """
    level_name = (level or get_env("LOG_LEVEL", default="INFO", required=False)).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )
