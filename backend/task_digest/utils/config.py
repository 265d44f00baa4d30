# backend/task_digest/utils/config.py

"""
環境変数読み取り用のユーティリティ。
Notion / Slack / ダイジェスト設定のすべてで共通利用する。
"""

import os
from typing import Iterable, List, Optional


class EnvVarMissingError(RuntimeError):
    """必須環境変数が設定されていない場合に投げる例外。"""

    def __init__(self, name: str) -> None:
        super().__init__(f"Required environment variable '{name}' is not set.")
        self.name = name


class ConfigurationError(RuntimeError):
    """複数の必須環境変数をまとめて検証した結果、欠けているものがある場合の例外。"""

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing: List[str] = list(missing)
        super().__init__(
            "Missing required environment variables: " + ", ".join(self.missing)
        )


def get_env(
    name: str,
    default: Optional[str] = None,
    *,
    required: bool = True,
) -> str:
    """
    環境変数を取得するヘルパー。

    :param name: 環境変数名
    :param default: デフォルト値（required=False の場合のみ使用）
    :param required: True の場合、未設定なら例外を投げる
    :return: 文字列値
    """
    value = os.getenv(name)

    if value is None or value == "":
        if required:
            raise EnvVarMissingError(name)
        return default

    return value


def get_env_int(name: str, default: int) -> int:
    """
    整数の環境変数を取得するユーティリティ。

    - 未設定 or パース不能の場合は default を返す。
    """
    raw = get_env(name, default=str(default), required=False)
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def get_env_float(name: str, default: float) -> float:
    """float 版の get_env_int。"""
    raw = get_env(name, default=str(default), required=False)
    try:
        return float(raw)
    except (TypeError, ValueError):
        return default


def require_env(names: Iterable[str]) -> None:
    """
    指定した環境変数がすべて設定されているかを検証する。

    最初の 1 つで止めず、欠けている変数名をすべて集めて
    ConfigurationError として投げる。
    """
    missing = [name for name in names if not os.getenv(name)]
    if missing:
        raise ConfigurationError(missing)
