# backend/task_digest/automation/config.py

"""
ダイジェスト実行に関する設定値。

朝 / 夜の境目となる時刻は CLI と HTTP でデフォルトが異なる
（CLI: 12 時, HTTP: 15 時）。どちらも DIGEST_MORNING_CUTOFF_HOUR で上書きできる。
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from task_digest.utils.config import get_env, get_env_int

CLI_MORNING_CUTOFF_HOUR = 12
HTTP_MORNING_CUTOFF_HOUR = 15
DEFAULT_TIMEZONE = "America/Sao_Paulo"

REQUIRED_ENV_VARS = ("NOTION_API_KEY", "NOTION_DATABASE_ID", "SLACK_WEBHOOK_URL")

MORNING_TITLE = "Bom dia! Estas são as tarefas para hoje:"
EVENING_TITLE = "Resumo do dia – alterações:"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DigestSettings:
    """ダイジェスト生成・送信の設定値コンテナ。"""

    timezone: str = DEFAULT_TIMEZONE
    morning_cutoff_hour: int = CLI_MORNING_CUTOFF_HOUR
    state_file: str = "./.last_send.json"
    status_property: str = "Status"
    due_property: str = "Due Date"
    done_status: str = "Concluída"
    in_progress_status: str = "Em Progresso"
    morning_title: str = MORNING_TITLE
    evening_title: str = EVENING_TITLE


def _valid_timezone(name: str) -> str:
    """
    IANA タイムゾーン名として解決できなければ警告を出して DEFAULT_TIMEZONE を返す。
    """
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        logger.warning(
            "Unknown DIGEST_TIMEZONE %r (%s); falling back to %s.", name, exc, DEFAULT_TIMEZONE
        )
        return DEFAULT_TIMEZONE
    return name


@lru_cache()
def get_digest_settings(default_cutoff_hour: int = CLI_MORNING_CUTOFF_HOUR) -> DigestSettings:
    """
    環境変数からダイジェスト設定を読み込む。必須項目は無い。

    任意:
      - DIGEST_TIMEZONE            (デフォルト: America/Sao_Paulo) 解決できない名前はデフォルトに戻す
      - DIGEST_MORNING_CUTOFF_HOUR (デフォルト: default_cutoff_hour)
      - DIGEST_STATE_FILE          (デフォルト: ./.last_send.json)
      - DIGEST_STATUS_PROPERTY     (デフォルト: Status)
      - DIGEST_DUE_DATE_PROPERTY   (デフォルト: Due Date)
      - DIGEST_DONE_STATUS         (デフォルト: Concluída)
      - DIGEST_IN_PROGRESS_STATUS  (デフォルト: Em Progresso)
    """
    cutoff = get_env_int("DIGEST_MORNING_CUTOFF_HOUR", default_cutoff_hour)
    if not 0 <= cutoff <= 24:
        cutoff = default_cutoff_hour

    return DigestSettings(
        timezone=_valid_timezone(
            get_env("DIGEST_TIMEZONE", default=DEFAULT_TIMEZONE, required=False)
        ),
        morning_cutoff_hour=cutoff,
        state_file=get_env("DIGEST_STATE_FILE", default="./.last_send.json", required=False),
        status_property=get_env("DIGEST_STATUS_PROPERTY", default="Status", required=False),
        due_property=get_env("DIGEST_DUE_DATE_PROPERTY", default="Due Date", required=False),
        done_status=get_env("DIGEST_DONE_STATUS", default="Concluída", required=False),
        in_progress_status=get_env(
            "DIGEST_IN_PROGRESS_STATUS",
            default="Em Progresso",
            required=False,
        ),
    )
