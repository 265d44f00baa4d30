# backend/task_digest/api/send.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from task_digest.automation.config import (
    HTTP_MORNING_CUTOFF_HOUR,
    REQUIRED_ENV_VARS,
    get_digest_settings,
)
from task_digest.automation.digest_service import DigestService, build_task_service
from task_digest.automation.lock import NullRunLock
from task_digest.notifications.factory import get_notification_sender
from task_digest.utils.config import ConfigurationError, require_env

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["digest"])


# Dependency provider
# - テスト時に FastAPI dependency_overrides で差し替え可能にする
def get_digest_service() -> DigestService:
    """
    リクエストごとに DigestService を組み立てる。

    - 送信記録ファイルは参照も更新もしない（呼び出し側のスケジュールに任せる）
    - 送信失敗は例外として上げ、500 に変換する
    """
    try:
        require_env(REQUIRED_ENV_VARS)
    except ConfigurationError as exc:
        logger.error("%s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Missing required configuration.", "missing": exc.missing},
        ) from exc

    settings = get_digest_settings(HTTP_MORNING_CUTOFF_HOUR)
    return DigestService(
        task_service=build_task_service(settings),
        sender=get_notification_sender(),
        settings=settings,
        state_store=None,
        run_lock=NullRunLock(),
        raise_on_notification_error=True,
    )


@router.api_route(
    "/send",
    methods=["GET", "POST"],
    summary="Send the task digest for the current period",
)
def send_digest(service: DigestService = Depends(get_digest_service)) -> dict:
    """
    現在の期間のダイジェストを Notion から組み立てて Slack に送信する。

    - 正常系: 200 と送信内容のサマリ
    - 異常系: 500 とエラーメッセージ（スタックトレースは返さない）
    """
    try:
        result = service.run()
    except Exception as exc:  # noqa: BLE001
        logger.exception("Digest execution failed.")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": f"Execution error: {exc}"},
        ) from exc

    return {
        "status": result.outcome.value,
        "date": result.date.isoformat(),
        "period": result.period.value,
        "task_count": result.task_count,
        "query_failures": result.query_failures,
    }
