# backend/task_digest/main.py

"""
HTTP エントリーポイント。

- /api/send: 呼び出されるたびにダイジェストを組み立てて送信する
  （cron 付きのサーバーレス環境などから叩く想定）
- /health: ヘルスチェック
"""

from fastapi import FastAPI

from task_digest.api.send import router as send_router
from task_digest.utils.logging import configure_logging


def create_app() -> FastAPI:
    """
    FastAPI アプリケーションファクトリ。
    """
    configure_logging()
    app = FastAPI(title="Notion Task Digest")

    app.include_router(send_router)

    @app.get("/health", tags=["health"])
    def health_check() -> dict:
        """
        簡易ヘルスチェックエンドポイント。
        """
        return {"status": "ok"}

    return app


# uvicorn 実行時のエントリーポイント
app = create_app()
