# backend/task_digest/automation/__init__.py

"""
ダイジェスト自動送信用モジュール群。

- schemas: Period / SendRecord / 実行結果の Pydantic モデル
- state: 送信記録ファイルのストア
- lock: 同一プロセス内の二重実行防止ロック
- formatter: Slack 向けテキスト整形
- digest_service: query → 整形 → 送信 → 記録 の実行本体
- jobs: cron などから呼ぶ CLI
"""
