# backend/task_digest/notifications/__init__.py

"""
通知レイヤ用モジュール群。

構成:
- schemas: 通知メッセージの共通スキーマ
- config: Slack Incoming Webhook の設定
- service: 通知送信インターフェースと実装（Slack Webhook / ログ出力）
- factory: エントリーポイントから使う Sender の生成
"""
