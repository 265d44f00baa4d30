# backend/task_digest/utils/__init__.py

"""
設定読み込み・ログ初期化などの共通ユーティリティ。
"""
