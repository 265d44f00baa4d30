# backend/task_digest/notion/__init__.py

"""
Notion 連携用モジュール群。

主な責務:
- フィルタ木を組み立ててタスクデータベースを query する
- 生ページを内部ドメインモデル (Task) に変換する
"""
