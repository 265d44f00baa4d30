# backend/task_digest/api/__init__.py

"""
HTTP エントリーポイント用のルーター群。
"""
