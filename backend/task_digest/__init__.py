# backend/task_digest/__init__.py
"""
Notion -> Slack task digest application package.

This package contains:
- main: FastAPI application entrypoint (per-invocation /api/send)
- notion: Notion database query client and task parsing
- notifications: Slack webhook / logging senders
- automation: digest orchestration, send-state store and CLI jobs
"""
