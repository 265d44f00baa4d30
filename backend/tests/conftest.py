# backend/tests/conftest.py
"""
Pytest configuration for task digest backend tests.

- Ensures that the project root (backend/) is added to sys.path
  so that `import task_digest.*` works correctly in tests.
- Ensures required environment variables for tests are set
  with safe dummy values (NOTION_API_KEY, NOTION_DATABASE_ID, SLACK_WEBHOOK_URL).
- Clears the lru_cache'd config getters between tests so that
  monkeypatched environment variables are picked up.
"""

import os
import sys
from pathlib import Path

import pytest


def _ensure_project_root_in_sys_path() -> None:
    # This file is located at: backend/tests/conftest.py
    # parents[1] -> backend/
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)

    if project_root_str not in sys.path:
        # Insert at the beginning so it has priority over site-packages, etc.
        sys.path.insert(0, project_root_str)


def _ensure_test_env_vars() -> None:
    """
    Set dummy environment variables required for tests.

    These values are only for local testing and do NOT contain real secrets.
    In real environments, proper values should be provided via .env or system env.
    """
    os.environ.setdefault("NOTION_API_KEY", "dummy-notion-api-key-for-tests")
    os.environ.setdefault("NOTION_DATABASE_ID", "dummy-notion-db-id-for-tests")
    os.environ.setdefault("SLACK_WEBHOOK_URL", "https://hooks.slack.test/services/dummy")


_ensure_project_root_in_sys_path()
_ensure_test_env_vars()


@pytest.fixture(autouse=True)
def _clear_config_caches():
    from task_digest.automation.config import get_digest_settings
    from task_digest.notifications.config import get_slack_config
    from task_digest.notion.config import get_notion_config

    for getter in (get_notion_config, get_slack_config, get_digest_settings):
        getter.cache_clear()
    yield
    for getter in (get_notion_config, get_slack_config, get_digest_settings):
        getter.cache_clear()
