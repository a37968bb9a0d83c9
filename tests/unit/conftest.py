# tests/unit/conftest.py
"""单元测试专用 fixtures.

提供环境隔离相关的通用 fixtures.
"""

import pytest

_CLIENT_ENV_KEYS = (
    "FITTRACK_API_BASE_URL",
    "FITTRACK_REQUEST_TIMEOUT",
    "FITTRACK_SEARCH_DEBOUNCE",
    "FITTRACK_ROWS_PER_PAGE",
    "FITTRACK_TOAST_HISTORY",
    "FITTRACK_LOGIN_PATH",
)


@pytest.fixture(autouse=True)
def _unit_test_env(monkeypatch):
    """为 unit tests 强制注入隔离环境变量.

    目标:
    - unit tests 不依赖外部数据库等基础设施
    - 避免开发者本机环境变量影响测试稳定性
    """
    monkeypatch.setenv("FLASK_ENV", "testing")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    monkeypatch.delenv("FLASK_DEBUG", raising=False)
    for key in _CLIENT_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
