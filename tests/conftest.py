"""Shared fixtures: isolate runtime configuration between tests."""

import pytest

from common import http_client
from constants import Constants

_MUTABLE = (
    "PROXY_URL",
    "PRIVATE_PATTERNS",
    "REQUEST_TIMEOUT",
    "LIST_CONCURRENCY_CACHED",
    "LIST_CONCURRENCY_UNCACHED",
)


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch):
    for name in _MUTABLE:
        monkeypatch.setattr(Constants, name, getattr(Constants, name))
    for var in ("GOPROXY", "GOPRIVATE", "GONOPROXY", "GOMAJOR_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    http_client.clear_cache()
    yield
    http_client.clear_cache()
