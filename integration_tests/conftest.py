"""
Configuration for integration tests.

Keeps every test independent of the caller's environment and of the
module-level server state left behind by other tests.
"""

import pytest

from syntax_styler import server
from syntax_styler.cache import HighlightCache
from syntax_styler.config import CACHE_DIR_ENV


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Ignore any persistent cache directory configured by the user."""
    monkeypatch.delenv(CACHE_DIR_ENV, raising=False)


@pytest.fixture(autouse=True)
def fresh_server_state(isolated_environment):
    """Give each test a memory-only server cache and no HTTP transport override."""
    server.highlight_cache = HighlightCache(server.syntax_styler_global)
    yield
    server.http_transport = None
