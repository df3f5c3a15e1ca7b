"""Pytest configuration: fast polling settings and a fresh scripted transaction source per test."""

import pytest

from tests.factories import ScriptedApi
from txnsync.core.settings import Settings

FAST_POLL_SECONDS = 0.05


@pytest.fixture
def settings() -> Settings:
    """Settings with a short polling interval so timer behaviour is observable quickly."""
    return Settings(poll_interval_seconds=FAST_POLL_SECONDS, api_base_url="http://testserver")


@pytest.fixture
def api() -> ScriptedApi:
    """A scripted transaction source that answers with an empty page unless told otherwise."""
    return ScriptedApi()
