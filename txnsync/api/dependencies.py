"""FastAPI dependencies for DI (settings, store, agent).

The store is a process-wide singleton so that background categorization and listing requests see the same
records; tests replace it through ``app.dependency_overrides``.
"""

from functools import lru_cache

from txnsync.agents.keyword_agent import KeywordAgent
from txnsync.api.store import TransactionStore
from txnsync.core.settings import get_settings  # noqa: F401


@lru_cache(maxsize=1)
def get_store() -> TransactionStore:
    """Provide the shared in-memory transaction store."""
    return TransactionStore()


def get_agent() -> KeywordAgent:
    """Provide a categorization agent instance for dependency injection."""
    return KeywordAgent()
