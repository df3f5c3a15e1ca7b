"""Base agent abstraction for transaction categorization agents.

This module defines the abstract base class for all categorization agents, enforcing a standard interface for
choosing a category key for a transaction description.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel

FALLBACK_CATEGORY_KEY = "other"


class CategorizationResult(BaseModel):
    """Outcome of categorizing one description."""

    category_key: str
    confidence: float
    reasoning: str = ""


class BaseAgent(ABC):
    """Abstract base class for all categorization agents."""

    @abstractmethod
    def categorize(self, description: str, category_keys: list[str]) -> CategorizationResult:
        """Pick one of ``category_keys`` for ``description``."""
