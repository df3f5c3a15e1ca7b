"""Agents package: categorization agents used by the development server's background classifier."""

from .base import BaseAgent, CategorizationResult  # noqa: F401
from .keyword_agent import KeywordAgent  # noqa: F401
