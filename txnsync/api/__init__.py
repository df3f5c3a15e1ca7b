"""API package: the development transaction server's FastAPI routes, dependencies and in-memory store."""

from .dependencies import get_agent, get_settings, get_store  # noqa: F401
from .routes import router  # noqa: F401
