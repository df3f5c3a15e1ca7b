"""TransactionList: the handle a presentation layer holds for one live, paginated transaction view.

It owns the ``QueryModel`` (mutated only through ``set_filters``/``set_page``), composes a ``FetchOrchestrator``
with a ``PollSupervisor`` and exposes ``{transactions, pagination, is_loading, error}``. Nothing here raises on
request failures; callers observe them through ``error``.
"""

import asyncio
from collections.abc import Callable
from types import TracebackType

from txnsync.core.errors import InvalidQueryError
from txnsync.core.models import ListState, PaginationMeta, QueryModel, TransactionView
from txnsync.core.query import default_query, with_filters, with_page
from txnsync.core.settings import Settings, get_settings
from txnsync.core.utils import get_logger
from txnsync.workers.fetch_orchestrator import (
    FetchOrchestrator,
    Listener,
    Mapper,
    TransactionSource,
    done_future,
)
from txnsync.workers.poll_supervisor import PollState, PollSupervisor

logger = get_logger("txnsync.transaction_list")


class TransactionList:
    """Explicitly constructed, explicitly disposed transaction list synchronizer."""

    def __init__(
        self,
        api: TransactionSource,
        settings: Settings | None = None,
        initial_month: str | None = None,
        query: QueryModel | None = None,
        mapper: Mapper | None = None,
    ) -> None:
        """Initialize the list with default filters for ``initial_month`` (or an explicit query)."""
        self.settings = settings or get_settings()
        self._query = query or default_query(self.settings, initial_month)
        extra = {"mapper": mapper} if mapper is not None else {}
        self._orchestrator = FetchOrchestrator(
            api, lambda: self._query, self.settings, on_settled=self._on_settled, **extra
        )
        self._poller = PollSupervisor(
            self._orchestrator.refetch,
            self.settings.poll_interval_seconds,
            is_busy=lambda: self._orchestrator.state.is_loading,
        )
        self._disposed = False

    @property
    def query(self) -> QueryModel:
        """Current filters and page."""
        return self._query

    @property
    def state(self) -> ListState:
        """Current state snapshot."""
        return self._orchestrator.state

    @property
    def transactions(self) -> tuple[TransactionView, ...]:
        """Mapped transactions of the last good response."""
        return self._orchestrator.state.transactions

    @property
    def pagination(self) -> PaginationMeta | None:
        """Pagination of the last good response, if any."""
        return self._orchestrator.state.pagination

    @property
    def is_loading(self) -> bool:
        """True exactly while the most recent request is outstanding."""
        return self._orchestrator.state.is_loading

    @property
    def error(self) -> Exception | None:
        """Failure of the most recent settled request, if any."""
        return self._orchestrator.state.error

    @property
    def poll_state(self) -> PollState:
        """State of the categorization poll supervisor."""
        return self._poller.state

    @property
    def disposed(self) -> bool:
        """Whether ``dispose()`` has been called."""
        return self._disposed

    def start(self) -> "asyncio.Future[None]":
        """Issue the initial fetch."""
        return self.refetch()

    def set_filters(self, **changes: object) -> "asyncio.Future[None]":
        """Merge filter changes (resetting the page unless only page/limit change) and fetch.

        A change that cannot be merged (an unknown field name) is reported through ``error`` and nothing is fetched.
        """
        if self._disposed:
            return self.refetch()
        try:
            self._query = with_filters(self._query, **changes)
        except (TypeError, ValueError) as exc:
            return self._reject(f"Cannot apply filters {changes}", exc)
        logger.info(f"Filters changed: {changes} -> page={self._query.page}")
        return self.refetch()

    def set_page(self, page: object) -> "asyncio.Future[None]":
        """Move to ``page``, clamped to ``[1, totalPages]`` once ``totalPages`` is known, and fetch."""
        if self._disposed:
            return self.refetch()
        pagination = self.pagination
        if isinstance(page, int) and pagination is not None and pagination.total_pages > 0:
            page = min(page, pagination.total_pages)
        try:
            self._query = with_page(self._query, page)
        except (TypeError, ValueError) as exc:
            return self._reject(f"Cannot move to page {page!r}", exc)
        return self.refetch()

    def refetch(self) -> "asyncio.Future[None]":
        """Fetch the current query again; never raises."""
        return self._orchestrator.refetch()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback invoked with every new state snapshot."""
        return self._orchestrator.subscribe(listener)

    def dispose(self) -> None:
        """Stop polling and ignore every outstanding response. Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        self._poller.dispose()
        self._orchestrator.dispose()
        logger.debug("Transaction list disposed")

    async def __aenter__(self) -> "TransactionList":
        """Start fetching on entering the async context."""
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Dispose on exit."""
        self.dispose()

    def _on_settled(self, state: ListState) -> None:
        self._poller.observe(state.transactions)
        pagination = state.pagination
        page = self._query.page
        if isinstance(page, int) and pagination is not None and 0 < pagination.total_pages < page:
            logger.info(f"Page {page} is past the last page {pagination.total_pages}, clamping")
            self._query = with_page(self._query, pagination.total_pages)
            self._orchestrator.refetch()

    def _reject(self, message: str, exc: Exception) -> "asyncio.Future[None]":
        error = InvalidQueryError(f"{message}: {exc}")
        error.__cause__ = exc
        self._orchestrator.report_error(error)
        return done_future()
