"""Fetch orchestration for the transaction list.

One request is issued per ``refetch()``; every request captures the generation token current at issue time and
its response is applied only if that token is still the latest one. Earlier requests that resolve late are
dropped, so the exposed ``ListState`` always reflects the most recently issued request.
"""

import asyncio
from collections.abc import Callable
from typing import Any, Protocol

from txnsync.core.errors import MalformedResponseError, RecordMappingError, TransactionApiError
from txnsync.core.models import ListState, QueryModel, TransactionPage, TransactionView
from txnsync.core.query import to_params
from txnsync.core.settings import Settings
from txnsync.core.utils import get_logger
from txnsync.services.mapper import map_to_view

logger = get_logger("txnsync.orchestrator")

Listener = Callable[[ListState], None]
Mapper = Callable[[Any, Settings], TransactionView]


class TransactionSource(Protocol):
    """Anything that can fetch a page of raw transaction records."""

    async def list_transactions(self, params: dict[str, str]) -> TransactionPage:
        """Fetch one page for the given wire parameters."""


def done_future() -> "asyncio.Future[None]":
    """Return an already resolved future on the running loop."""
    future = asyncio.get_running_loop().create_future()
    future.set_result(None)
    return future


class FetchOrchestrator:
    """Single writer of the list state; turns query snapshots into applied or dropped responses."""

    def __init__(
        self,
        api: TransactionSource,
        query_provider: Callable[[], QueryModel],
        settings: Settings,
        on_settled: Listener | None = None,
        mapper: Mapper = map_to_view,
    ) -> None:
        """Initialize with a transaction source and a callable returning the query current at issue time."""
        self.api = api
        self.settings = settings
        self._query_provider = query_provider
        self._on_settled = on_settled
        self._mapper = mapper
        self._generation = 0
        self._state = ListState()
        self._listeners: list[Listener] = []
        self._tasks: set[asyncio.Task[None]] = set()
        self._disposed = False

    @property
    def state(self) -> ListState:
        """Current snapshot."""
        return self._state

    @property
    def generation(self) -> int:
        """Token of the most recently issued request."""
        return self._generation

    @property
    def disposed(self) -> bool:
        """Whether ``dispose()`` has been called."""
        return self._disposed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for every state change; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def refetch(self) -> "asyncio.Future[None]":
        """Issue one request for the current query.

        Must be called from a running event loop. Never raises; the returned future resolves (without error)
        once the request has been applied or dropped.
        """
        if self._disposed:
            return done_future()
        self._generation += 1
        token = self._generation
        params = to_params(self._query_provider())
        logger.debug(f"Issuing transactions request gen={token} params={params}")
        self._write(self._state.model_copy(update={"is_loading": True}))
        task = asyncio.get_running_loop().create_task(self._run(token, params))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def report_error(self, error: Exception) -> None:
        """Expose ``error`` without issuing a request; data and the loading flag are kept."""
        if self._disposed:
            return
        logger.warning(f"Reporting error without a request: {error}")
        self._write(self._state.model_copy(update={"error": error}))

    def dispose(self) -> None:
        """Ignore every outstanding response from now on.

        In-flight requests are left to finish at the transport level so that awaiting a returned future never
        raises; their responses are dropped.
        """
        if self._disposed:
            return
        self._disposed = True
        self._generation += 1
        self._listeners.clear()
        self._on_settled = None
        logger.debug(f"Orchestrator disposed with {len(self._tasks)} request(s) in flight")

    async def _run(self, token: int, params: dict[str, str]) -> None:
        try:
            page = await self.api.list_transactions(params)
        except MalformedResponseError as exc:
            logger.warning(f"Malformed response for gen={token}: {exc}")
            self._settle(token, {"transactions": (), "pagination": None, "error": exc})
            return
        except TransactionApiError as exc:
            logger.warning(f"Request gen={token} failed: {exc}")
            self._settle(token, {"error": exc})
            return
        except Exception as exc:
            logger.exception(f"Unexpected error fetching transactions gen={token}")
            self._settle(token, {"error": exc})
            return

        if not self._is_current(token):
            self._drop(token)
            return
        views = self._map_records(page.data)
        self._settle(token, {"transactions": views, "pagination": page.pagination, "error": None})

    def _map_records(self, records: list[Any]) -> tuple[TransactionView, ...]:
        views = []
        skipped = 0
        for raw in records:
            try:
                views.append(self._mapper(raw, self.settings))
            except RecordMappingError as exc:
                skipped += 1
                logger.warning(f"Skipping transaction record: {exc}")
        if skipped:
            logger.warning(f"Skipped {skipped} of {len(records)} transaction record(s)")
        return tuple(views)

    def _is_current(self, token: int) -> bool:
        return not self._disposed and token == self._generation

    def _drop(self, token: int) -> None:
        logger.debug(f"Dropping stale response gen={token} (current gen={self._generation})")

    def _settle(self, token: int, changes: dict[str, Any]) -> None:
        if not self._is_current(token):
            self._drop(token)
            return
        self._write(self._state.model_copy(update={**changes, "is_loading": False}), settled=True)

    def _write(self, state: ListState, *, settled: bool = False) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("State listener failed")
        # may issue a follow-up request, so it runs after listeners saw this state
        if settled and self._on_settled is not None:
            self._on_settled(state)
