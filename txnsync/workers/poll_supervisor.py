"""Categorization poll supervisor.

Re-triggers a refetch on a fixed cadence while the latest applied result still contains transactions whose
categorization is pending. The supervisor owns a single ``call_later`` handle and never performs I/O itself. A tick
that finds the previous request still outstanding issues nothing, so a source slower than the interval is never
superseded by its own poll.
"""

import asyncio
from collections.abc import Callable, Iterable
from enum import StrEnum

from txnsync.core.models import TransactionView
from txnsync.core.utils import get_logger

logger = get_logger("txnsync.poll")


class PollState(StrEnum):
    """States of the poll supervisor."""

    IDLE = "idle"
    POLLING = "polling"
    TORN_DOWN = "torn_down"


class PollSupervisor:
    """Arms a repeating timer while pending categorizations are visible."""

    def __init__(
        self,
        refetch: Callable[[], object],
        interval: float,
        loop: asyncio.AbstractEventLoop | None = None,
        is_busy: Callable[[], bool] | None = None,
    ) -> None:
        """Initialize with the refetch trigger, the polling interval in seconds and an optional busy check."""
        if interval <= 0:
            msg = f"Polling interval must be positive, got {interval}"
            raise ValueError(msg)
        self._refetch = refetch
        self._is_busy = is_busy or (lambda: False)
        self.interval = interval
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._state = PollState.IDLE
        self.ticks = 0
        self.skipped = 0

    @property
    def state(self) -> PollState:
        """Current supervisor state."""
        return self._state

    @property
    def armed(self) -> bool:
        """Whether a timer is currently scheduled."""
        return self._handle is not None

    def observe(self, transactions: Iterable[TransactionView]) -> PollState:
        """Inspect a freshly applied result and arm or disarm the timer in the same step."""
        if self._state is PollState.TORN_DOWN:
            return self._state
        pending = sum(1 for view in transactions if view.is_pending)
        if pending and self._state is PollState.IDLE:
            logger.info(f"{pending} transaction(s) awaiting categorization, polling every {self.interval}s")
            self._state = PollState.POLLING
            self._arm()
        elif not pending and self._state is PollState.POLLING:
            logger.info("No pending categorizations left, polling stopped")
            self._cancel()
            self._state = PollState.IDLE
        return self._state

    def dispose(self) -> None:
        """Cancel any armed timer; no tick fires afterwards."""
        if self._state is not PollState.TORN_DOWN:
            logger.debug(f"Poll supervisor torn down from state={self._state}")
        self._cancel()
        self._state = PollState.TORN_DOWN

    def _arm(self) -> None:
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(self.interval, self._tick)

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self) -> None:
        self._handle = None
        if self._state is not PollState.POLLING:
            return
        self._arm()
        if self._is_busy():
            self.skipped += 1
            logger.debug("Poll tick skipped, previous request still outstanding")
            return
        self.ticks += 1
        logger.debug(f"Poll tick #{self.ticks}")
        try:
            self._refetch()
        except Exception:
            logger.exception("Refetch triggered by poll tick failed")
