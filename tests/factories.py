"""Factories for raw transaction records, pages and a scripted transaction source used across tests."""

import asyncio
import math
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from txnsync.core.models import TransactionPage


def make_record(txn_id: int = 1, status: str = "completed", **overrides: Any) -> dict[str, Any]:
    """Build a raw transaction record in wire shape."""
    record: dict[str, Any] = {
        "id": txn_id,
        "type": "expense",
        "amount": 5000,
        "description": f"Transaction {txn_id}",
        "date": "2025-11-15",
        "is_ai_categorized": status == "completed",
        "categorization_status": status,
        "category": {"id": 1, "key": "groceries", "name": "Zakupy spożywcze"} if status == "completed" else None,
    }
    record.update(overrides)
    return record


def make_page(records: list[Any], page: int = 1, limit: int = 20, total: int | None = None) -> dict[str, Any]:
    """Wrap records into a ``GET /api/transactions`` body."""
    total = len(records) if total is None else total
    return {
        "data": records,
        "pagination": {"page": page, "limit": limit, "total": total, "totalPages": math.ceil(total / limit)},
    }


@dataclass
class Step:
    """One scripted answer: a body or an error, optionally held back until ``gate`` is set or ``delay`` elapsed."""

    body: dict[str, Any] | None = None
    error: Exception | None = None
    gate: asyncio.Event | None = None
    delay: float = 0.0


@dataclass
class ScriptedApi:
    """Transaction source answering from a queue of steps, then repeating ``fallback``."""

    fallback: Step = field(default_factory=lambda: Step(body=make_page([])))
    steps: deque = field(default_factory=deque)
    calls: list[dict[str, str]] = field(default_factory=list)

    def queue(
        self,
        body: dict[str, Any] | None = None,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
        delay: float = 0.0,
    ) -> Step:
        """Append a step and return it."""
        step = Step(body=body, error=error, gate=gate, delay=delay)
        self.steps.append(step)
        return step

    async def list_transactions(self, params: dict[str, str]) -> TransactionPage:
        """Answer with the next scripted step."""
        self.calls.append(params)
        step = self.steps.popleft() if self.steps else self.fallback
        if step.gate is not None:
            await step.gate.wait()
        if step.delay:
            await asyncio.sleep(step.delay)
        if step.error is not None:
            raise step.error
        return TransactionPage.model_validate(step.body)


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the event loop until ``predicate`` holds, failing after ``timeout`` seconds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            msg = "Condition not met before timeout"
            raise AssertionError(msg)
        await asyncio.sleep(0.005)
