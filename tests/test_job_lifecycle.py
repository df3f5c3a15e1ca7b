"""Integration test for the categorization lifecycle: create, background categorization, listing."""

import asyncio
from collections.abc import Iterator
from datetime import date

import httpx
import pytest
from fastapi.testclient import TestClient

from main import app
from tests.factories import wait_until
from txnsync.agents.base import BaseAgent, CategorizationResult
from txnsync.api.dependencies import get_agent, get_store
from txnsync.api.store import TransactionStore
from txnsync.core.models import CategorizationStatus, TransactionKind
from txnsync.core.settings import Settings
from txnsync.services.transaction_api import TransactionApi
from txnsync.workers.poll_supervisor import PollState
from txnsync.workers.transaction_list import TransactionList

client = TestClient(app)
HTTP_201_CREATED = 201
HTTP_400_BAD_REQUEST = 400


class BrokenAgent(BaseAgent):
    """Agent that always fails."""

    def categorize(self, description: str, category_keys: list[str]) -> CategorizationResult:
        """Raise to simulate a classifier outage."""
        msg = f"classifier unavailable for {description!r} ({len(category_keys)} categories)"
        raise RuntimeError(msg)


@pytest.fixture
def store() -> Iterator[TransactionStore]:
    """Serve a fresh store for the duration of one test."""
    fresh = TransactionStore()
    app.dependency_overrides[get_store] = lambda: fresh
    yield fresh
    app.dependency_overrides.clear()


def test_created_expense_is_categorized_in_background(store: TransactionStore) -> None:
    """An uncategorized expense is created pending and completed by the background task."""
    response = client.post(
        "/api/transactions",
        json={"type": "expense", "amount": 2599, "description": "Żabka", "date": "2025-11-15"},
    )
    if response.status_code != HTTP_201_CREATED or response.json()["categorization_status"] != "pending":
        msg = f"Expected a pending 201, got {response.status_code} {response.text}"
        raise AssertionError(msg)

    # TestClient returns after background tasks have run
    row = client.get("/api/transactions", params={"month": "2025-11"}).json()["data"][0]
    if row["categorization_status"] != "completed" or row["category"]["key"] != "groceries":
        msg = f"Expected groceries after categorization, got {row}"
        raise AssertionError(msg)
    if not row["is_ai_categorized"] or len(store.categories) == 0:
        msg = "Expected AI categorization flag"
        raise AssertionError(msg)


def test_income_and_explicit_category_skip_categorization(store: TransactionStore) -> None:
    """Income without a category is 'none'; an explicit category is completed without AI."""
    income = client.post(
        "/api/transactions",
        json={"type": "income", "amount": 100, "description": "Zwrot", "date": "2025-11-01"},
    ).json()
    manual = client.post(
        "/api/transactions",
        json={"type": "expense", "amount": 100, "description": "Kino", "date": "2025-11-01", "categoryId": 5},
    ).json()
    if income["categorization_status"] != "none" or manual["categorization_status"] != "completed":
        msg = f"Unexpected statuses {income} / {manual}"
        raise AssertionError(msg)
    if manual["is_ai_categorized"] or manual["category"]["key"] != "entertainment" or store.get(2) is None:
        msg = f"Expected a manual entertainment category, got {manual}"
        raise AssertionError(msg)


def test_classifier_failure_marks_failed(store: TransactionStore) -> None:
    """A failing classifier leaves the record uncategorized with status failed."""
    app.dependency_overrides[get_agent] = BrokenAgent
    client.post("/api/transactions", json={"type": "expense", "amount": 1, "description": "X", "date": "2025-11-01"})
    record = store.get(1)
    if record is None or record.categorization_status != CategorizationStatus.FAILED or record.category is not None:
        msg = f"Expected failed categorization, got {record}"
        raise AssertionError(msg)


def test_create_validation(store: TransactionStore) -> None:
    """Invalid bodies are rejected with 400."""
    _ = store
    for body in (
        {"type": "expense", "amount": 0, "description": "X", "date": "2025-11-01"},
        {"type": "expense", "amount": 10, "description": "", "date": "2025-11-01"},
        {"type": "expense", "amount": 10, "description": "X", "date": "2025-11-01", "categoryId": 999},
    ):
        response = client.post("/api/transactions", json=body)
        if response.status_code != HTTP_400_BAD_REQUEST:
            msg = f"Expected 400 for {body}, got {response.status_code}"
            raise AssertionError(msg)


def test_transaction_list_polls_server_until_categorized(store: TransactionStore) -> None:
    """End to end over ASGI: a pending record keeps the list polling until the server completes it."""
    pending = store.add(
        TransactionKind.EXPENSE, 1500, "Apteka", date(2025, 11, 3), status=CategorizationStatus.PENDING
    )
    settings = Settings(poll_interval_seconds=0.05)

    async def scenario() -> tuple[PollState, PollState, str]:
        transport = httpx.ASGITransport(app=app)
        async with (
            httpx.AsyncClient(transport=transport, base_url="http://testserver") as http,
            TransactionApi(settings, client=http) as api,
            TransactionList(api, settings, initial_month="2025-11") as txns,
        ):
            await wait_until(lambda: bool(txns.transactions))
            before = txns.poll_state
            store.update(
                pending.id,
                category=store.category_by_key("health"),
                categorization_status=CategorizationStatus.COMPLETED,
                is_ai_categorized=True,
            )
            await wait_until(lambda: txns.poll_state is PollState.IDLE)
            return before, txns.poll_state, txns.transactions[0].category_key

    before, after, category_key = asyncio.run(scenario())
    if before is not PollState.POLLING or after is not PollState.IDLE or category_key != "health":
        msg = f"Expected POLLING -> IDLE with health category, got {before} -> {after} ({category_key})"
        raise AssertionError(msg)
