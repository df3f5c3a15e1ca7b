"""API integration tests for the development transaction server."""

from collections.abc import Iterator
from datetime import date

import pytest
from fastapi.testclient import TestClient

from main import app
from txnsync.api.dependencies import get_store
from txnsync.api.store import TransactionStore
from txnsync.core.models import CategorizationStatus, TransactionKind

client = TestClient(app)
HTTP_200_OK = 200
HTTP_400_BAD_REQUEST = 400


@pytest.fixture
def store() -> Iterator[TransactionStore]:
    """Serve a fresh store for the duration of one test."""
    fresh = TransactionStore()
    app.dependency_overrides[get_store] = lambda: fresh
    yield fresh
    app.dependency_overrides.clear()


def _seed(store: TransactionStore) -> None:
    groceries = store.category_by_key("groceries")
    store.add(TransactionKind.EXPENSE, 5000, "Biedronka zakupy", date(2025, 11, 15), groceries)
    store.add(TransactionKind.INCOME, 900000, "Wynagrodzenie", date(2025, 11, 10), store.category_by_key("salary"))
    store.add(TransactionKind.EXPENSE, 1200, "Kawa", date(2025, 11, 20), status=CategorizationStatus.PENDING)
    store.add(TransactionKind.EXPENSE, 3000, "Biedronka", date(2025, 10, 31), groceries)


def test_health() -> None:
    """Test the /health endpoint returns status ok."""
    response = client.get("/health")
    if response.status_code != HTTP_200_OK:
        msg = f"Expected status {HTTP_200_OK}, got {response.status_code}"
        raise AssertionError(msg)
    if response.json() != {"status": "ok"}:
        msg = f"Expected response {{'status': 'ok'}}, got {response.json()}"
        raise AssertionError(msg)


def test_scalar_docs() -> None:
    """Test the /scalar endpoint returns OpenAPI or Swagger docs."""
    response = client.get("/scalar")
    if response.status_code != HTTP_200_OK:
        msg = f"Expected status {HTTP_200_OK}, got {response.status_code}"
        raise AssertionError(msg)
    if not ("openapi" in response.text or "swagger" in response.text):
        msg = "Expected 'openapi' or 'swagger' in response text"
        raise AssertionError(msg)


def test_list_month_newest_first(store: TransactionStore) -> None:
    """Only the requested month is listed, newest first, in wire shape."""
    _seed(store)
    response = client.get("/api/transactions", params={"month": "2025-11"})
    body = response.json()
    if response.status_code != HTTP_200_OK or [row["id"] for row in body["data"]] != [3, 1, 2]:
        msg = f"Unexpected listing {response.status_code} {body}"
        raise AssertionError(msg)
    if body["pagination"] != {"page": 1, "limit": 20, "total": 3, "totalPages": 1}:
        msg = f"Unexpected pagination {body['pagination']}"
        raise AssertionError(msg)
    first = body["data"][0]
    if first["type"] != "expense" or first["amount"] != 1200 or first["categorization_status"] != "pending":
        msg = f"Unexpected record shape {first}"
        raise AssertionError(msg)


def test_list_filters_and_pagination(store: TransactionStore) -> None:
    """Type, category, search and paging parameters narrow the result."""
    _seed(store)
    cases = [
        ({"type": "income"}, [2]),
        ({"categoryId": "1,x"}, [1]),
        ({"search": "BIEDRONKA"}, [1]),
        ({"limit": "2", "page": "2"}, [2]),
        ({"limit": "abc", "page": "-3"}, [3, 1, 2]),
    ]
    for params, expected in cases:
        body = client.get("/api/transactions", params={"month": "2025-11", **params}).json()
        if [row["id"] for row in body["data"]] != expected:
            msg = f"Expected {expected} for {params}, got {body}"
            raise AssertionError(msg)
    paged = client.get("/api/transactions", params={"month": "2025-11", "limit": "2"}).json()
    if paged["pagination"]["totalPages"] != 2:
        msg = f"Expected 2 pages, got {paged['pagination']}"
        raise AssertionError(msg)


@pytest.mark.parametrize("params", [{}, {"month": "2025-13"}, {"month": "11-2025"}, {"month": "2025-11", "type": "x"}])
def test_list_validation(params: dict[str, str], store: TransactionStore) -> None:
    """Invalid query parameters are rejected with 400 and a message."""
    _ = store
    response = client.get("/api/transactions", params=params)
    if response.status_code != HTTP_400_BAD_REQUEST or response.json()["error"] != "Validation failed":
        msg = f"Expected 400 for {params}, got {response.status_code} {response.text}"
        raise AssertionError(msg)


def test_categories(store: TransactionStore) -> None:
    """The category list includes the fallback category."""
    keys = [cat["key"] for cat in client.get("/api/categories").json()]
    if "other" not in keys or len(keys) != len(store.categories):
        msg = f"Unexpected categories {keys}"
        raise AssertionError(msg)
