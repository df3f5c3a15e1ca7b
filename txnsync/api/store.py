"""In-memory transaction store backing the development transaction server.

Records are kept as ``TransactionRecord`` models and served in the wire shape of ``GET /api/transactions``.
Access is guarded by a lock because background categorization runs in FastAPI's worker threads.
"""

import calendar
import math
import threading
from datetime import date
from typing import Any

from txnsync.core.models import CategorizationStatus, CategoryRef, TransactionKind, TransactionRecord

DEFAULT_CATEGORIES: tuple[CategoryRef, ...] = (
    CategoryRef(id=1, key="groceries", name="Zakupy spożywcze"),
    CategoryRef(id=2, key="transport", name="Transport"),
    CategoryRef(id=3, key="restaurants", name="Restauracje"),
    CategoryRef(id=4, key="housing", name="Mieszkanie"),
    CategoryRef(id=5, key="entertainment", name="Rozrywka"),
    CategoryRef(id=6, key="health", name="Zdrowie"),
    CategoryRef(id=7, key="salary", name="Wynagrodzenie"),
    CategoryRef(id=8, key="other", name="Inne"),
)


def month_bounds(month: str) -> tuple[date, date]:
    """Return the first and last day of a ``YYYY-MM`` month."""
    year, month_num = (int(part) for part in month.split("-"))
    return date(year, month_num, 1), date(year, month_num, calendar.monthrange(year, month_num)[1])


class TransactionStore:
    """Thread-safe in-memory store of transactions and categories."""

    def __init__(self, categories: tuple[CategoryRef, ...] = DEFAULT_CATEGORIES) -> None:
        """Initialize an empty store with the given categories."""
        self._lock = threading.Lock()
        self._records: dict[int, TransactionRecord] = {}
        self._next_id = 1
        self.categories = categories

    def category_by_id(self, category_id: int) -> CategoryRef | None:
        """Look up a category by id."""
        return next((cat for cat in self.categories if cat.id == category_id), None)

    def category_by_key(self, key: str) -> CategoryRef | None:
        """Look up a category by key."""
        return next((cat for cat in self.categories if cat.key == key), None)

    def get(self, transaction_id: int) -> TransactionRecord | None:
        """Return a record by id, if present."""
        with self._lock:
            return self._records.get(transaction_id)

    def add(
        self,
        kind: TransactionKind,
        amount: int,
        description: str,
        occurred_on: date,
        category: CategoryRef | None = None,
        status: CategorizationStatus = CategorizationStatus.COMPLETED,
        is_ai_categorized: bool = False,
    ) -> TransactionRecord:
        """Insert a new record and return it."""
        with self._lock:
            record = TransactionRecord(
                id=self._next_id,
                kind=kind,
                amount_minor_units=amount,
                description=description,
                occurred_on=occurred_on,
                category=category,
                categorization_status=status,
                is_ai_categorized=is_ai_categorized,
            )
            self._records[record.id] = record
            self._next_id += 1
            return record

    def update(self, transaction_id: int, **changes: Any) -> TransactionRecord | None:
        """Replace a record with an updated copy; returns None if it no longer exists."""
        with self._lock:
            record = self._records.get(transaction_id)
            if record is None:
                return None
            updated = record.model_copy(update=changes)
            self._records[transaction_id] = updated
            return updated

    def list_page(
        self,
        month: str,
        page: int = 1,
        limit: int = 20,
        kind: str | None = None,
        category_ids: list[int] | None = None,
        search: str | None = None,
    ) -> dict[str, Any]:
        """Return one page of records of ``month`` matching the filters, newest first, in wire shape."""
        start, end = month_bounds(month)
        needle = search.lower() if search else None
        with self._lock:
            matches = [
                rec
                for rec in self._records.values()
                if start <= rec.occurred_on <= end
                and (kind is None or rec.kind == kind)
                and (not category_ids or (rec.category is not None and rec.category.id in category_ids))
                and (needle is None or needle in rec.description.lower())
            ]
        matches.sort(key=lambda rec: (rec.occurred_on, rec.id), reverse=True)
        offset = (page - 1) * limit
        return {
            "data": [rec.model_dump(mode="json", by_alias=True) for rec in matches[offset : offset + limit]],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": len(matches),
                "totalPages": math.ceil(len(matches) / limit),
            },
        }
