"""Pydantic models for the transaction list sync engine.

This module defines the wire models received from the transaction-listing endpoint (``TransactionRecord``,
``PaginationMeta``, ``TransactionPage``), the client-owned ``QueryModel``, the presentation-ready
``TransactionView`` and the ``ListState`` snapshot exposed to the presentation layer.
"""

import math
from collections.abc import Iterable
from datetime import date
from enum import StrEnum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)

from txnsync.core.utils import safe_cast


class TransactionKind(StrEnum):
    """Direction of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class CategorizationStatus(StrEnum):
    """Lifecycle of the asynchronous classifier for a single transaction."""

    NONE = "none"
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class CategoryRef(BaseModel):
    """Category reference embedded in a transaction record."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    key: str | None = None
    name: str | None = None


class TransactionRecord(BaseModel):
    """Server-authoritative transaction as returned by ``GET /api/transactions``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: StrictInt
    kind: TransactionKind = Field(alias="type")
    amount_minor_units: StrictInt = Field(alias="amount")
    description: str = Field(min_length=1, max_length=255)
    occurred_on: date = Field(alias="date")
    category: CategoryRef | None = None
    categorization_status: CategorizationStatus = CategorizationStatus.COMPLETED
    is_ai_categorized: bool = False

    @field_validator("category", mode="wrap")
    @classmethod
    def malformed_category_is_none(cls, value: object, handler: ValidatorFunctionWrapHandler) -> CategoryRef | None:
        """Treat a category object that does not validate as no category."""
        try:
            return handler(value)
        except ValidationError:
            return None

    @field_validator("categorization_status", mode="before")
    @classmethod
    def missing_status_is_completed(cls, value: object) -> object:
        """Treat a missing status as completed."""
        return CategorizationStatus.COMPLETED if value is None else value

    @property
    def is_pending(self) -> bool:
        """Whether the classifier is still working on this record."""
        return self.categorization_status == CategorizationStatus.PENDING


class PaginationMeta(BaseModel):
    """Pagination block of a transaction page."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)
    total_pages: int = Field(alias="totalPages", ge=0)

    @model_validator(mode="after")
    def check_total_pages(self) -> "PaginationMeta":
        """Reject pagination whose totalPages disagrees with total and limit."""
        expected = math.ceil(self.total / self.limit)
        if self.total_pages != expected:
            msg = f"totalPages={self.total_pages} does not match ceil({self.total}/{self.limit})={expected}"
            raise ValueError(msg)
        return self


class TransactionPage(BaseModel):
    """Envelope of ``GET /api/transactions``; records stay raw so each one is mapped on its own."""

    data: list[Any]
    pagination: PaginationMeta


class TransactionView(BaseModel):
    """Immutable, presentation-ready projection of a ``TransactionRecord``."""

    model_config = ConfigDict(frozen=True)

    id: int
    kind: TransactionKind
    amount: str
    amount_minor_units: int
    description: str
    date: str
    raw_date: str
    category_name: str
    category_key: str
    is_ai_categorized: bool
    categorization_status: CategorizationStatus

    @property
    def is_pending(self) -> bool:
        """Whether this row should show a categorization-in-progress badge."""
        return self.categorization_status == CategorizationStatus.PENDING


class QueryModel(BaseModel):
    """Canonical description of the requested transaction subset.

    Values are accepted as-is apart from normalization; the server is the validation authority, so a value of an
    unexpected type is kept (in its string form where it has to become one) and forwarded.
    """

    model_config = ConfigDict(frozen=True)

    month: str
    page: int | str = 1
    limit: int | str = 20
    kind: str | None = None
    category_ids: frozenset[int | str] | None = None
    search: str | None = None

    @field_validator("page", "limit", mode="before")
    @classmethod
    def integer_or_text(cls, value: object) -> int | str:
        """Keep integers (parsing integer strings); anything else is forwarded as text."""
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            parsed = safe_cast(value.strip(), int)
            return parsed if parsed is not None else value
        return str(value)

    @field_validator("page", mode="after")
    @classmethod
    def clamp_page(cls, value: int | str) -> int | str:
        """Clamp an integer page to at least 1."""
        return max(value, 1) if isinstance(value, int) else value

    @field_validator("month", "kind", "search", mode="before")
    @classmethod
    def as_text(cls, value: object) -> object:
        """Store plain strings; enums and other values are stored in their string form."""
        if value is None or type(value) is str:
            return value
        return str(value)

    @field_validator("kind", "search", mode="after")
    @classmethod
    def empty_is_none(cls, value: str | None) -> str | None:
        """Treat an empty kind or search as no filter."""
        return value or None

    @field_validator("category_ids", mode="before")
    @classmethod
    def collapse_category_ids(cls, value: object) -> object:
        """Deduplicate category ids; an empty collection means no filter."""
        if value is None:
            return value
        if isinstance(value, str | bytes) or not isinstance(value, Iterable):
            value = [value]
        ids = frozenset(cid if isinstance(cid, int | str) else str(cid) for cid in value)
        return ids or None


class ListState(BaseModel):
    """Snapshot of everything the presentation layer renders. Replaced wholesale on every write."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    transactions: tuple[TransactionView, ...] = ()
    pagination: PaginationMeta | None = None
    is_loading: bool = False
    error: Exception | None = None

    @property
    def has_pending(self) -> bool:
        """Whether any visible transaction is still awaiting categorization."""
        return any(view.is_pending for view in self.transactions)
