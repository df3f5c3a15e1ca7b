"""FastAPI endpoints of the development transaction server.

This module serves the transaction-listing contract consumed by the sync engine (``GET /api/transactions``), lets
transactions be created with background categorization, and exposes the category list and a health check.
"""

import re

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import JSONResponse

from txnsync.agents.keyword_agent import KeywordAgent
from txnsync.api.dependencies import get_agent, get_settings, get_store
from txnsync.api.schemas import CreateTransactionCommand
from txnsync.api.store import TransactionStore
from txnsync.core.models import CategorizationStatus, TransactionKind
from txnsync.core.settings import Settings
from txnsync.core.utils import get_logger, safe_cast
from txnsync.workers.categorization_job import categorize_in_background

router = APIRouter()
logger = get_logger("txnsync.api")

MONTH_RE = re.compile(r"^\d{4}-\d{2}$")
MAX_SEARCH_LEN = 255
HTTP_400_BAD_REQUEST = 400
HTTP_201_CREATED = 201


def _validation_error(message: str) -> JSONResponse:
    return JSONResponse({"error": "Validation failed", "message": message}, status_code=HTTP_400_BAD_REQUEST)


@router.get(
    "/api/transactions",
    summary="List transactions of a month",
    description=(
        "Returns a paginated list of transactions for a specific month with optional filters.\n\n"
        "**Query parameters:**\n"
        "- `month`: `YYYY-MM` (required)\n"
        "- `categoryId`: comma-separated category ids\n"
        "- `type`: `income` or `expense`\n"
        "- `search`: case-insensitive substring of the description\n"
        "- `page`: default 1; `limit`: default 20, max 100"
    ),
    responses={
        200: {
            "description": "One page of transactions.",
            "content": {
                "application/json": {
                    "example": {
                        "data": [
                            {
                                "id": 1,
                                "type": "expense",
                                "amount": 5000,
                                "description": "Biedronka",
                                "date": "2025-11-15",
                                "category": {"id": 1, "key": "groceries", "name": "Zakupy spożywcze"},
                                "categorization_status": "completed",
                                "is_ai_categorized": True,
                            }
                        ],
                        "pagination": {"page": 1, "limit": 20, "total": 1, "totalPages": 1},
                    }
                }
            },
        },
        400: {"description": "Validation failed."},
    },
)
async def list_transactions(  # noqa: PLR0913
    month: str | None = None,
    categoryId: str | None = None,  # noqa: N803
    type: str | None = None,  # noqa: A002
    search: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    store: TransactionStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """List one page of transactions."""
    logger.info(f"List request: month={month} page={page} limit={limit} type={type} categoryId={categoryId}")
    if not month:
        return _validation_error("Month parameter is required")
    if not MONTH_RE.match(month) or not 1 <= int(month[5:]) <= 12:  # noqa: PLR2004
        return _validation_error("Month must be in YYYY-MM format with a month between 01 and 12")
    if type is not None and type not in {kind.value for kind in TransactionKind}:
        return _validation_error("Type must be 'income' or 'expense'")
    if search is not None and len(search) > MAX_SEARCH_LEN:
        return _validation_error(f"Search must not exceed {MAX_SEARCH_LEN} characters")

    category_ids = None
    if categoryId:
        category_ids = [cid for cid in (safe_cast(part, int) for part in categoryId.split(",")) if cid is not None]
    page_num = max(safe_cast(page, int, 1) if page else 1, 1)
    limit_num = safe_cast(limit, int, settings.default_page_size) if limit else settings.default_page_size
    limit_num = min(max(limit_num, 1), settings.max_page_size)

    result = store.list_page(month, page_num, limit_num, type, category_ids, search or None)
    return JSONResponse(result)


@router.post(
    "/api/transactions",
    status_code=HTTP_201_CREATED,
    summary="Create a transaction",
    description=(
        "Creates a transaction. Expenses without a category are stored with `categorization_status=pending` "
        "and categorized by a background task; poll `GET /api/transactions` to observe the result."
    ),
)
async def create_transaction(
    command: CreateTransactionCommand,
    background_tasks: BackgroundTasks,
    store: TransactionStore = Depends(get_store),
    agent: KeywordAgent = Depends(get_agent),
) -> JSONResponse:
    """Create a transaction, queueing categorization when needed."""
    category = None
    if command.category_id is not None:
        category = store.category_by_id(command.category_id)
        if category is None:
            return _validation_error(f"Category {command.category_id} does not exist")

    needs_ai = category is None and command.kind == TransactionKind.EXPENSE
    if needs_ai:
        status = CategorizationStatus.PENDING
    elif category is None:
        status = CategorizationStatus.NONE
    else:
        status = CategorizationStatus.COMPLETED
    record = store.add(command.kind, command.amount, command.description, command.occurred_on, category, status)
    if needs_ai:
        background_tasks.add_task(categorize_in_background, store, agent, record.id)
        logger.info(f"Background categorization queued: transaction_id={record.id}")
    return JSONResponse(record.model_dump(mode="json", by_alias=True), status_code=HTTP_201_CREATED)


@router.get("/api/categories", summary="List categories")
async def list_categories(store: TransactionStore = Depends(get_store)) -> list[dict]:
    """Return every category."""
    return [cat.model_dump() for cat in store.categories]


@router.get(
    "/health",
    summary="Health check",
    description="Simple health check endpoint. Returns status ok.",
    response_description="Status ok.",
    responses={200: {"description": "API is healthy.", "content": {"application/json": {"example": {"status": "ok"}}}}},
)
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}
