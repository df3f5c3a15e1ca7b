"""Pure helpers that derive new ``QueryModel`` values and serialize them for the wire."""

from txnsync.core.models import QueryModel
from txnsync.core.settings import Settings
from txnsync.core.utils import current_month

PAGINATION_FIELDS = frozenset({"page", "limit"})
QUERY_FIELDS = frozenset(QueryModel.model_fields)


def default_query(settings: Settings, month: str | None = None) -> QueryModel:
    """Build the initial query: the given (or current) month, first page, configured page size."""
    return QueryModel(month=month or current_month(), page=1, limit=settings.default_page_size)


def with_filters(query: QueryModel, **changes: object) -> QueryModel:
    """Merge ``changes`` into ``query``.

    Any change to a field other than ``page``/``limit`` starts a fresh result set, so ``page`` is
    reset to 1 (an explicit ``page`` passed alongside such a change is ignored). ``None`` clears an
    optional filter.
    """
    unknown = set(changes) - QUERY_FIELDS
    if unknown:
        msg = f"Unknown query fields: {', '.join(sorted(unknown))}"
        raise TypeError(msg)
    merged = {**query.model_dump(), **changes}
    if not set(changes) <= PAGINATION_FIELDS:
        merged["page"] = 1
    if merged.get("month") is None:
        merged["month"] = query.month
    return QueryModel.model_validate(merged)


def with_page(query: QueryModel, page: object) -> QueryModel:
    """Return ``query`` pointing at ``page`` (integer pages are clamped to at least 1)."""
    return QueryModel.model_validate({**query.model_dump(), "page": page})


def _category_sort_key(category_id: int | str) -> tuple[int, int, str]:
    if isinstance(category_id, int):
        return (0, category_id, "")
    return (1, 0, category_id)


def to_params(query: QueryModel) -> dict[str, str]:
    """Serialize a query into ``GET /api/transactions`` parameters, omitting unset filters."""
    params = {"month": query.month, "page": str(query.page), "limit": str(query.limit)}
    if query.kind:
        params["type"] = query.kind
    if query.category_ids:
        params["categoryId"] = ",".join(str(cid) for cid in sorted(query.category_ids, key=_category_sort_key))
    if query.search:
        params["search"] = query.search
    return params
