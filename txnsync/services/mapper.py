"""Transaction mapper: pure projection of raw transaction records into view models.

The projection is deterministic (identical input always yields an equal ``TransactionView``) and has no side
effects. Formatting follows pl-PL conventions: ``12 345,67 zł`` amounts and ``15 listopada 2025`` dates.
"""

from collections.abc import Mapping
from datetime import date

from pydantic import ValidationError

from txnsync.core.errors import RecordMappingError
from txnsync.core.models import TransactionRecord, TransactionView
from txnsync.core.settings import Settings

NBSP = "\u00a0"
MIN_GROUPING_DIGITS = 5
MONTHS_GENITIVE = (
    "stycznia",
    "lutego",
    "marca",
    "kwietnia",
    "maja",
    "czerwca",
    "lipca",
    "sierpnia",
    "września",
    "października",
    "listopada",
    "grudnia",
)


def format_amount(amount_minor_units: int, currency_symbol: str = "zł") -> str:
    """Format an amount in minor units (grosze/cents) as a currency string without float arithmetic."""
    sign = "-" if amount_minor_units < 0 else ""
    major, minor = divmod(abs(amount_minor_units), 100)
    digits = str(major)
    # pl-PL only groups thousands once the integer part has at least five digits
    if len(digits) >= MIN_GROUPING_DIGITS:
        digits = f"{major:,}".replace(",", NBSP)
    return f"{sign}{digits},{minor:02d}{NBSP}{currency_symbol}"


def format_date(value: date) -> str:
    """Format a calendar date as a long Polish date, e.g. ``15 listopada 2025``."""
    return f"{value.day} {MONTHS_GENITIVE[value.month - 1]} {value.year}"


def parse_record(raw: object) -> TransactionRecord:
    """Validate a raw record, raising ``RecordMappingError`` on a missing or invalid required field."""
    if isinstance(raw, TransactionRecord):
        return raw
    if not isinstance(raw, Mapping):
        raise RecordMappingError(None, f"expected an object, got {type(raw).__name__}")
    try:
        return TransactionRecord.model_validate(raw)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in exc.errors())
        raise RecordMappingError(raw.get("id"), f"invalid fields: {fields}") from exc


def map_to_view(raw: object, settings: Settings) -> TransactionView:
    """Project a raw record (or an already validated ``TransactionRecord``) into a ``TransactionView``."""
    record = parse_record(raw)
    category = record.category
    return TransactionView(
        id=record.id,
        kind=record.kind,
        amount=format_amount(record.amount_minor_units, settings.currency_symbol),
        amount_minor_units=record.amount_minor_units,
        description=record.description,
        date=format_date(record.occurred_on),
        raw_date=record.occurred_on.isoformat(),
        category_name=category.name if category and category.name else settings.uncategorized_name,
        category_key=category.key if category and category.key else settings.uncategorized_key,
        is_ai_categorized=record.is_ai_categorized,
        categorization_status=record.categorization_status,
    )
