"""Services package: the transaction mapper and the HTTP client for the transaction-listing endpoint."""

from .mapper import format_amount, format_date, map_to_view  # noqa: F401
from .transaction_api import TransactionApi  # noqa: F401
