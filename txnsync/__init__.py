"""Transaction list synchronization engine: race-free paginated transaction views with categorization polling."""

from .workers.transaction_list import TransactionList  # noqa: F401
