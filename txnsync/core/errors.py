"""Error taxonomy for fetching and projecting transaction pages.

None of these ever escape a ``TransactionList``: they are stored on ``ListState.error`` (or, for
``RecordMappingError``, logged and swallowed per record).
"""


class TransactionSyncError(Exception):
    """Base class for all sync engine failures."""


class TransactionApiError(TransactionSyncError):
    """A fetch attempt against the transaction-listing endpoint failed."""


class TransportError(TransactionApiError):
    """The request never completed (connection refused, timeout, ...)."""


class ServerError(TransactionApiError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        """Store the HTTP status and the human-readable server message."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class MalformedResponseError(TransactionApiError):
    """A 2xx response whose body is not a transaction page."""


class RecordMappingError(TransactionSyncError):
    """A single raw record could not be projected into a view model."""

    def __init__(self, record_id: object, reason: str) -> None:
        """Store the offending record id (may be None) and the reason."""
        super().__init__(f"Cannot map transaction {record_id!r}: {reason}")
        self.record_id = record_id
        self.reason = reason


class InvalidQueryError(TransactionSyncError):
    """A filter or page change could not be applied to the current query."""
