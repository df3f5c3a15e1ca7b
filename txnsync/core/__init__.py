"""Core package: provides models, query helpers, errors, settings, and shared utilities."""

from .errors import (  # noqa: F401
    InvalidQueryError,
    MalformedResponseError,
    RecordMappingError,
    ServerError,
    TransactionApiError,
    TransactionSyncError,
    TransportError,
)
from .models import (  # noqa: F401
    CategorizationStatus,
    ListState,
    PaginationMeta,
    QueryModel,
    TransactionKind,
    TransactionRecord,
    TransactionView,
)
from .settings import Settings, get_settings  # noqa: F401
from .utils import get_logger  # noqa: F401
