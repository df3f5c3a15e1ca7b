"""TransactionApi provides async access to the transaction-listing endpoint."""

from types import TracebackType

import httpx
from pydantic import ValidationError

from txnsync.core.errors import MalformedResponseError, ServerError, TransportError
from txnsync.core.models import TransactionPage
from txnsync.core.settings import Settings, get_settings
from txnsync.core.utils import get_logger

logger = get_logger("txnsync.api_client")

TRANSACTIONS_PATH = "/api/transactions"
GENERIC_FAILURE = "Failed to fetch transactions"
MAX_BODY_LOG_LEN = 300


def _server_message(response: httpx.Response) -> str:
    """Extract the human-readable message of an error response, falling back to the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return f"{GENERIC_FAILURE}: {value}"
    if response.reason_phrase:
        return f"{GENERIC_FAILURE}: {response.reason_phrase}"
    return GENERIC_FAILURE


class TransactionApi:
    """Service for listing transactions over HTTP using httpx."""

    def __init__(self, settings: Settings | None = None, client: httpx.AsyncClient | None = None) -> None:
        """Initialize the API with settings and an optional pre-configured httpx client.

        An injected client is used as-is (its base URL wins) and is left open by ``aclose``.
        """
        self.settings = settings or get_settings()
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            base_url=self.settings.api_base_url,
            timeout=httpx.Timeout(self.settings.request_timeout_seconds),
        )

    async def list_transactions(self, params: dict[str, str]) -> TransactionPage:
        """Fetch one page of raw transaction records for the given query parameters."""
        try:
            response = await self.client.get(TRANSACTIONS_PATH, params=params)
        except httpx.HTTPError as exc:
            logger.warning(f"Transport failure fetching transactions {params}: {exc!r}")
            msg = f"{GENERIC_FAILURE}: {exc.__class__.__name__}"
            raise TransportError(msg) from exc

        if not response.is_success:
            body = response.text
            if len(body) > MAX_BODY_LOG_LEN:
                body = body[: MAX_BODY_LOG_LEN - 3] + "..."
            logger.warning(f"Transactions request failed: status={response.status_code}, body={body}")
            raise ServerError(response.status_code, _server_message(response))

        try:
            payload = response.json()
        except ValueError as exc:
            msg = "Malformed transactions response: body is not JSON"
            raise MalformedResponseError(msg) from exc
        try:
            return TransactionPage.model_validate(payload)
        except ValidationError as exc:
            msg = f"Malformed transactions response: {exc.error_count()} validation error(s)"
            raise MalformedResponseError(msg) from exc

    async def aclose(self) -> None:
        """Close the underlying httpx client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "TransactionApi":
        """Enter the async context."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Close the client on exit."""
        await self.aclose()
