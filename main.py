"""Main entrypoint and application factory for the development transaction server.

This module initializes the FastAPI application that serves the transaction-listing contract consumed by
``txnsync.TransactionList``, configures logging, and exposes the Scalar API reference endpoint for interactive
OpenAPI documentation. It also includes the main entrypoint for running the app with Uvicorn.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from scalar_fastapi import get_scalar_api_reference

from txnsync.api.routes import router
from txnsync.core.settings import get_settings
from txnsync.core.utils import get_logger, set_log_level

HTTP_400_BAD_REQUEST = 400


# --- Logging Setup ---
def setup_logging() -> None:
    """Create the project loggers and apply the configured level."""
    for name in ("txnsync.api", "txnsync.worker", "txnsync.agent"):
        get_logger(name)
    set_log_level(get_settings().log_level)


setup_logging()

app = FastAPI(
    docs_url="/docs",
    redoc_url="/redoc",
    title="Transaction List Development Server",
    description="""
    A development server for the transaction list sync engine. It keeps transactions in memory and categorizes new
    expenses in the background so that pending categorization can be observed by polling clients.

    **Endpoints:**
    - `GET /api/transactions`: Paginated, filtered transactions of a month.
    - `POST /api/transactions`: Create a transaction (expenses are categorized in the background).
    - `GET /api/categories`: Category list.
    - `GET /health`: Health check endpoint.
    - `GET /scalar`: Interactive Scalar OpenAPI documentation.
    """,
    version="1.0.0",
)
app.include_router(router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report body validation failures as 400 with a readable message."""
    _ = request  # Silence unused argument warning
    message = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors())
    return JSONResponse({"error": "Validation failed", "message": message}, status_code=HTTP_400_BAD_REQUEST)


@app.get("/scalar", include_in_schema=False)
async def scalar_docs() -> JSONResponse:
    """Return Scalar API reference."""
    return get_scalar_api_reference(openapi_url=app.openapi_url, title=app.title)


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.server_host, port=settings.server_port, reload=True)
