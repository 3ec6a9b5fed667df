"""
FastAPI server: reputation and underwriting API.

Stateless: every request aggregates its own profile and, for /underwriting,
calls the scoring engine once. Domain errors map to JSON {detail, error_type}
with the status each error class declares.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend_trustlend import __version__
from backend_trustlend.api_server.middleware import RequestLoggingMiddleware
from backend_trustlend.api_server.underwriting import router as underwriting_router
from backend_trustlend.config import get_settings
from backend_trustlend.core.exceptions import TrustLendError, UpstreamContractViolation
from backend_trustlend.trustlend_logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log effective configuration (secrets masked) at startup."""
    settings = get_settings()
    logger.info("api_startup", version=__version__, **settings.describe())
    if not settings.scoring_engine_api_key:
        logger.warning("api_scoring_engine_key_missing", impact="/underwriting will return 500")
    yield
    logger.info("api_shutdown")


app = FastAPI(
    title="Backend TrustLend API",
    description="Reputation aggregation and underwriting decisions for asset-backed loans.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(underwriting_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe: API is up."""
    return {"status": "ok"}


@app.exception_handler(TrustLendError)
def trustlend_error_handler(request: Request, exc: TrustLendError) -> JSONResponse:
    """Map domain errors to their declared HTTP status with a JSON error body."""
    if exc.http_status >= 500:
        log_fields: dict[str, Any] = {"error_type": exc.error_type, "error": exc.message}
        if isinstance(exc, UpstreamContractViolation) and exc.raw_text:
            log_fields["raw_text"] = exc.raw_text[:500]
        logger.error("request_failed", path=request.url.path, **log_fields)
    else:
        logger.info("request_rejected", path=request.url.path, error_type=exc.error_type, error=exc.message)
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


@app.exception_handler(HTTPException)
def http_exception_handler(request: Any, exc: HTTPException) -> JSONResponse:
    """Consistent JSON error response for HTTPException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
