"""Main FastAPI application."""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from expensify.config import settings
from expensify.database import dispose_engine
from expensify.exceptions import ExpensifyError, InternalError, RateLimitError, ValidationError
from expensify.rate_limiter import limiter
from expensify.schemas.common import ErrorDetail, ErrorResponse
from expensify.services.object_storage import close_object_storage

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Expensify API starting")
    yield
    close_object_storage()
    dispose_engine()
    logger.info("Expensify API stopped")


# Create FastAPI app
app = FastAPI(
    title="Expensify API",
    description="Track assets, real-estate properties and their documents",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug,
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(request: Request, error: ExpensifyError) -> JSONResponse:
    body = ErrorResponse(
        error=error.code,
        message=error.message,
        details=[ErrorDetail(**detail) for detail in error.details] if error.details else None,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=error.status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s -> %d (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


@app.exception_handler(ExpensifyError)
async def expensify_error_handler(request: Request, exc: ExpensifyError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.code, request.url.path, exc.message)
    return _error_response(request, exc)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit exceeded on %s: %s", request.url.path, exc.detail)
    response = _error_response(request, RateLimitError(f"Rate limit exceeded: {exc.detail}"))
    return request.app.state.limiter._inject_headers(
        response, getattr(request.state, "view_rate_limit", None)
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "path", "query")]
        details.append({"field": ".".join(loc) or None, "message": error.get("msg", "Invalid")})
    return _error_response(request, ValidationError("Invalid input", details))


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Unhandled database error on %s", request.url.path)
    return _error_response(request, InternalError("Database error"))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return _error_response(request, InternalError("Internal server error"))


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Expensify API", "version": "0.1.0", "status": "running"}


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Import and include routers
from expensify.routers import assets, documents, real_estate  # noqa: E402

app.include_router(assets.router)
app.include_router(real_estate.router)
app.include_router(documents.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
