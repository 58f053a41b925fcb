"""FastAPI application entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from relay.api import admin, routes
from relay.core.config import AppConfig, load_config
from relay.credentials.pool import load_credential_pool
from relay.logging import configure_logging, get_request_id
from relay.middleware.request_context import RequestContextMiddleware
from relay.providers.gemini import GeminiProvider
from relay.router.failover import FailoverExecutor

configure_logging()

logger = logging.getLogger("relay.app")

app = FastAPI(
    title="Prompt Relay",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url=None,
    openapi_url="/api/openapi.json",
)
app.include_router(routes.router)
app.include_router(admin.router)
app.add_middleware(RequestContextMiddleware)


def build_executor(config: AppConfig) -> FailoverExecutor:
    """Wire the credential pool and the Gemini adapter into an executor."""
    pool = load_credential_pool(config.credentials.env)
    adapter = GeminiProvider(config.upstream)
    return FailoverExecutor(pool, adapter, default_model=config.upstream.default_model)


@app.on_event("startup")
def on_startup() -> None:
    app.state.executor = build_executor(load_config())


def _request_id(request: Request) -> str | None:
    # Unhandled errors arrive after the middleware has reset the context var.
    return getattr(request.state, "request_id", None) or get_request_id()


def _error_json(request: Request, status_code: int, message: str) -> JSONResponse:
    response = JSONResponse(status_code=status_code, content={"error": message})
    request_id = _request_id(request)
    if request_id:
        response.headers["x-request-id"] = request_id
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.warning(
        "Rejected request body",
        extra={
            "event": "request_invalid",
            "path": request.url.path,
            "error_types": [error.get("type") for error in exc.errors()],
        },
    )
    return _error_json(request, 400, "Invalid request body.")


@app.exception_handler(Exception)
async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error",
        extra={
            "event": "request_error",
            "path": request.url.path,
            "request_id": _request_id(request),
        },
    )
    return _error_json(request, 500, "Internal server error")
