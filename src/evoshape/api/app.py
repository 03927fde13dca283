"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from evoshape.api.catalog import router as catalog_router
from evoshape.api.dashboard import router as dashboard_router
from evoshape.api.logs import router as logs_router
from evoshape.api.notifications import router as notifications_router
from evoshape.api.push import router as push_router
from evoshape.app_logging import configure_logging
from evoshape.containers import AppContainer
from evoshape.domain.errors import StorageError, UpstreamError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title=container.settings.app_name, lifespan=lifespan)
    app.state.container = container

    app.include_router(push_router)
    app.include_router(notifications_router)
    app.include_router(logs_router)
    app.include_router(dashboard_router)
    app.include_router(catalog_router)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            {"error": exc.detail}, status_code=exc.status_code, headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            {"error": _validation_message(exc)},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError) -> JSONResponse:
        logger.error(
            "Storage error: method=%s path=%s error=%s",
            request.method,
            request.url.path,
            exc.message,
        )
        return JSONResponse(
            {"error": exc.message},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    @app.exception_handler(UpstreamError)
    async def upstream_error(request: Request, exc: UpstreamError) -> JSONResponse:
        logger.warning(
            "Upstream error: path=%s status=%s error=%s",
            request.url.path,
            exc.status_code,
            exc.message,
        )
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = str(first.get("msg", "Invalid value"))
    return f"{location}: {message}" if location else message
