"""FastAPI application entry point.

Configures the application with logging, exception handling, metrics,
health checks and the chat routes.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ragchat import __version__
from ragchat.api.deps import get_container
from ragchat.api.routes import router
from ragchat.config import get_settings
from ragchat.exceptions import RAGChatError
from ragchat.logging_config import get_logger, setup_logging
from ragchat.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
)

logger = get_logger(__name__)

INVALID_BODY = "Invalid request body"
INTERNAL_ERROR = "Internal server error"


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()
    setup_logging(level=settings.log_level)
    logger.info(
        "Starting RAG Chat",
        extra={
            "version": __version__,
            "environment": settings.environment.value,
        },
    )

    yield

    logger.info("Shutting down RAG Chat")
    if get_container.cache_info().currsize:
        await get_container().close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="RAG Chat",
        description="Semantic and hybrid question answering over an OpenSearch index",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(MetricsMiddleware)

    app.add_exception_handler(RAGChatError, rag_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(router)

    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/ready", readiness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/live", liveness_check, methods=["GET"], tags=["Health"])
    app.add_api_route(
        "/metrics",
        metrics_endpoint,
        methods=["GET"],
        tags=["Observability"],
        include_in_schema=False,
    )

    return app


async def rag_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle RAGChatError exceptions.

    Converts exceptions to `{"error": ..., "code": ...}` responses.
    """
    if not isinstance(exc, RAGChatError):
        return await unhandled_exception_handler(request, exc)

    status_code = exc.status_code
    log = logger.error if status_code >= 500 else logger.warning
    log(
        f"Request failed: {exc.message}",
        extra={
            "error_code": exc.code.value,
            "path": request.url.path,
            "details": exc.details,
        },
    )

    return JSONResponse(
        status_code=status_code,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Turn request body validation failures into 400 responses."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    logger.warning(
        "Invalid request body",
        extra={"path": request.url.path, "errors": errors},
    )
    return JSONResponse(status_code=400, content={"error": INVALID_BODY})


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Last-resort handler. Exception text stays in the logs."""
    logger.error(
        f"Unhandled error: {type(exc).__name__}",
        exc_info=exc,
        extra={"path": request.url.path},
    )
    return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})


async def health_check() -> dict[str, Any]:
    """Basic health check endpoint.

    Returns:
        Health status with version and timestamp.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def readiness_check() -> dict[str, Any]:
    """Readiness probe.

    Reports whether each mode has the configuration it needs. No external
    service is contacted.

    Returns:
        Readiness status with component checks.
    """
    settings = get_settings()
    api_key = settings.openai.api_key
    checks: dict[str, str] = {
        "openai": "ok" if api_key is not None and api_key.get_secret_value() else "missing_api_key",
        "opensearch": "ok" if settings.opensearch.url else "missing_url",
        "langflow": "ok" if settings.langflow.url and settings.langflow.flow_id else "missing_url",
    }

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def liveness_check() -> dict[str, str]:
    """Liveness probe.

    Returns:
        Liveness status.
    """
    return {"status": "alive"}


async def metrics_endpoint() -> Response:
    """Prometheus scrape endpoint."""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


app = create_app()
