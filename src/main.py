"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from config.settings import settings
from src.ic_common.database import create_engine, create_session_factory, ping_database
from src.ic_common.datetime_utils import utc_now
from src.ic_common.errors import AppError, InternalError, InvalidRequestError
from src.ic_common.health import HealthReport, check_cache, check_database
from src.ic_common.logging_config import configure_logging
from src.ic_common.redis_client import close_redis, create_redis
from src.ic_common.request_log import REQUEST_ID_HEADER, RequestLogMiddleware, get_request_id
from src.ic_common.response import error_response
from src.ic_items.api.dependencies import build_item_service
from src.ic_items.api.router import router as items_router
from src.ic_items.infrastructure.redis_cache import RedisItemCache

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: build DB pool + Redis client. Shutdown: dispose both."""
    configure_logging(settings.LOG_LEVEL)

    engine = create_engine(settings)
    # Database is the source of truth: refuse to start without it
    await ping_database(engine)
    logger.info("Database connection verified")

    redis_client = create_redis(settings)
    cache = RedisItemCache(redis_client, retry_after=settings.CACHE_RETRY_AFTER_SECONDS)
    if await cache.ping():
        logger.info("Connected to Redis")
    else:
        logger.warning("Redis unavailable at startup, serving from database only")

    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.item_cache = cache
    app.state.item_service = build_item_service(cache, settings)
    logger.info(
        "%s %s started (environment=%s)",
        settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT,
    )
    yield
    logger.info("Shutting down")
    try:
        await engine.dispose()
    except Exception:
        logger.exception("Error closing database connections")
    try:
        await close_redis(redis_client)
    except Exception:
        logger.exception("Error closing Redis connection")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


def _error_json(request: Request, exc: AppError, details: str | None = None) -> JSONResponse:
    resp = error_response(exc.code, exc.message, get_request_id(request))
    content = resp.model_dump()
    if details is not None:
        content["details"] = details
    # The catch-all 500 is rendered outside RequestLogMiddleware, so set the
    # header here as well
    return JSONResponse(
        status_code=exc.http_status,
        content=content,
        headers={REQUEST_ID_HEADER: resp.request_id},
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_json(request, exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = first.get("msg", "invalid value")
    detail = f"{loc}: {msg}" if loc else msg
    return _error_json(request, InvalidRequestError(detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s (%s)",
        request.method, request.url.path, get_request_id(request),
        exc_info=exc,
    )
    details = f"{type(exc).__name__}: {exc}" if settings.DEBUG else None
    return _error_json(request, InternalError(), details)


app.include_router(items_router, prefix=API_PREFIX)


@app.get("/")
async def root() -> dict[str, object]:
    return {
        "message": f"Welcome to the {settings.APP_NAME} API",
        "version": settings.APP_VERSION,
        "endpoints": {
            "health": f"{API_PREFIX}/health",
            "items": f"{API_PREFIX}/items",
            "itemById": f"{API_PREFIX}/items/{{item_id}}",
        },
        "documentation": "/docs",
    }


@app.get(f"{API_PREFIX}/health")
async def health(request: Request) -> HealthReport:
    database = await check_database(request.app.state.engine)
    cache = await check_cache(getattr(request.app.state, "item_cache", None))
    return HealthReport(
        timestamp=utc_now().isoformat(),
        database=database,
        cache=cache,
        environment=settings.ENVIRONMENT,
        version=settings.APP_VERSION,
    )
