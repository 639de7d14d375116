import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError
from redis.exceptions import RedisError
from starlette.exceptions import HTTPException

from vocab.api.router import api_router
from vocab.config import Settings
from vocab.database import (
    close_connections,
    create_mongo_client,
    create_redis_client,
    verify_connections,
)
from vocab.middleware.access_log import AccessLogMiddleware
from vocab.middleware.error_handler import (
    datastore_error_handler,
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from vocab.middleware.request_id import RequestIdMiddleware
from vocab.services.health import HealthAggregator, MongoProbe, RedisProbe

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_OPENAPI_TAGS = [
    {"name": "Health", "description": "Dependency readiness checks"},
]


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def build_health_aggregator(app: FastAPI, settings: Settings) -> HealthAggregator:
    timeout = settings.health_probe_timeout_seconds
    return HealthAggregator(
        {
            "mongodb": MongoProbe(app.state.mongo, timeout=timeout),
            "redis": RedisProbe(app.state.redis, timeout=timeout),
        },
        service=settings.service_name,
        version=settings.version,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application for one vocabulary service.

    The lifespan owns the MongoDB and Redis clients: both are opened and pinged
    at startup (a failure aborts startup), exposed on ``app.state`` for the
    request path, and closed at shutdown.
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        app.state.mongo = create_mongo_client(settings)
        app.state.redis = create_redis_client(settings)
        try:
            await verify_connections(app.state.mongo, app.state.redis)
        except Exception:
            logger.exception("%s could not reach its datastores", settings.service_name)
            await close_connections(app.state.mongo, app.state.redis)
            raise
        logger.info("%s connected to MongoDB and Redis", settings.service_name)
        app.state.health_aggregator = build_health_aggregator(app, settings)
        try:
            yield
        finally:
            logger.info("%s shutting down", settings.service_name)
            await close_connections(app.state.mongo, app.state.redis)

    app = FastAPI(
        title=settings.service_name,
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
        openapi_tags=_OPENAPI_TAGS,
    )

    # -----------------------------------------------------------------------
    # Exception handlers
    # -----------------------------------------------------------------------

    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(PyMongoError, datastore_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RedisError, datastore_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # -----------------------------------------------------------------------
    # Middleware (Starlette LIFO: last add_middleware call runs outermost)
    # -----------------------------------------------------------------------

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Reads REQUEST_ID_CTX, so it must sit inside RequestIdMiddleware.
    app.add_middleware(AccessLogMiddleware, service=settings.service_name)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)
    return app


def run(app: FastAPI, settings: Settings, default_port: int) -> None:
    """Configure logging and serve *app* with uvicorn until interrupted."""
    configure_logging(settings.log_level)
    port = settings.port or default_port
    logger.info("Starting %s on %s:%s", settings.service_name, settings.host, port)
    uvicorn.run(
        app,
        host=settings.host,
        port=port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=30,
        server_header=False,
    )
