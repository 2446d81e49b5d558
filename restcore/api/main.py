"""FastAPI application initialization and configuration module.

``create_app`` wires the REST dispatch core into a FastAPI application:

- Application lifecycle (user store schema and connectivity on startup)
- Middleware registration in the correct order
- Transport-level exception handlers
- Health check and info endpoints
- The catch-all REST routes under ``rest.url_prefix``
- OpenTelemetry instrumentation

Middleware are executed in reverse order of registration.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from loguru import logger
from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker
from starlette.concurrency import run_in_threadpool

from restcore.api.middleware.error_handler import register_exception_handlers
from restcore.api.middleware.request_context import RequestContextMiddleware
from restcore.api.middleware.request_logging import RequestLoggingMiddleware
from restcore.api.middleware.security_headers import SecurityHeadersMiddleware
from restcore.api.routes import create_rest_router
from restcore.api.utils.responses import ORJSONResponse
from restcore.core.config import Settings, get_settings
from restcore.core.logging import setup_logging
from restcore.core.observability import instrument_app, setup_tracing
from restcore.infrastructure.database.session import (
    check_database_connection,
    create_database_engine,
    init_schema,
)
from restcore.infrastructure.database.users import SqlAlchemyUserLookup
from restcore.rest.service import RestService


def _create_default_service(settings: Settings, engine: Engine) -> RestService:
    """Build a service backed by the SQLAlchemy user store."""
    session_factory = sessionmaker(engine, expire_on_commit=False)
    return RestService.from_settings(settings, SqlAlchemyUserLookup(session_factory))


def create_app(
    settings: Settings | None = None,
    service: RestService | None = None,
    engine: Engine | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use
            get_settings().
        service: Dispatch pipeline to serve. If not provided, one is built
            from ``settings`` with the database user store.
        engine: User store engine. Created from ``database_config`` when
            ``service`` is not provided.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)
    setup_tracing(settings)

    if service is None:
        engine = engine or create_database_engine(settings.database_config.database_url)
        service = _create_default_service(settings, engine)

    @asynccontextmanager
    async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
        if engine is not None:
            await run_in_threadpool(init_schema, engine)
            is_healthy, error_msg = await run_in_threadpool(
                check_database_connection, engine
            )
            if not is_healthy:
                logger.error("Database connection failed during startup: {}", error_msg)
                msg = f"Database connection failed: {error_msg}"
                raise RuntimeError(msg)
            logger.info("Database connection successful")

        logger.info(
            "Application startup complete - {} v{}",
            app_instance.title,
            app_instance.version,
        )

        yield

        logger.info("Application shutdown initiated")
        if engine is not None:
            engine.dispose()
        logger.info("Application shutdown complete")

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.rest_service = service

    register_exception_handlers(application)

    # 3. Request logging middleware (logs requests/responses)
    application.add_middleware(
        RequestLoggingMiddleware,
        log_config=settings.log_config,
        trust_proxy_headers=settings.environment == "production",
    )

    # 2. Request context middleware (creates correlation ID)
    application.add_middleware(RequestContextMiddleware)

    # 1. Security headers middleware (adds security headers to all responses)
    application.add_middleware(SecurityHeadersMiddleware)

    @application.get("/health")
    async def health() -> dict[str, object]:
        """Health check endpoint for monitoring and container orchestration.

        Returns:
            dict[str, object]: Status and, when a user store is configured,
                its connectivity.
        """
        health_status: dict[str, object] = {"status": "healthy"}
        if engine is None:
            return health_status

        is_healthy, error_msg = await run_in_threadpool(
            check_database_connection, engine
        )
        health_status["database"] = is_healthy
        if not is_healthy:
            logger.warning("Database health check failed: {}", error_msg)
            health_status["status"] = "degraded"

        return health_status

    @application.get("/info")
    async def info(request: Request) -> dict[str, Any]:
        """Get application information.

        Returns:
            dict[str, Any]: Name, version, environment and the REST setup.
        """
        app_settings: Settings = request.app.state.settings
        rest_service: RestService = request.app.state.rest_service
        return {
            "app_name": app_settings.app_name,
            "version": app_settings.app_version,
            "environment": app_settings.environment,
            "debug": app_settings.debug,
            "rest": {
                "url_prefix": app_settings.rest.url_prefix,
                "controllers": rest_service.resolver.controller_names,
                "excluded_models": rest_service.excluded_models,
            },
        }

    application.include_router(create_rest_router(service, settings.rest.url_prefix))

    instrument_app(application, settings, engine)

    return application


app = create_app()
