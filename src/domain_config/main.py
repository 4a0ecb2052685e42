"""FastAPI application entry point."""

from contextlib import asynccontextmanager
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from structlog import contextvars

from domain_config.api.main import api_router
from domain_config.cache import CacheStore, redis_lifespan
from domain_config.configs.service import ConfigService
from domain_config.core.config import Settings, settings
from domain_config.core.db import engine, make_session_factory
from domain_config.core.exceptions import AppException
from domain_config.core.logging import get_logger, setup_logging
from domain_config.domains.service import DomainResolutionService
from domain_config.i18n import LanguageConfig, LanguageNegotiator
from domain_config.store import ConfigStore, SQLStore

setup_logging()
logger = get_logger(__name__)


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI schema.

    Format: {tag}-{route_name}
    """
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


def build_services(
    app: FastAPI, store: ConfigStore, cache: CacheStore, config: Settings
) -> None:
    """Wire the services onto app.state for the route dependencies."""
    negotiator = LanguageNegotiator(LanguageConfig.from_settings(config))
    domain_service = DomainResolutionService(
        store,
        cache,
        negotiator,
        multilingual_enabled=config.MULTILINGUAL_ENABLED,
        max_page_size=config.MAX_PAGE_SIZE,
        cache_ttl=config.CACHE_TTL_SECONDS,
    )
    app.state.cache = cache
    app.state.domain_service = domain_service
    app.state.config_service = ConfigService(
        store, domain_service, max_page_size=config.MAX_PAGE_SIZE
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(
        "application_startup",
        environment=settings.ENVIRONMENT,
        debug=settings.DEBUG,
        redis_enabled=settings.REDIS_ENABLED,
        multilingual_enabled=settings.MULTILINGUAL_ENABLED,
        default_language=settings.DEFAULT_LANGUAGE,
        supported_languages=settings.SUPPORTED_LANGUAGES,
    )

    async with redis_lifespan(
        settings.REDIS_ENABLED,
        settings.REDIS_URL,
        settings.REDIS_SOCKET_TIMEOUT_SECONDS,
    ) as redis_client:
        cache = CacheStore(redis_client, settings.CACHE_TTL_SECONDS)
        build_services(app, SQLStore(make_session_factory(engine)), cache, settings)
        yield
        logger.info(
            "cache_stats",
            hits=cache.metrics.hits,
            misses=cache.metrics.misses,
            errors=cache.metrics.errors,
        )

    await engine.dispose()
    logger.info("application_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
        lifespan=lifespan,
        generate_unique_id_function=custom_generate_unique_id,
    )

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request, exc: AppException
    ) -> JSONResponse:
        """Handle all AppException subclasses with consistent JSON format."""
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "app_exception",
            error_code=exc.error_code,
            kind=str(exc.kind),
            message=exc.message,
            status_code=exc.status_code,
            details=exc.details,
            path=str(request.url.path),
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Add unique request ID to each request for tracing."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        contextvars.clear_contextvars()
        contextvars.bind_contextvars(request_id=request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    if settings.all_cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.all_cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=[
                "Accept-Language",
                "Content-Type",
                "X-Request-ID",
                "Accept",
                "Origin",
            ],
            expose_headers=["X-Request-ID", "Content-Language", "X-Content-Language"],
        )
        logger.info("cors_configured", origins=settings.all_cors_origins)

    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get(f"{settings.API_V1_STR}/health", tags=["health"])
    async def health(request: Request):
        cache: CacheStore | None = getattr(request.app.state, "cache", None)
        return {
            "status": "ok",
            "service": settings.PROJECT_NAME,
            "cache_enabled": bool(cache and cache.is_enabled()),
        }

    return app


app = create_app()


@app.get("/health", tags=["health"])
async def root_health():
    """Root health check endpoint."""
    return {"status": "ok", "service": settings.PROJECT_NAME}
