import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import currency, health
from .services.rates.base import RateNotFoundError
from .services.rates.cache_service import RateProvider, build_rate_provider


def create_app(
    settings_override: Settings | None = None,
    rate_provider: RateProvider | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., no API key). Falls back to cached get_settings().
    rate_provider: inject a prebuilt provider (fake source, fixed clock); by
    default one is built from settings and shared by every request.
    """
    settings = settings_override or get_settings()
    # Initialize logging early
    init_logging(debug=settings.debug)

    provider = rate_provider or build_rate_provider(settings)
    logging.getLogger("app").info(
        "starting %s",
        settings.app_name,
        extra={"live_rates": provider.live_enabled},
    )

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )
    app.state.settings = settings
    app.state.rate_provider = provider

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(RateNotFoundError, errors.rate_not_found_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(currency.router)

    @app.get("/")
    async def root():
        return {"message": "Travel Desk Currency API", "version": settings.version}

    return app


app = create_app()
