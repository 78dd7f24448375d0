"""FastAPI application entry point.

Wiring only: logging, lifespan, exception handlers, CORS, routers.
No business logic here. See city_dashboard.core.lifespan and
city_dashboard.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and optionally
clear get_settings cache) before importing or calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from city_dashboard.api.v1 import api_router
from city_dashboard.core.config import get_settings
from city_dashboard.core.exception_handlers import register_exception_handlers
from city_dashboard.core.lifespan import create_lifespan
from city_dashboard.shared.telemetry.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    register_exception_handlers(app)

    # The dashboard is read-only: GET only, no credentials.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
