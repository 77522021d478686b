"""FastAPI application entrypoint for the Grow Fitness API.

Every service router is mounted under /api on a single app.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from libs.db.registry import load_all_models
from services.audit_service.router import router as audit_router
from services.auth_service.router import router as auth_router
from services.banners_service.router import router as banners_router
from services.client_service.router import router as client_router
from services.codes_service.router import router as codes_router
from services.crm_service.router import router as crm_router
from services.dashboard_service.router import router as dashboard_router
from services.invoices_service.router import router as invoices_router
from services.kids_service.router import router as kids_router
from services.locations_service.router import router as locations_router
from services.quizzes_service.router import router as quizzes_router
from services.reports_service.router import router as reports_router
from services.requests_service.router import router as requests_router
from services.resources_service.router import router as resources_router
from services.sessions_service.router import router as sessions_router
from services.users_service.router import router as users_router

API_PREFIX = "/api"

ROUTERS = [
    auth_router,
    users_router,
    kids_router,
    locations_router,
    sessions_router,
    invoices_router,
    banners_router,
    quizzes_router,
    codes_router,
    crm_router,
    resources_router,
    reports_router,
    requests_router,
    audit_router,
    dashboard_router,
    client_router,
]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = get_settings()
    load_all_models()

    app = FastAPI(
        title="Grow Fitness API",
        version="0.1.0",
        description="Admin and client API for Grow Fitness kids' training.",
    )

    # Add rate limiter state to app
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability (structured logging + request tracing)
    add_observability_middleware(app)

    # Add global exception handlers for consistent error responses
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple readiness endpoint."""
        return {"status": "ok"}

    for router in ROUTERS:
        app.include_router(router, prefix=API_PREFIX)

    return app


app = create_app()
