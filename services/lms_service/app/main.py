"""FastAPI application for the LMS service."""

from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from services.lms_service.routers import (
    auth_router,
    dashboard_router,
    enrollments_router,
    library_router,
    modules_router,
    users_router,
)
from slowapi.errors import RateLimitExceeded


def create_app() -> FastAPI:
    """Create and configure the LMS FastAPI app."""
    settings = get_settings()
    app = FastAPI(
        title="EndoNurseVR LMS",
        version="0.1.0",
        description="Role-based learning management backend: dashboards, content library, modules and enrollment.",
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_observability_middleware(app)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "lms"}

    app.include_router(auth_router)
    app.include_router(dashboard_router)
    app.include_router(library_router)
    app.include_router(modules_router)
    app.include_router(enrollments_router)
    # Catch-all user paths (/{user_id}) go last.
    app.include_router(users_router)

    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=upload_dir), name="uploads")

    return app


app = create_app()
