"""LMS service routers."""

from services.lms_service.routers.auth import router as auth_router
from services.lms_service.routers.dashboard import router as dashboard_router
from services.lms_service.routers.enrollments import router as enrollments_router
from services.lms_service.routers.library import router as library_router
from services.lms_service.routers.modules import router as modules_router
from services.lms_service.routers.users import router as users_router

__all__ = [
    "auth_router",
    "dashboard_router",
    "enrollments_router",
    "library_router",
    "modules_router",
    "users_router",
]
