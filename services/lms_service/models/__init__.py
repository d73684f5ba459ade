"""LMS models package."""

from services.lms_service.models.core import (
    AdminContent,
    Enrollment,
    InstructorContent,
    Module,
    User,
)
from services.lms_service.models.enums import UserRole

__all__ = [
    "AdminContent",
    "Enrollment",
    "InstructorContent",
    "Module",
    "User",
    "UserRole",
]
