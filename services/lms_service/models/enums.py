"""Enum definitions for LMS models."""

import enum


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    INSTRUCTOR = "instructor"
    TRAINEE = "trainee"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]
