"""Entity accessors shared by the LMS workflows.

``get_*`` helpers return ``None`` for a missing row; ``require_*`` helpers
raise ``NotFoundError`` instead. All filters are exact-equality.
"""

from typing import Optional, Sequence

from libs.common.errors import (
    ConflictError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
)
from libs.common.logging import get_logger
from services.lms_service.models import (
    AdminContent,
    Enrollment,
    InstructorContent,
    Module,
    User,
    UserRole,
)
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

# SQLSTATE codes reported by Postgres drivers
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


def integrity_violation(e: IntegrityError) -> str:
    """Classify an ``IntegrityError`` as ``"unique"``, ``"foreign_key"`` or ``"other"``."""
    code = getattr(e.orig, "sqlstate", None) or getattr(e.orig, "pgcode", None)
    detail = str(e.orig).lower()
    if code == UNIQUE_VIOLATION or "unique constraint" in detail:
        return "unique"
    if code == FOREIGN_KEY_VIOLATION or "foreign key constraint" in detail:
        return "foreign_key"
    return "other"


async def commit_or_conflict(
    db: AsyncSession,
    message: str,
    *,
    field_messages: Optional[dict[str, str]] = None,
    **context,
) -> None:
    """Commit, translating a uniqueness violation into ``ConflictError``.

    ``field_messages`` maps a column name to the message used when that
    column's constraint is the one violated. A foreign-key violation means a
    referenced row disappeared and is reported as ``NotFoundError``.
    """
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        kind = integrity_violation(e)
        if kind == "foreign_key":
            logger.info("Foreign key violation on commit: %s", e.orig)
            raise NotFoundError(
                "Referenced record not found", context=context or None
            ) from e
        if kind != "unique":
            logger.exception("Integrity error on commit")
            raise InternalError(
                "Could not save changes", context=context or None
            ) from e

        detail = str(e.orig)
        for column, column_message in (field_messages or {}).items():
            if column in detail:
                message = column_message
                break
        logger.info("Uniqueness violation: %s (%s)", message, e.orig)
        raise ConflictError(message, context=context or None) from e


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    return await db.get(User, user_id)


async def require_user(db: AsyncSession, user_id: int) -> User:
    user = await get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found", context={"user_id": user_id})
    return user


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def list_users(db: AsyncSession) -> Sequence[User]:
    result = await db.execute(select(User).order_by(User.id.asc()))
    return result.scalars().all()


async def list_trainees_rows(db: AsyncSession) -> Sequence[User]:
    result = await db.execute(
        select(User).where(User.role == UserRole.TRAINEE.value).order_by(User.id.asc())
    )
    return result.scalars().all()


async def count_users_by_role(db: AsyncSession) -> dict[str, int]:
    """Return ``{role: count}``; roles without users are absent."""
    result = await db.execute(select(User.role, func.count(User.id)).group_by(User.role))
    return {role: count for role, count in result.all()}


async def trainee_code_exists(db: AsyncSession, code: str) -> bool:
    result = await db.execute(select(User.id).where(User.trainee_id == code))
    return result.first() is not None


async def first_admin_id(db: AsyncSession) -> Optional[int]:
    result = await db.execute(
        select(User.id)
        .where(User.role == UserRole.ADMIN.value)
        .order_by(User.id.asc())
        .limit(1)
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Library (admin contents)
# ---------------------------------------------------------------------------


async def get_admin_content(db: AsyncSession, content_id: int) -> Optional[AdminContent]:
    return await db.get(AdminContent, content_id)


async def require_admin_content(db: AsyncSession, content_id: int) -> AdminContent:
    content = await get_admin_content(db, content_id)
    if content is None:
        raise NotFoundError(
            "Content not found in library", context={"admin_content_id": content_id}
        )
    return content


async def list_admin_contents(db: AsyncSession) -> Sequence[AdminContent]:
    result = await db.execute(select(AdminContent).order_by(AdminContent.id.desc()))
    return result.scalars().all()


async def image_in_use(db: AsyncSession, path: str) -> bool:
    """True when any library item or module content still references ``path``."""
    library = await db.execute(select(AdminContent.id).where(AdminContent.image == path))
    if library.first() is not None:
        return True
    copies = await db.execute(
        select(InstructorContent.id).where(InstructorContent.image == path)
    )
    return copies.first() is not None


# ---------------------------------------------------------------------------
# Modules
# ---------------------------------------------------------------------------


async def get_module(db: AsyncSession, module_id: int) -> Optional[Module]:
    return await db.get(Module, module_id)


async def require_module(db: AsyncSession, module_id: int) -> Module:
    module = await get_module(db, module_id)
    if module is None:
        raise NotFoundError("Module not found", context={"module_id": module_id})
    return module


async def require_owned_module(
    db: AsyncSession, module_id: int, instructor_id: int
) -> Module:
    """Fetch a module only if ``instructor_id`` owns it; foreign modules read as missing."""
    result = await db.execute(
        select(Module).where(Module.id == module_id, Module.instructor_id == instructor_id)
    )
    module = result.scalar_one_or_none()
    if module is None:
        raise NotFoundError(
            "Module not found or unauthorized",
            context={"module_id": module_id, "instructor_id": instructor_id},
        )
    return module


def check_module_owner(module: Module, instructor_id: Optional[int]) -> None:
    """Raise ``UnauthorizedError`` when an acting instructor does not own ``module``."""
    if instructor_id is not None and module.instructor_id != instructor_id:
        raise UnauthorizedError(
            "You do not own this module",
            context={"module_id": module.id, "instructor_id": instructor_id},
        )


async def list_modules_for_instructor(
    db: AsyncSession, instructor_id: int
) -> Sequence[Module]:
    result = await db.execute(
        select(Module)
        .where(Module.instructor_id == instructor_id)
        .order_by(Module.created_at.desc(), Module.id.desc())
    )
    return result.scalars().all()


# ---------------------------------------------------------------------------
# Module contents
# ---------------------------------------------------------------------------


async def get_instructor_content(
    db: AsyncSession, content_id: int
) -> Optional[InstructorContent]:
    return await db.get(InstructorContent, content_id)


async def require_instructor_content(
    db: AsyncSession, content_id: int
) -> InstructorContent:
    content = await get_instructor_content(db, content_id)
    if content is None:
        raise NotFoundError("Content not found", context={"content_id": content_id})
    return content


async def list_module_contents(
    db: AsyncSession, module_id: int
) -> Sequence[InstructorContent]:
    result = await db.execute(
        select(InstructorContent)
        .where(InstructorContent.module_id == module_id)
        .order_by(InstructorContent.created_at.desc(), InstructorContent.id.desc())
    )
    return result.scalars().all()


async def find_attachment(
    db: AsyncSession, module_id: int, admin_content_id: int
) -> Optional[InstructorContent]:
    result = await db.execute(
        select(InstructorContent).where(
            InstructorContent.module_id == module_id,
            InstructorContent.admin_content_id == admin_content_id,
        )
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Enrollments
# ---------------------------------------------------------------------------


async def find_enrollment(
    db: AsyncSession, content_id: int, trainee_id: int
) -> Optional[Enrollment]:
    result = await db.execute(
        select(Enrollment).where(
            Enrollment.content_id == content_id,
            Enrollment.trainee_id == trainee_id,
        )
    )
    return result.scalar_one_or_none()


async def delete_enrollments_for_contents(
    db: AsyncSession, content_ids: Sequence[int]
) -> int:
    """Delete enrollments of the given contents; caller commits."""
    if not content_ids:
        return 0
    result = await db.execute(
        delete(Enrollment).where(Enrollment.content_id.in_(content_ids))
    )
    return result.rowcount or 0
