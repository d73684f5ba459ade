"""Account management: creation, deletion, password reset, profile pictures."""

import random
import re
from typing import Collection, Optional, Sequence

from libs.common.config import get_settings
from libs.common.emails.accounts import AccountNotifier
from libs.common.errors import (
    AuthenticationError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
    require_fields,
)
from libs.common.logging import get_logger
from libs.common.passwords import hash_password, verify_password
from libs.common.storage import FileReleaser
from services.lms_service.models import Enrollment, Module, User, UserRole
from services.lms_service.schemas import (
    PasswordResetResponse,
    UserCreatedResponse,
    UserResponse,
)
from services.lms_service.services import store
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)
settings = get_settings()

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MAX_CODE_ATTEMPTS = 20


async def generate_trainee_code(db: AsyncSession) -> str:
    """Return an unused code like ``NHIS/T/4821``."""
    for _ in range(MAX_CODE_ATTEMPTS):
        code = f"{settings.TRAINEE_CODE_PREFIX}/{random.randint(1000, 9999)}"
        if not await store.trainee_code_exists(db, code):
            return code
    raise ConflictError("Could not allocate a unique trainee code")


async def list_users(db: AsyncSession) -> Sequence[User]:
    return await store.list_users(db)


async def create_user(
    db: AsyncSession,
    *,
    first_name: Optional[str],
    last_name: Optional[str],
    email: Optional[str],
    password: Optional[str],
    role: Optional[str],
    title: Optional[str] = None,
    notifier: Optional[AccountNotifier] = None,
    allowed_roles: Optional[Collection[str]] = None,
) -> UserCreatedResponse:
    """Create an account and send its credentials.

    The notification is sent after the commit; its outcome is reported as
    ``email_sent`` and never undoes the account.
    """
    require_fields(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password=password,
        role=role,
    )
    allowed_roles = allowed_roles or UserRole.values()
    email = email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise InvalidInputError("Invalid email format.", context={"email": email})
    if role not in allowed_roles:
        raise InvalidInputError(
            f"Role must be one of: {', '.join(allowed_roles)}",
            context={"role": role},
        )

    if await store.get_user_by_email(db, email) is not None:
        raise ConflictError("Email already registered.", context={"email": email})

    trainee_code = None
    if role == UserRole.TRAINEE.value:
        trainee_code = await generate_trainee_code(db)

    user = User(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password_hash=hash_password(password),
        role=role,
        title=title or None,
        trainee_id=trainee_code,
        profile_picture=settings.DEFAULT_AVATAR,
    )
    db.add(user)
    await store.commit_or_conflict(
        db,
        "Email already registered.",
        field_messages={"trainee_id": "Trainee code already in use, please retry."},
        email=email,
    )
    await db.refresh(user)
    logger.info("Created %s account %s (%s)", user.role, user.id, user.email)

    email_sent = False
    if notifier is not None:
        result = await notifier.notify_account_created(user, password)
        email_sent = result.success
        if not result.success:
            logger.warning(
                "Account email to %s not sent: %s", user.email, result.error
            )

    return UserCreatedResponse(
        message="User created successfully",
        user=UserResponse.model_validate(user),
        email_sent=email_sent,
    )


async def delete_user(db: AsyncSession, user_id: int) -> None:
    """Delete an account and its enrollments.

    The first admin account is permanent; instructors must have no modules left.
    """
    if await store.first_admin_id(db) == user_id:
        raise UnauthorizedError(
            "The primary admin account cannot be deleted",
            context={"user_id": user_id},
        )
    user = await store.require_user(db, user_id)

    owned = (
        await db.execute(
            select(func.count(Module.id)).where(Module.instructor_id == user.id)
        )
    ).scalar_one()
    if owned:
        raise ConflictError(
            "Delete this instructor's modules first",
            context={"user_id": user_id, "modules": owned},
        )

    try:
        await db.execute(delete(Enrollment).where(Enrollment.trainee_id == user.id))
        await db.execute(delete(User).where(User.id == user.id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    logger.info("Deleted user %s", user_id)


async def reset_password(
    db: AsyncSession,
    *,
    email: Optional[str],
    new_password: Optional[str],
    notifier: Optional[AccountNotifier] = None,
) -> PasswordResetResponse:
    require_fields(email=email, new_password=new_password)

    user = await store.get_user_by_email(db, email.strip().lower())
    if user is None:
        raise NotFoundError("User not found", context={"email": email})

    user.password_hash = hash_password(new_password)
    await db.commit()
    logger.info("Password reset for user %s", user.id)

    email_sent = False
    if notifier is not None:
        result = await notifier.notify_password_reset(user, new_password)
        email_sent = result.success

    return PasswordResetResponse(
        message="Password reset successfully", email_sent=email_sent
    )


async def update_profile_picture(
    db: AsyncSession, user_id: int, *, new_path: str, storage: FileReleaser
) -> User:
    user = await store.require_user(db, user_id)

    previous = user.profile_picture
    user.profile_picture = new_path
    await db.commit()
    await db.refresh(user)

    if previous and previous not in (new_path, settings.DEFAULT_AVATAR):
        await storage.release(previous)

    logger.info("Updated profile picture for user %s", user_id)
    return user


async def authenticate(
    db: AsyncSession, *, email: Optional[str], password: Optional[str]
) -> User:
    require_fields(email=email, password=password)

    user = await store.get_user_by_email(db, email.strip().lower())
    if user is None or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid email or password.")
    return user
