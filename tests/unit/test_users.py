"""Unit tests for account management."""

import re

import pytest
from libs.common.errors import (
    AuthenticationError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from libs.common.passwords import verify_password
from services.lms_service.models import Enrollment, User
from services.lms_service.services import users as user_service
from sqlalchemy import select
from tests.factories import (
    DEFAULT_PASSWORD,
    EnrollmentFactory,
    InstructorContentFactory,
    ModuleFactory,
    UserFactory,
    persist,
)

NEW_USER = {
    "first_name": "Nora",
    "last_name": "Nurse",
    "email": "Nora.Nurse@Hospital.test",
    "password": "s3cret!",
    "role": "trainee",
}


# ---------------------------------------------------------------------------
# create_user
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_trainee_assigns_code_and_notifies(db_session, notifier):
    created = await user_service.create_user(db_session, notifier=notifier, **NEW_USER)

    user = created.user
    assert user.email == "nora.nurse@hospital.test"
    assert re.fullmatch(r"NHIS/T/\d{4}", user.trainee_id)
    assert user.profile_picture == "/uploads/default/default-avatar.png"
    assert created.email_sent is True
    assert notifier.sent == [("account_created", user.email, "s3cret!")]

    stored = await db_session.get(User, user.id)
    assert verify_password("s3cret!", stored.password_hash)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_instructor_has_no_trainee_code(db_session, notifier):
    created = await user_service.create_user(
        db_session, notifier=notifier, **{**NEW_USER, "role": "instructor", "title": "Dr."}
    )

    assert created.user.trainee_id is None
    assert created.user.title == "Dr."


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_user_reports_failed_notification(db_session, notifier):
    notifier.success = False

    created = await user_service.create_user(db_session, notifier=notifier, **NEW_USER)

    assert created.email_sent is False
    assert await db_session.get(User, created.user.id) is not None


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize(
    "overrides",
    [
        {"first_name": ""},
        {"password": None},
        {"email": "not-an-email"},
        {"role": "superuser"},
    ],
)
async def test_create_user_rejects_invalid_input(db_session, overrides):
    with pytest.raises(InvalidInputError):
        await user_service.create_user(db_session, **{**NEW_USER, **overrides})


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_user_duplicate_email_conflicts(db_session):
    await user_service.create_user(db_session, **NEW_USER)

    with pytest.raises(ConflictError):
        await user_service.create_user(db_session, **NEW_USER)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_user_respects_allowed_roles(db_session):
    with pytest.raises(InvalidInputError):
        await user_service.create_user(
            db_session,
            **{**NEW_USER, "role": "admin"},
            allowed_roles=("trainee", "instructor"),
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_trainee_code_is_regenerated_on_collision(db_session, monkeypatch):
    await persist(db_session, UserFactory.create(role="trainee", trainee_id="NHIS/T/1111"))
    draws = iter([1111, 2222])
    monkeypatch.setattr(user_service.random, "randint", lambda a, b: next(draws))

    code = await user_service.generate_trainee_code(db_session)

    assert code == "NHIS/T/2222"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_trainee_code_race_is_not_reported_as_duplicate_email(
    db_session, monkeypatch
):
    await persist(db_session, UserFactory.create(role="trainee", trainee_id="NHIS/T/3333"))

    async def taken_code(db):
        return "NHIS/T/3333"

    monkeypatch.setattr(user_service, "generate_trainee_code", taken_code)

    with pytest.raises(ConflictError) as exc_info:
        await user_service.create_user(db_session, **NEW_USER)

    assert exc_info.value.message == "Trainee code already in use, please retry."


# ---------------------------------------------------------------------------
# delete_user
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_first_admin_cannot_be_deleted(db_session):
    first, second = await persist(
        db_session, UserFactory.create(role="admin"), UserFactory.create(role="admin")
    )

    with pytest.raises(UnauthorizedError):
        await user_service.delete_user(db_session, first.id)

    await user_service.delete_user(db_session, second.id)
    assert await db_session.get(User, first.id) is not None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_missing_user_is_not_found(db_session):
    with pytest.raises(NotFoundError):
        await user_service.delete_user(db_session, 404)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_trainee_removes_enrollments(db_session):
    instructor, trainee = await persist(
        db_session, UserFactory.create(role="instructor"), UserFactory.create(role="trainee")
    )
    module = await persist(db_session, ModuleFactory.create(instructor.id))
    content = await persist(db_session, InstructorContentFactory.create(module.id))
    await persist(db_session, EnrollmentFactory.create(content.id, trainee.id))

    await user_service.delete_user(db_session, trainee.id)

    rows = await db_session.execute(
        select(Enrollment).where(Enrollment.trainee_id == trainee.id)
    )
    assert rows.scalars().all() == []
    assert await db_session.get(User, trainee.id) is None


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_instructor_with_modules_conflicts(db_session):
    instructor = await persist(db_session, UserFactory.create(role="instructor"))
    await persist(db_session, ModuleFactory.create(instructor.id))

    with pytest.raises(ConflictError):
        await user_service.delete_user(db_session, instructor.id)


# ---------------------------------------------------------------------------
# reset_password / authenticate
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_reset_password_rehashes_and_notifies(db_session, notifier):
    user = await persist(db_session, UserFactory.create(role="trainee"))

    result = await user_service.reset_password(
        db_session, email=user.email, new_password="fresh-pass", notifier=notifier
    )

    assert result.email_sent is True
    assert notifier.sent == [("password_reset", user.email, "fresh-pass")]
    authenticated = await user_service.authenticate(
        db_session, email=user.email, password="fresh-pass"
    )
    assert authenticated.id == user.id


@pytest.mark.asyncio
@pytest.mark.unit
async def test_reset_password_unknown_email(db_session):
    with pytest.raises(NotFoundError):
        await user_service.reset_password(
            db_session, email="ghost@test.com", new_password="x"
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_authenticate_rejects_wrong_password(db_session):
    user = await persist(db_session, UserFactory.create(role="trainee"))

    assert (
        await user_service.authenticate(
            db_session, email=user.email, password=DEFAULT_PASSWORD
        )
    ).id == user.id
    with pytest.raises(AuthenticationError):
        await user_service.authenticate(db_session, email=user.email, password="nope")
    with pytest.raises(AuthenticationError):
        await user_service.authenticate(
            db_session, email="ghost@test.com", password=DEFAULT_PASSWORD
        )


# ---------------------------------------------------------------------------
# update_profile_picture
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_profile_picture_default_avatar_is_never_released(db_session, storage):
    default = storage.root / "default" / "default-avatar.png"
    default.parent.mkdir(parents=True)
    default.write_bytes(b"avatar")
    user = await persist(db_session, UserFactory.create(role="trainee"))
    first = await storage.store(b"1", "me.png", folder="profilePic_uploads")

    await user_service.update_profile_picture(
        db_session, user.id, new_path=first, storage=storage
    )
    assert default.exists()

    second = await storage.store(b"2", "me2.png", folder="profilePic_uploads")
    updated = await user_service.update_profile_picture(
        db_session, user.id, new_path=second, storage=storage
    )

    assert updated.profile_picture == second
    assert not (storage.root / first.removeprefix("/uploads/")).exists()


@pytest.mark.asyncio
@pytest.mark.unit
async def test_profile_picture_missing_user(db_session, storage):
    with pytest.raises(NotFoundError):
        await user_service.update_profile_picture(
            db_session, 404, new_path="/uploads/profilePic_uploads/x.png", storage=storage
        )
