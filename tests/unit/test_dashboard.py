"""Unit tests for the role-specific dashboard builders.

Tests call the dashboard service directly with the db_session fixture.
"""

import pytest
from libs.common.errors import InvalidStateError, NotFoundError
from services.lms_service.schemas import AdminStats, InstructorStats, TraineeStats
from services.lms_service.services.dashboard import get_dashboard
from tests.factories import (
    EnrollmentFactory,
    InstructorContentFactory,
    ModuleFactory,
    UserFactory,
    minutes_ago,
    persist,
)

# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_admin_dashboard_counts_users_by_role(db_session):
    admin = UserFactory.create(role="admin")
    await persist(
        db_session,
        admin,
        UserFactory.create(role="instructor"),
        UserFactory.create(role="instructor"),
        UserFactory.create(role="trainee"),
        UserFactory.create(role="trainee"),
        UserFactory.create(role="trainee"),
    )

    dashboard = await get_dashboard(db_session, admin.id)

    assert dashboard.user.id == admin.id
    stats = dashboard.stats
    assert isinstance(stats, AdminStats)
    assert stats.total_users == 6
    assert stats.total_admins == 1
    assert stats.total_instructors == 2
    assert stats.total_trainees == 3
    assert [(b.name, b.value) for b in stats.role_distribution] == [
        ("Admins", 1),
        ("Instructors", 2),
        ("Trainees", 3),
    ]


# ---------------------------------------------------------------------------
# Instructor
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_instructor_dashboard_reports_zero_for_unenrolled_content(db_session):
    instructor = await persist(db_session, UserFactory.create(role="instructor"))
    module = await persist(db_session, ModuleFactory.create(instructor.id))
    await persist(db_session, InstructorContentFactory.create(module.id, title="Intro"))

    stats = (await get_dashboard(db_session, instructor.id)).stats

    assert isinstance(stats, InstructorStats)
    assert stats.total_modules == 1
    assert stats.total_contents == 1
    assert stats.total_trainees == 0
    assert len(stats.modules) == 1
    assert stats.modules[0].contents[0].content_title == "Intro"
    assert stats.modules[0].contents[0].trainee_count == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_instructor_dashboard_counts_distinct_trainees(db_session):
    instructor = await persist(db_session, UserFactory.create(role="instructor"))
    t1, t2 = await persist(
        db_session, UserFactory.create(role="trainee"), UserFactory.create(role="trainee")
    )
    module = await persist(db_session, ModuleFactory.create(instructor.id))
    c1, c2 = await persist(
        db_session,
        InstructorContentFactory.create(module.id, title="A"),
        InstructorContentFactory.create(module.id, title="B"),
    )
    await persist(
        db_session,
        EnrollmentFactory.create(c1.id, t1.id),
        EnrollmentFactory.create(c1.id, t2.id),
        EnrollmentFactory.create(c2.id, t1.id),
    )

    stats = (await get_dashboard(db_session, instructor.id)).stats

    assert stats.total_trainees == 2
    counts = {c.content_id: c.trainee_count for c in stats.modules[0].contents}
    assert counts == {c1.id: 2, c2.id: 1}
    # contents within a module are ordered by id
    assert [c.content_id for c in stats.modules[0].contents] == [c1.id, c2.id]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_instructor_dashboard_lists_newest_module_first_including_empty(
    db_session,
):
    instructor = await persist(db_session, UserFactory.create(role="instructor"))
    older, newer = await persist(
        db_session,
        ModuleFactory.create(instructor.id, title="Older", created_at=minutes_ago(10)),
        ModuleFactory.create(instructor.id, title="Newer", created_at=minutes_ago(1)),
    )
    await persist(db_session, InstructorContentFactory.create(older.id))

    stats = (await get_dashboard(db_session, instructor.id)).stats

    assert [m.module_title for m in stats.modules] == ["Newer", "Older"]
    assert stats.modules[0].contents == []
    assert len(stats.modules[1].contents) == 1


@pytest.mark.asyncio
@pytest.mark.unit
async def test_instructor_dashboard_ignores_other_instructors_modules(db_session):
    mine, theirs = await persist(
        db_session,
        UserFactory.create(role="instructor"),
        UserFactory.create(role="instructor"),
    )
    await persist(db_session, ModuleFactory.create(theirs.id))

    stats = (await get_dashboard(db_session, mine.id)).stats

    assert stats.total_modules == 0
    assert stats.modules == []


# ---------------------------------------------------------------------------
# Trainee
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_trainee_dashboard_counts_distinct_modules_and_contents(db_session):
    instructor = await persist(db_session, UserFactory.create(role="instructor"))
    trainee = await persist(
        db_session, UserFactory.create(role="trainee", trainee_id="NHIS/T/1001")
    )
    module = await persist(db_session, ModuleFactory.create(instructor.id, title="M1"))
    c1, c2 = await persist(
        db_session,
        InstructorContentFactory.create(module.id, title="A"),
        InstructorContentFactory.create(module.id, title="B"),
    )
    await persist(
        db_session,
        EnrollmentFactory.create(c1.id, trainee.id),
        EnrollmentFactory.create(c2.id, trainee.id),
    )

    stats = (await get_dashboard(db_session, trainee.id)).stats

    assert isinstance(stats, TraineeStats)
    assert stats.trainee_id == "NHIS/T/1001"
    assert stats.total_modules_enrolled == 1
    assert stats.total_contents_enrolled == 2
    assert [g.content_title for g in stats.contents] == ["A", "B"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_trainee_dashboard_groups_contents_by_title(db_session):
    instructor = await persist(db_session, UserFactory.create(role="instructor"))
    trainee = await persist(db_session, UserFactory.create(role="trainee"))
    m1, m2 = await persist(
        db_session,
        ModuleFactory.create(instructor.id, title="Upper GI"),
        ModuleFactory.create(instructor.id, title="Lower GI"),
    )
    c1, c2 = await persist(
        db_session,
        InstructorContentFactory.create(m1.id, title="Scope Care"),
        InstructorContentFactory.create(m2.id, title="Scope Care"),
    )
    await persist(
        db_session,
        EnrollmentFactory.create(c1.id, trainee.id),
        EnrollmentFactory.create(c2.id, trainee.id),
    )

    stats = (await get_dashboard(db_session, trainee.id)).stats

    assert len(stats.contents) == 1
    group = stats.contents[0]
    assert group.content_title == "Scope Care"
    assert [m.module_title for m in group.modules] == ["Upper GI", "Lower GI"]
    assert stats.total_contents_enrolled == 2
    assert stats.total_modules_enrolled == 2


@pytest.mark.asyncio
@pytest.mark.unit
async def test_trainee_dashboard_without_enrollments_is_empty(db_session):
    trainee = await persist(db_session, UserFactory.create(role="trainee"))

    stats = (await get_dashboard(db_session, trainee.id)).stats

    assert stats.total_modules_enrolled == 0
    assert stats.total_contents_enrolled == 0
    assert stats.contents == []


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_dashboard_unknown_role_is_invalid_state(db_session):
    user = await persist(db_session, UserFactory.create(role="superuser"))

    with pytest.raises(InvalidStateError) as exc_info:
        await get_dashboard(db_session, user.id)

    assert exc_info.value.message == "Invalid user role"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_dashboard_missing_user_is_not_found(db_session):
    with pytest.raises(NotFoundError):
        await get_dashboard(db_session, 999)
