"""Role-specific dashboard aggregation.

``get_dashboard`` is the single dispatch point: the user's role selects one
stats builder from ``STATS_BUILDERS``; any role outside ``UserRole`` is an
``InvalidStateError``.
"""

from typing import Awaitable, Callable

from libs.common.errors import InvalidStateError
from libs.common.logging import get_logger
from services.lms_service.models import (
    Enrollment,
    InstructorContent,
    Module,
    User,
    UserRole,
)
from services.lms_service.schemas import (
    AdminStats,
    DashboardResponse,
    DashboardStats,
    DashboardUser,
    InstructorContentStat,
    InstructorModuleStat,
    InstructorStats,
    RoleBucket,
    TraineeContentGroup,
    TraineeModuleRef,
    TraineeStats,
)
from services.lms_service.services import store
from sqlalchemy import distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

StatsBuilder = Callable[[AsyncSession, User], Awaitable[DashboardStats]]


async def build_admin_stats(db: AsyncSession, user: User) -> AdminStats:
    total_users = (await db.execute(select(func.count(User.id)))).scalar_one()
    by_role = await store.count_users_by_role(db)

    admins = by_role.get(UserRole.ADMIN.value, 0)
    instructors = by_role.get(UserRole.INSTRUCTOR.value, 0)
    trainees = by_role.get(UserRole.TRAINEE.value, 0)

    return AdminStats(
        total_users=total_users,
        total_admins=admins,
        total_instructors=instructors,
        total_trainees=trainees,
        role_distribution=[
            RoleBucket(name="Admins", value=admins),
            RoleBucket(name="Instructors", value=instructors),
            RoleBucket(name="Trainees", value=trainees),
        ],
    )


async def build_instructor_stats(db: AsyncSession, user: User) -> InstructorStats:
    total_modules = (
        await db.execute(
            select(func.count(Module.id)).where(Module.instructor_id == user.id)
        )
    ).scalar_one()

    total_contents = (
        await db.execute(
            select(func.count(InstructorContent.id))
            .join(Module, Module.id == InstructorContent.module_id)
            .where(Module.instructor_id == user.id)
        )
    ).scalar_one()

    total_trainees = (
        await db.execute(
            select(func.count(distinct(Enrollment.trainee_id)))
            .join(InstructorContent, InstructorContent.id == Enrollment.content_id)
            .join(Module, Module.id == InstructorContent.module_id)
            .where(Module.instructor_id == user.id)
        )
    ).scalar_one()

    # Outer joins keep empty modules and unenrolled contents in the result.
    rows = (
        await db.execute(
            select(
                Module.id.label("module_id"),
                Module.title.label("module_title"),
                InstructorContent.id.label("content_id"),
                InstructorContent.title.label("content_title"),
                func.count(Enrollment.trainee_id).label("trainee_count"),
            )
            .select_from(Module)
            .outerjoin(InstructorContent, InstructorContent.module_id == Module.id)
            .outerjoin(Enrollment, Enrollment.content_id == InstructorContent.id)
            .where(Module.instructor_id == user.id)
            .group_by(
                Module.id,
                Module.title,
                Module.created_at,
                InstructorContent.id,
                InstructorContent.title,
            )
            .order_by(
                Module.created_at.desc(), Module.id.desc(), InstructorContent.id.asc()
            )
        )
    ).all()

    modules: dict[int, InstructorModuleStat] = {}
    for row in rows:
        module = modules.get(row.module_id)
        if module is None:
            module = InstructorModuleStat(
                module_id=row.module_id, module_title=row.module_title, contents=[]
            )
            modules[row.module_id] = module
        if row.content_id is not None:
            module.contents.append(
                InstructorContentStat(
                    content_id=row.content_id,
                    content_title=row.content_title,
                    trainee_count=int(row.trainee_count or 0),
                )
            )

    return InstructorStats(
        total_modules=total_modules,
        total_contents=total_contents,
        total_trainees=total_trainees,
        modules=list(modules.values()),
    )


async def build_trainee_stats(db: AsyncSession, user: User) -> TraineeStats:
    rows = (
        await db.execute(
            select(
                Enrollment.content_id,
                InstructorContent.title.label("content_title"),
                InstructorContent.module_id,
                Module.title.label("module_title"),
            )
            .join(InstructorContent, InstructorContent.id == Enrollment.content_id)
            .join(Module, Module.id == InstructorContent.module_id)
            .where(Enrollment.trainee_id == user.id)
            .order_by(Enrollment.id.asc())
        )
    ).all()

    # Grouped by content title, not id: same-titled contents share a bucket.
    grouped: dict[str, list[TraineeModuleRef]] = {}
    for row in rows:
        grouped.setdefault(row.content_title, []).append(
            TraineeModuleRef(module_title=row.module_title)
        )

    return TraineeStats(
        trainee_id=user.trainee_id,
        total_modules_enrolled=len({row.module_id for row in rows}),
        total_contents_enrolled=len({row.content_id for row in rows}),
        contents=[
            TraineeContentGroup(content_title=title, modules=modules)
            for title, modules in grouped.items()
        ],
    )


STATS_BUILDERS: dict[UserRole, StatsBuilder] = {
    UserRole.ADMIN: build_admin_stats,
    UserRole.INSTRUCTOR: build_instructor_stats,
    UserRole.TRAINEE: build_trainee_stats,
}


async def get_dashboard(db: AsyncSession, user_id: int) -> DashboardResponse:
    """Build the dashboard for ``user_id`` according to their role."""
    user = await store.require_user(db, user_id)

    try:
        role = UserRole(user.role)
    except ValueError:
        logger.warning("User %s has unrecognised role %r", user.id, user.role)
        raise InvalidStateError("Invalid user role", context={"role": user.role})

    stats = await STATS_BUILDERS[role](db, user)
    return DashboardResponse(user=DashboardUser.model_validate(user), stats=stats)
