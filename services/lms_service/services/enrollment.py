"""Trainee enrollment into module contents, and the views built on it."""

from typing import Optional, Sequence

from libs.common.errors import ConflictError, InvalidInputError, NotFoundError
from libs.common.logging import get_logger
from services.lms_service.models import (
    Enrollment,
    InstructorContent,
    Module,
    User,
    UserRole,
)
from services.lms_service.schemas import (
    ContentEnrollments,
    EnrolledTrainee,
    EnrollResult,
    ModuleEnrollments,
    TraineeContent,
    TraineeModule,
)
from services.lms_service.services import store
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def enroll_trainees(
    db: AsyncSession,
    *,
    content_id: int,
    trainee_ids: Sequence[int],
    instructor_id: Optional[int] = None,
) -> EnrollResult:
    """Enroll each trainee in order, committing one at a time.

    The first failing trainee aborts the batch with its error; trainees
    enrolled before it stay enrolled. When ``instructor_id`` is given the
    content's module must belong to that instructor.
    """
    if not content_id or not trainee_ids:
        raise InvalidInputError(
            "Content ID and a non-empty trainee list are required",
            context={"content_id": content_id},
        )

    content = await store.require_instructor_content(db, content_id)
    module = await store.require_module(db, content.module_id)
    store.check_module_owner(module, instructor_id)

    enrolled: list[int] = []
    for trainee_id in trainee_ids:
        trainee = await store.get_user(db, trainee_id)
        if trainee is None or trainee.role != UserRole.TRAINEE.value:
            logger.info(
                "Enrollment into %s stopped after %d trainee(s): %s missing",
                content_id,
                len(enrolled),
                trainee_id,
            )
            raise NotFoundError(
                f"Trainee with ID {trainee_id} not found",
                context={"trainee_id": trainee_id, "enrolled": enrolled},
            )

        duplicate = f"Trainee {trainee.trainee_id} has already been added"
        if await store.find_enrollment(db, content_id, trainee.id) is not None:
            raise ConflictError(
                duplicate,
                context={"trainee_id": trainee.trainee_id, "enrolled": enrolled},
            )

        db.add(Enrollment(content_id=content_id, trainee_id=trainee.id))
        await store.commit_or_conflict(
            db, duplicate, trainee_id=trainee.trainee_id, enrolled=enrolled
        )
        enrolled.append(trainee.id)

    logger.info("Enrolled %d trainee(s) into content %s", len(enrolled), content_id)
    return EnrollResult(
        message="Trainees enrolled successfully",
        content_id=content_id,
        enrolled=enrolled,
    )


async def list_trainees(db: AsyncSession) -> Sequence[User]:
    return await store.list_trainees_rows(db)


async def get_modules_with_enrollments(
    db: AsyncSession, instructor_id: int
) -> list[ModuleEnrollments]:
    """Instructor view: module -> content -> enrolled trainees."""
    rows = (
        await db.execute(
            select(
                Module.id.label("module_id"),
                Module.title.label("module_title"),
                InstructorContent.id.label("content_id"),
                InstructorContent.title.label("content_title"),
                User.first_name,
                User.last_name,
                User.trainee_id,
            )
            .select_from(Module)
            .outerjoin(InstructorContent, InstructorContent.module_id == Module.id)
            .outerjoin(Enrollment, Enrollment.content_id == InstructorContent.id)
            .outerjoin(User, User.id == Enrollment.trainee_id)
            .where(Module.instructor_id == instructor_id)
            .order_by(
                Module.created_at.desc(),
                Module.id.desc(),
                InstructorContent.created_at.desc(),
                InstructorContent.id.desc(),
                Enrollment.id.asc(),
            )
        )
    ).all()

    modules: dict[int, ModuleEnrollments] = {}
    contents: dict[int, ContentEnrollments] = {}
    for row in rows:
        module = modules.get(row.module_id)
        if module is None:
            module = ModuleEnrollments(
                id=row.module_id, title=row.module_title, contents=[]
            )
            modules[row.module_id] = module
        if row.content_id is None:
            continue

        content = contents.get(row.content_id)
        if content is None:
            content = ContentEnrollments(id=row.content_id, title=row.content_title)
            contents[row.content_id] = content
            module.contents.append(content)
        if row.first_name is not None:
            content.enrolled_trainees.append(
                EnrolledTrainee(
                    first_name=row.first_name,
                    last_name=row.last_name,
                    trainee_id=row.trainee_id,
                )
            )

    return list(modules.values())


async def get_trainee_modules(
    db: AsyncSession, trainee_id: int
) -> list[TraineeModule]:
    """Trainee view: the modules holding the trainee's enrolled contents."""
    rows = (
        await db.execute(
            select(
                Module.id.label("module_id"),
                Module.title.label("module_title"),
                InstructorContent.id.label("content_id"),
                InstructorContent.title.label("content_title"),
                InstructorContent.description,
                InstructorContent.image,
                InstructorContent.video,
            )
            .select_from(Enrollment)
            .join(InstructorContent, InstructorContent.id == Enrollment.content_id)
            .join(Module, Module.id == InstructorContent.module_id)
            .where(Enrollment.trainee_id == trainee_id)
            .order_by(
                Module.created_at.desc(),
                Module.id.desc(),
                InstructorContent.created_at.desc(),
                InstructorContent.id.desc(),
            )
        )
    ).all()

    modules: dict[int, TraineeModule] = {}
    for row in rows:
        module = modules.get(row.module_id)
        if module is None:
            module = TraineeModule(id=row.module_id, title=row.module_title, contents=[])
            modules[row.module_id] = module
        module.contents.append(
            TraineeContent(
                id=row.content_id,
                title=row.content_title,
                description=row.description,
                image=row.image,
                video=row.video,
            )
        )

    return list(modules.values())
