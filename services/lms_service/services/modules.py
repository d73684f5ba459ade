"""Instructor modules and the content copied into them."""

from typing import Optional, Sequence

from libs.common.errors import ConflictError, NotFoundError, require_fields
from libs.common.logging import get_logger
from libs.common.storage import FileReleaser
from services.lms_service.models import InstructorContent, Module, UserRole
from services.lms_service.schemas import InstructorContentResponse, ModuleWithContents
from services.lms_service.services import store
from services.lms_service.services.library import release_if_unused
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def create_module(
    db: AsyncSession, *, title: Optional[str], instructor_id: int
) -> Module:
    require_fields(title=title)

    instructor = await store.get_user(db, instructor_id)
    if instructor is None or instructor.role != UserRole.INSTRUCTOR.value:
        raise NotFoundError(
            "Instructor not found", context={"instructor_id": instructor_id}
        )

    module = Module(title=title, instructor_id=instructor_id)
    db.add(module)
    await db.commit()
    await db.refresh(module)

    logger.info("Instructor %s created module %s", instructor_id, module.id)
    return module


async def list_modules_with_contents(
    db: AsyncSession, instructor_id: int
) -> list[ModuleWithContents]:
    modules = await store.list_modules_for_instructor(db, instructor_id)
    if not modules:
        return []

    result = await db.execute(
        select(InstructorContent)
        .where(InstructorContent.module_id.in_([m.id for m in modules]))
        .order_by(InstructorContent.created_at.desc(), InstructorContent.id.desc())
    )
    by_module: dict[int, list[InstructorContentResponse]] = {}
    for content in result.scalars().all():
        by_module.setdefault(content.module_id, []).append(
            InstructorContentResponse.model_validate(content)
        )

    return [
        ModuleWithContents(
            id=module.id,
            title=module.title,
            instructor_id=module.instructor_id,
            created_at=module.created_at,
            contents=by_module.get(module.id, []),
        )
        for module in modules
    ]


async def list_module_contents(
    db: AsyncSession, module_id: int
) -> Sequence[InstructorContent]:
    await store.require_module(db, module_id)
    return await store.list_module_contents(db, module_id)


async def attach_to_module(
    db: AsyncSession,
    *,
    module_id: int,
    admin_content_id: int,
    instructor_id: Optional[int] = None,
) -> InstructorContent:
    """Copy a library item into a module.

    The copy is independent of its source: later library edits or deletes do
    not reach it. A library item can be attached to a given module only once.
    """
    module = await store.require_module(db, module_id)
    store.check_module_owner(module, instructor_id)
    source = await store.require_admin_content(db, admin_content_id)

    if await store.find_attachment(db, module_id, admin_content_id) is not None:
        raise ConflictError(
            "Content already added to this module",
            context={"module_id": module_id, "admin_content_id": admin_content_id},
        )

    copy = InstructorContent(
        module_id=module_id,
        title=source.title,
        description=source.description,
        image=source.image,
        video=source.video_url,
        admin_content_id=source.id,
    )
    db.add(copy)
    await store.commit_or_conflict(
        db,
        "Content already added to this module",
        module_id=module_id,
        admin_content_id=admin_content_id,
    )
    await db.refresh(copy)

    logger.info(
        "Attached library content %s to module %s as %s",
        admin_content_id,
        module_id,
        copy.id,
    )
    return copy


async def edit_module_content(
    db: AsyncSession,
    content_id: int,
    *,
    title: Optional[str],
    description: Optional[str],
    storage: FileReleaser,
    video: Optional[str] = None,
    image: Optional[str] = None,
    instructor_id: Optional[int] = None,
) -> InstructorContent:
    """Edit a module's copy of a content item.

    ``video`` always overwrites the stored value (``None`` clears it); ``image``
    only replaces the stored one when supplied.
    """
    content = await store.require_instructor_content(db, content_id)
    require_fields(title=title, description=description)
    module = await store.require_module(db, content.module_id)
    store.check_module_owner(module, instructor_id)

    previous_image = content.image
    content.title = title
    content.description = description
    content.video = video or None
    if image:
        content.image = image

    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(content)

    if image and previous_image and previous_image != image:
        await release_if_unused(db, storage, previous_image)

    logger.info("Updated module content %s", content.id)
    return content


async def delete_module_content(
    db: AsyncSession,
    content_id: int,
    *,
    storage: FileReleaser,
    instructor_id: Optional[int] = None,
) -> None:
    content = await store.require_instructor_content(db, content_id)
    module = await store.require_module(db, content.module_id)
    store.check_module_owner(module, instructor_id)
    image = content.image

    try:
        removed = await store.delete_enrollments_for_contents(db, [content.id])
        await db.execute(
            delete(InstructorContent).where(InstructorContent.id == content.id)
        )
        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await release_if_unused(db, storage, image)
    logger.info(
        "Deleted module content %s and %d enrollment(s)", content_id, removed
    )


async def delete_module(
    db: AsyncSession, module_id: int, *, instructor_id: int, storage: FileReleaser
) -> None:
    """Delete a module with its contents and their enrollments, children first."""
    module = await store.require_owned_module(db, module_id, instructor_id)

    rows = await db.execute(
        select(InstructorContent.id, InstructorContent.image).where(
            InstructorContent.module_id == module.id
        )
    )
    contents = rows.all()
    content_ids = [row.id for row in contents]

    try:
        removed = await store.delete_enrollments_for_contents(db, content_ids)
        await db.execute(
            delete(InstructorContent).where(InstructorContent.module_id == module.id)
        )
        await db.execute(delete(Module).where(Module.id == module.id))
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Deleting module %s failed, rolled back", module_id)
        raise

    for image in {row.image for row in contents if row.image}:
        await release_if_unused(db, storage, image)

    logger.info(
        "Deleted module %s with %d content(s) and %d enrollment(s)",
        module_id,
        len(content_ids),
        removed,
    )
