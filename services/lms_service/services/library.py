"""Admin content library.

Library items are templates: attaching one to a module copies it (see
``modules.attach_to_module``), so edits and deletes here never touch the
copies. Image files are released only after the row change is committed.
"""

from typing import Optional, Sequence

from libs.common.errors import require_fields
from libs.common.logging import get_logger
from libs.common.storage import FileReleaser
from services.lms_service.models import AdminContent
from services.lms_service.services import store
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def release_if_unused(
    db: AsyncSession, storage: FileReleaser, path: Optional[str]
) -> None:
    """Release ``path`` unless another library item or module content still uses it."""
    if not path:
        return
    if await store.image_in_use(db, path):
        logger.info("Keeping %s, still referenced", path)
        return
    await storage.release(path)


async def list_library_contents(db: AsyncSession) -> Sequence[AdminContent]:
    return await store.list_admin_contents(db)


async def add_library_content(
    db: AsyncSession,
    *,
    title: Optional[str],
    description: Optional[str] = None,
    image: Optional[str] = None,
    video_url: Optional[str] = None,
) -> AdminContent:
    require_fields(title=title)

    content = AdminContent(
        title=title,
        description=description,
        image=image,
        video_url=video_url or None,
    )
    db.add(content)
    await db.commit()
    await db.refresh(content)

    logger.info("Added library content %s (%s)", content.id, content.title)
    return content


async def update_library_content(
    db: AsyncSession,
    content_id: int,
    *,
    title: Optional[str],
    description: Optional[str],
    storage: FileReleaser,
    image: Optional[str] = None,
    video_url: Optional[str] = None,
) -> AdminContent:
    """Update a library item; ``image``/``video_url`` keep their old values when omitted."""
    require_fields(title=title, description=description)
    content = await store.require_admin_content(db, content_id)

    previous_image = content.image
    content.title = title
    content.description = description
    if image:
        content.image = image
    if video_url:
        content.video_url = video_url

    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(content)

    if image and previous_image and previous_image != image:
        await release_if_unused(db, storage, previous_image)

    logger.info("Updated library content %s", content.id)
    return content


async def delete_library_content(
    db: AsyncSession, content_id: int, *, storage: FileReleaser
) -> None:
    """Delete a library item. Module copies made from it are left untouched."""
    content = await store.require_admin_content(db, content_id)
    image = content.image

    await db.delete(content)
    await db.commit()

    await release_if_unused(db, storage, image)
    logger.info("Deleted library content %s", content_id)
