"""Admin content library endpoints (multipart forms)."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from libs.auth.dependencies import require_admin, require_roles
from libs.auth.models import AuthUser
from libs.common.errors import require_fields
from libs.common.storage import (
    CONTENT_UPLOADS,
    LocalFileStorage,
    get_file_storage,
    store_image_upload,
)
from libs.db.session import get_async_db
from services.lms_service.schemas import AdminContentResponse, MessageResponse
from services.lms_service.services import library
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/users/admin_contents", tags=["library"])


@router.get("", response_model=List[AdminContentResponse])
async def list_library_contents(
    _user: AuthUser = Depends(require_roles("admin", "instructor")),
    db: AsyncSession = Depends(get_async_db),
):
    """List library items, newest first."""
    return await library.list_library_contents(db)


@router.post(
    "", response_model=AdminContentResponse, status_code=status.HTTP_201_CREATED
)
async def add_library_content(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    video_url: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    require_fields(title=title)
    image_path = await store_image_upload(storage, image, CONTENT_UPLOADS, "content")
    try:
        return await library.add_library_content(
            db,
            title=title,
            description=description,
            image=image_path,
            video_url=video_url,
        )
    except Exception:
        await storage.release(image_path)
        raise


@router.put("/{content_id}", response_model=AdminContentResponse)
async def update_library_content(
    content_id: int,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    video_url: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    """Update a library item; omitted image/video keep their current values."""
    require_fields(title=title, description=description)
    image_path = await store_image_upload(storage, image, CONTENT_UPLOADS, "content")
    try:
        return await library.update_library_content(
            db,
            content_id,
            title=title,
            description=description,
            storage=storage,
            image=image_path,
            video_url=video_url,
        )
    except Exception:
        # Nothing references the new upload when the update fails.
        await storage.release(image_path)
        raise


@router.delete("/{content_id}", response_model=MessageResponse)
async def delete_library_content(
    content_id: int,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    await library.delete_library_content(db, content_id, storage=storage)
    return MessageResponse(message="Content deleted successfully")
