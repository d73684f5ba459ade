"""Instructor module endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from libs.auth.dependencies import require_instructor, require_roles
from libs.auth.models import AuthUser
from libs.common.errors import require_fields
from libs.common.storage import (
    MODULE_UPLOADS,
    LocalFileStorage,
    get_file_storage,
    store_image_upload,
)
from libs.db.session import get_async_db
from services.lms_service.schemas import (
    InstructorContentResponse,
    MessageResponse,
    ModuleCreate,
    ModuleResponse,
    ModuleWithContents,
)
from services.lms_service.services import modules as module_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/users", tags=["modules"])


@router.get("/modules", response_model=List[ModuleWithContents])
async def list_modules(
    current_user: AuthUser = Depends(require_instructor),
    db: AsyncSession = Depends(get_async_db),
):
    """List the caller's modules with their contents, newest first."""
    return await module_service.list_modules_with_contents(db, current_user.user_id)


@router.post(
    "/modules", response_model=ModuleResponse, status_code=status.HTTP_201_CREATED
)
async def create_module(
    payload: ModuleCreate,
    current_user: AuthUser = Depends(require_instructor),
    db: AsyncSession = Depends(get_async_db),
):
    return await module_service.create_module(
        db, title=payload.title, instructor_id=current_user.user_id
    )


@router.delete("/modules/{module_id}", response_model=MessageResponse)
async def delete_module(
    module_id: int,
    current_user: AuthUser = Depends(require_instructor),
    db: AsyncSession = Depends(get_async_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    """Delete a module together with its contents and their enrollments."""
    await module_service.delete_module(
        db, module_id, instructor_id=current_user.user_id, storage=storage
    )
    return MessageResponse(message="Module deleted successfully")


@router.get(
    "/modules/{module_id}/contents", response_model=List[InstructorContentResponse]
)
async def list_module_contents(
    module_id: int,
    _user: AuthUser = Depends(require_roles("admin", "instructor")),
    db: AsyncSession = Depends(get_async_db),
):
    return await module_service.list_module_contents(db, module_id)


@router.post(
    "/modules/{module_id}/attach_content/{content_id}",
    response_model=InstructorContentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def attach_library_content(
    module_id: int,
    content_id: int,
    current_user: AuthUser = Depends(require_instructor),
    db: AsyncSession = Depends(get_async_db),
):
    """Copy library item ``content_id`` into the caller's module."""
    return await module_service.attach_to_module(
        db,
        module_id=module_id,
        admin_content_id=content_id,
        instructor_id=current_user.user_id,
    )


@router.put("/contents/{content_id}", response_model=InstructorContentResponse)
async def edit_module_content(
    content_id: int,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    videopath: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    current_user: AuthUser = Depends(require_instructor),
    db: AsyncSession = Depends(get_async_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    """Edit a module content item; ``videopath`` replaces the video, even when empty."""
    require_fields(title=title, description=description)
    image_path = await store_image_upload(storage, image, MODULE_UPLOADS, "module")
    try:
        return await module_service.edit_module_content(
            db,
            content_id,
            title=title,
            description=description,
            storage=storage,
            video=videopath,
            image=image_path,
            instructor_id=current_user.user_id,
        )
    except Exception:
        await storage.release(image_path)
        raise


@router.delete("/contents/{content_id}", response_model=MessageResponse)
async def delete_module_content(
    content_id: int,
    current_user: AuthUser = Depends(require_instructor),
    db: AsyncSession = Depends(get_async_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    await module_service.delete_module_content(
        db, content_id, storage=storage, instructor_id=current_user.user_id
    )
    return MessageResponse(message="Content deleted successfully")
