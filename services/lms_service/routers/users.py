"""Admin user management and profile pictures."""

from typing import List

from fastapi import APIRouter, Depends, File, UploadFile, status
from libs.auth.dependencies import ensure_self_or_admin, get_current_user, require_admin
from libs.auth.models import AuthUser
from libs.common.emails.accounts import AccountNotifier, get_account_notifier
from libs.common.errors import InvalidInputError
from libs.common.storage import (
    PROFILE_UPLOADS,
    LocalFileStorage,
    get_file_storage,
    store_image_upload,
)
from libs.db.session import get_async_db
from services.lms_service.schemas import (
    MessageResponse,
    PasswordResetRequest,
    PasswordResetResponse,
    ProfileUpdateResponse,
    UserCreate,
    UserCreatedResponse,
    UserResponse,
)
from services.lms_service.services import users as user_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/", response_model=List[UserResponse])
async def list_users(
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await user_service.list_users(db)


@router.post(
    "/", response_model=UserCreatedResponse, status_code=status.HTTP_201_CREATED
)
async def create_user(
    payload: UserCreate,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    notifier: AccountNotifier = Depends(get_account_notifier),
):
    """Create an account of any role and email its credentials."""
    return await user_service.create_user(
        db,
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        title=payload.title,
        notifier=notifier,
    )


@router.post("/reset-password", response_model=PasswordResetResponse)
async def reset_password(
    payload: PasswordResetRequest,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
    notifier: AccountNotifier = Depends(get_account_notifier),
):
    return await user_service.reset_password(
        db, email=payload.email, new_password=payload.new_password, notifier=notifier
    )


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await user_service.delete_user(db, user_id)
    return MessageResponse(message="User deleted successfully")


@router.post("/{user_id}/upload-profile", response_model=ProfileUpdateResponse)
async def upload_profile_picture(
    user_id: int,
    profile_picture: UploadFile = File(None),
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
    storage: LocalFileStorage = Depends(get_file_storage),
):
    """Replace the user's profile picture with the uploaded image."""
    ensure_self_or_admin(current_user, user_id)
    new_path = await store_image_upload(
        storage, profile_picture, PROFILE_UPLOADS, prefix="profile"
    )
    if new_path is None:
        raise InvalidInputError("No file uploaded")

    try:
        user = await user_service.update_profile_picture(
            db, user_id, new_path=new_path, storage=storage
        )
    except Exception:
        await storage.release(new_path)
        raise
    return ProfileUpdateResponse(
        message="Profile picture updated successfully",
        user=UserResponse.model_validate(user),
    )
