"""Signup and login endpoints."""

from fastapi import APIRouter, Depends, Request, status
from libs.auth.dependencies import create_access_token
from libs.common.emails.accounts import AccountNotifier, get_account_notifier
from libs.common.rate_limit import auth_limit
from libs.db.session import get_async_db
from services.lms_service.models import UserRole
from services.lms_service.schemas import (
    LoginRequest,
    LoginResponse,
    UserCreate,
    UserCreatedResponse,
    UserResponse,
)
from services.lms_service.services import users as user_service
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/auth", tags=["auth"])

# Admin accounts are only created by other admins.
SELF_SERVICE_ROLES = (UserRole.TRAINEE.value, UserRole.INSTRUCTOR.value)


@router.post(
    "/signup",
    response_model=UserCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
@auth_limit
async def signup(
    request: Request,
    payload: UserCreate,
    db: AsyncSession = Depends(get_async_db),
    notifier: AccountNotifier = Depends(get_account_notifier),
):
    """Register a trainee or instructor account."""
    created = await user_service.create_user(
        db,
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        title=payload.title,
        notifier=notifier,
        allowed_roles=SELF_SERVICE_ROLES,
    )
    created.message = "User registered successfully!"
    return created


@router.post("/login", response_model=LoginResponse)
@auth_limit
async def login(
    request: Request,
    payload: LoginRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Exchange email and password for a bearer token."""
    user = await user_service.authenticate(
        db, email=payload.email, password=payload.password
    )
    return LoginResponse(
        message="Login successful!",
        user=UserResponse.model_validate(user),
        token=create_access_token(user),
    )
