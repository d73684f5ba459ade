"""Enrollment endpoints for instructors and the trainee course view."""

from typing import List

from fastapi import APIRouter, Depends, status
from libs.auth.dependencies import (
    ensure_self_or_admin,
    get_current_user,
    require_instructor,
    require_roles,
)
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.lms_service.schemas import (
    EnrollRequest,
    EnrollResult,
    ModuleEnrollments,
    TraineeModule,
    TraineeSummary,
)
from services.lms_service.services import enrollment
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/users", tags=["enrollments"])


@router.post(
    "/contents/enroll",
    response_model=EnrollResult,
    status_code=status.HTTP_201_CREATED,
)
async def enroll_trainees(
    payload: EnrollRequest,
    current_user: AuthUser = Depends(require_instructor),
    db: AsyncSession = Depends(get_async_db),
):
    """Enroll trainees one by one; the first failure stops the batch."""
    return await enrollment.enroll_trainees(
        db,
        content_id=payload.content_id,
        trainee_ids=payload.trainee_ids,
        instructor_id=current_user.user_id,
    )


@router.get("/trainees", response_model=List[TraineeSummary])
async def list_trainees(
    _user: AuthUser = Depends(require_roles("admin", "instructor")),
    db: AsyncSession = Depends(get_async_db),
):
    return await enrollment.list_trainees(db)


@router.get("/modules/enrollments", response_model=List[ModuleEnrollments])
async def modules_with_enrollments(
    current_user: AuthUser = Depends(require_instructor),
    db: AsyncSession = Depends(get_async_db),
):
    return await enrollment.get_modules_with_enrollments(db, current_user.user_id)


@router.get("/my-courses/{trainee_id}", response_model=List[TraineeModule])
async def trainee_courses(
    trainee_id: int,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Modules and contents the trainee is enrolled in."""
    ensure_self_or_admin(current_user, trainee_id)
    return await enrollment.get_trainee_modules(db, trainee_id)
