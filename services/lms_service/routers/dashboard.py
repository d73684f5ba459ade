"""Role-specific dashboard endpoint."""

from fastapi import APIRouter, Depends
from libs.auth.dependencies import ensure_self_or_admin, get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.lms_service.schemas import DashboardResponse
from services.lms_service.services.dashboard import get_dashboard
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/users", tags=["dashboard"])


@router.get("/dashboard/{user_id}", response_model=DashboardResponse)
async def dashboard(
    user_id: int,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Return the caller's profile and the stats for their role."""
    ensure_self_or_admin(current_user, user_id)
    return await get_dashboard(db, user_id)
