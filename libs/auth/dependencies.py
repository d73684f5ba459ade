from datetime import timedelta
from typing import Annotated, Any, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from libs.auth.models import AuthUser
from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now

settings = get_settings()
security = HTTPBearer()


def create_access_token(user: Any) -> str:
    """
    Sign a token carrying the user's id, role and email.
    """
    expires_at = utc_now() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        # python-jose requires "sub" to be a string
        "sub": str(user.id),
        "role": user.role,
        "email": user.email,
        "exp": expires_at,
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


async def get_current_user(
    token: Annotated[HTTPAuthorizationCredentials, Depends(security)]
) -> AuthUser:
    """
    Validate the bearer JWT and return the authenticated user.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(
            token.credentials,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
        return AuthUser(**payload)
    except (JWTError, ValidationError):
        raise credentials_exception


def require_roles(*roles: str) -> Callable:
    """
    Build a dependency that only admits callers holding one of ``roles``.
    """

    async def _require(
        current_user: Annotated[AuthUser, Depends(get_current_user)]
    ) -> AuthUser:
        if current_user.role not in roles:
            label = " or ".join(role.capitalize() for role in roles)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{label} access required",
            )
        return current_user

    return _require


require_admin = require_roles("admin")
require_instructor = require_roles("instructor")


def ensure_self_or_admin(current_user: AuthUser, user_id: int) -> None:
    """
    Allow admins through, and other callers only for their own ``user_id``.
    """
    if current_user.role != "admin" and current_user.user_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access your own account",
        )
