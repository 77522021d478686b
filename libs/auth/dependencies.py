from datetime import timedelta
from typing import Annotated, Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from libs.auth.models import AuthUser, UserRole
from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now
from libs.common.errors import ForbiddenError, UnauthorizedError

security = HTTPBearer(auto_error=False)


def create_access_token(
    user_id, email: str, role: UserRole, expires_minutes: Optional[int] = None
) -> str:
    """Issue an HS256 access token carrying sub, email and role."""
    settings = get_settings()
    now = utc_now()
    expires = now + timedelta(minutes=expires_minutes or settings.JWT_EXPIRES_MINUTES)
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role.value if isinstance(role, UserRole) else role,
        "iat": int(now.timestamp()),
        "exp": int(expires.timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> AuthUser:
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM]
        )
        return AuthUser(**payload)
    except (JWTError, ValidationError):
        raise UnauthorizedError()


async def get_current_user(
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> AuthUser:
    """
    Validate the bearer token and return the authenticated user.
    """
    if token is None:
        raise UnauthorizedError("Not authenticated")
    return decode_access_token(token.credentials)


def require_roles(*roles: UserRole) -> Callable:
    """Build a dependency that only lets the given roles through."""

    async def _require_roles(
        current_user: Annotated[AuthUser, Depends(get_current_user)],
    ) -> AuthUser:
        if current_user.role not in roles:
            raise ForbiddenError("Insufficient permissions")
        return current_user

    return _require_roles


require_admin = require_roles(UserRole.ADMIN)
