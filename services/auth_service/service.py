"""Login and parent self-registration."""

from typing import List, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import create_access_token
from libs.auth.passwords import verify_password
from libs.common.errors import ErrorCode, ForbiddenError, UnauthorizedError
from libs.common.logging import get_logger
from services.kids_service.models import Kid
from services.users_service.models import User, UserStatus
from services.users_service.parent_schemas import ParentCreate
from services.users_service.service import create_parent, get_user_by_email

logger = get_logger(__name__)


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """
    Check credentials and account state.

    Unknown emails and wrong passwords get the same 401 so the response does
    not reveal which accounts exist.
    """
    user = await get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login for {email}")
        raise UnauthorizedError(
            "Invalid email or password", ErrorCode.INVALID_CREDENTIALS
        )
    if user.status != UserStatus.ACTIVE:
        raise ForbiddenError("Account is not active", ErrorCode.ACCOUNT_INACTIVE)
    if not user.is_approved:
        raise ForbiddenError(
            "Account is awaiting approval", ErrorCode.ACCOUNT_NOT_APPROVED
        )
    return user


async def login(db: AsyncSession, email: str, password: str) -> dict:
    user = await authenticate(db, email, password)
    token = create_access_token(user.id, user.email, user.role)
    logger.info(f"User {user.id} logged in")
    return {"access_token": token, "token_type": "bearer", "user": user}


async def register_parent(
    db: AsyncSession, payload: ParentCreate
) -> Tuple[User, List[Kid]]:
    """Self sign-up. The parent and kids wait for admin approval."""
    return await create_parent(
        db, payload, actor_id=None, approved=False, action="REGISTER_PARENT"
    )
