from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.common.rate_limit import auth_rate, limiter
from libs.db.session import get_async_db
from services.auth_service import service as auth_service
from services.auth_service.schemas import LoginRequest, TokenResponse
from services.users_service.parent_schemas import ParentCreate, ParentDetailResponse
from services.users_service.schemas import UserResponse
from services.users_service.service import get_user_or_404

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
@limiter.limit(auth_rate)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """
    Exchange email and password for a bearer token.
    """
    return await auth_service.login(db, credentials.email, credentials.password)


@router.post(
    "/register",
    response_model=ParentDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(auth_rate)
async def register(
    request: Request,
    parent_in: ParentCreate,
    db: AsyncSession = Depends(get_async_db),
):
    """
    Parent self sign-up. The account can log in once an admin approves it.
    """
    parent, kids = await auth_service.register_parent(db, parent_in)
    return ParentDetailResponse.build(parent, kids)


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    return await get_user_or_404(db, current_user.user_id)
