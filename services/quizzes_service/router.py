import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from libs.auth.dependencies import get_current_user, require_admin
from libs.auth.models import AuthUser
from libs.common.pagination import Page, PaginationParams, pagination_params
from libs.db.session import get_async_db
from services.banners_service.models import TargetAudience
from services.quizzes_service import service as quiz_service
from services.quizzes_service.schemas import (
    QuestionMove,
    QuizCreate,
    QuizResponse,
    QuizScore,
    QuizSubmission,
    QuizUpdate,
)

router = APIRouter(prefix="/quizzes", tags=["quizzes"])


@router.get("/", response_model=Page[QuizResponse])
async def list_quizzes(
    target_audience: Optional[TargetAudience] = Query(None),
    params: PaginationParams = Depends(pagination_params),
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    items, meta = await quiz_service.list_quizzes(db, params, target_audience)
    return {"data": items, "meta": meta}


@router.get("/{quiz_id}", response_model=QuizResponse)
async def get_quiz(
    quiz_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await quiz_service.get_quiz_or_404(db, quiz_id)


@router.post("/", response_model=QuizResponse, status_code=status.HTTP_201_CREATED)
async def create_quiz(
    quiz_in: QuizCreate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await quiz_service.create_quiz(db, quiz_in, current_user.user_id)


@router.patch("/{quiz_id}", response_model=QuizResponse)
async def update_quiz(
    quiz_id: uuid.UUID,
    quiz_in: QuizUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await quiz_service.update_quiz(db, quiz_id, quiz_in, current_user.user_id)


@router.delete("/{quiz_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_quiz(
    quiz_id: uuid.UUID,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    await quiz_service.delete_quiz(db, quiz_id, current_user.user_id)


@router.post("/{quiz_id}/questions/move", response_model=QuizResponse)
async def move_question(
    quiz_id: uuid.UUID,
    move_in: QuestionMove,
    current_user: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    return await quiz_service.move_quiz_question(
        db, quiz_id, move_in, current_user.user_id
    )


@router.post("/{quiz_id}/score", response_model=QuizScore)
async def score_quiz(
    quiz_id: uuid.UUID,
    submission: QuizSubmission,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Score a set of answers. Available to any signed-in user.
    """
    return await quiz_service.score_submission(db, quiz_id, submission)
