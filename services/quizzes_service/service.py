import uuid
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from libs.common.errors import ErrorCode, NotFoundError
from libs.common.logging import get_logger
from libs.common.pagination import PageMeta, PaginationParams, paginate
from services.audit_service.service import record_audit
from services.banners_service.models import TargetAudience
from services.quizzes_service.models import DEFAULT_PASSING_SCORE, Quiz
from services.quizzes_service.questions import (
    move_question,
    normalize_questions,
    score_quiz,
)
from services.quizzes_service.schemas import (
    QuestionMove,
    QuizCreate,
    QuizSubmission,
    QuizUpdate,
)

logger = get_logger(__name__)

ENTITY_TYPE = "Quiz"


async def list_quizzes(
    db: AsyncSession,
    params: PaginationParams,
    target_audience: Optional[TargetAudience] = None,
) -> Tuple[List[Quiz], PageMeta]:
    query = select(Quiz)
    if target_audience:
        query = query.where(Quiz.target_audience == target_audience)
    query = query.order_by(Quiz.created_at.desc())
    return await paginate(db, query, params)


async def get_quiz_or_404(db: AsyncSession, quiz_id: uuid.UUID) -> Quiz:
    quiz = await db.get(Quiz, quiz_id)
    if not quiz:
        raise NotFoundError("Quiz not found", ErrorCode.QUIZ_NOT_FOUND)
    return quiz


async def create_quiz(db: AsyncSession, payload: QuizCreate, actor_id: uuid.UUID) -> Quiz:
    data = payload.model_dump(mode="json")
    data["questions"] = normalize_questions(data["questions"])

    quiz = Quiz(
        id=uuid.uuid4(),
        title=payload.title,
        description=payload.description,
        questions=data["questions"],
        target_audience=payload.target_audience,
        passing_score=payload.passing_score,
        is_active=True,
    )
    db.add(quiz)
    record_audit(db, actor_id, "CREATE_QUIZ", ENTITY_TYPE, quiz.id, data)
    await db.commit()
    await db.refresh(quiz)
    logger.info(f"Created quiz {quiz.id} with {len(quiz.questions)} question(s)")
    return quiz


async def update_quiz(
    db: AsyncSession, quiz_id: uuid.UUID, payload: QuizUpdate, actor_id: uuid.UUID
) -> Quiz:
    quiz = await get_quiz_or_404(db, quiz_id)

    update_data = payload.model_dump(exclude_unset=True)
    if update_data.get("questions") is not None:
        update_data["questions"] = normalize_questions(
            payload.model_dump(mode="json")["questions"]
        )

    for field, value in update_data.items():
        if value is not None or field == "description":
            setattr(quiz, field, value)

    record_audit(
        db,
        actor_id,
        "UPDATE_QUIZ",
        ENTITY_TYPE,
        quiz.id,
        payload.model_dump(mode="json", exclude_unset=True),
    )
    await db.commit()
    await db.refresh(quiz)
    logger.info(f"Updated quiz {quiz.id}")
    return quiz


async def delete_quiz(db: AsyncSession, quiz_id: uuid.UUID, actor_id: uuid.UUID) -> None:
    quiz = await get_quiz_or_404(db, quiz_id)
    await db.delete(quiz)
    record_audit(db, actor_id, "DELETE_QUIZ", ENTITY_TYPE, quiz_id)
    await db.commit()
    logger.info(f"Deleted quiz {quiz_id}")


async def move_quiz_question(
    db: AsyncSession, quiz_id: uuid.UUID, payload: QuestionMove, actor_id: uuid.UUID
) -> Quiz:
    quiz = await get_quiz_or_404(db, quiz_id)
    quiz.questions = move_question(quiz.questions or [], payload.from_index, payload.to_index)
    record_audit(
        db,
        actor_id,
        "REORDER_QUESTIONS",
        ENTITY_TYPE,
        quiz.id,
        payload.model_dump(mode="json"),
    )
    await db.commit()
    await db.refresh(quiz)
    return quiz


async def score_submission(
    db: AsyncSession, quiz_id: uuid.UUID, payload: QuizSubmission
) -> dict:
    quiz = await get_quiz_or_404(db, quiz_id)
    passing_score = (
        quiz.passing_score if quiz.passing_score is not None else DEFAULT_PASSING_SCORE
    )
    return score_quiz(quiz.questions or [], payload.answers, passing_score)
