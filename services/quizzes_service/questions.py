"""
Quiz question rules: normalisation before save, reordering and scoring.

Pure functions over plain question dicts so they can be tested without a
database.
"""

from typing import Any, Dict, List, Optional, Sequence

from libs.common.errors import BadRequestError, ErrorCode
from services.quizzes_service.models import QuestionType

TRUE_FALSE_OPTIONS = ["True", "False"]
DEFAULT_POINTS = 1


def _invalid(index: int, message: str) -> BadRequestError:
    return BadRequestError(f"Question {index + 1}: {message}", ErrorCode.INVALID_QUESTION)


def normalize_question(question: Dict[str, Any], index: int = 0) -> Dict[str, Any]:
    """
    Return a cleaned copy of one question.

    - MULTIPLE_CHOICE: blank options dropped, at least two must remain, an
      answer outside the options falls back to the first option.
    - TRUE_FALSE: options fixed to True/False, answer is "True" unless it
      reads "false".
    - SHORT_ANSWER: no options, answer required.
    """
    text = (question.get("question") or "").strip()
    if not text:
        raise _invalid(index, "question text is required")

    question_type = QuestionType(question["type"])
    answer = (question.get("correct_answer") or "").strip()

    points = question.get("points")
    if points is None:
        points = DEFAULT_POINTS
    if points < 0:
        raise _invalid(index, "points must be zero or more")

    if question_type == QuestionType.MULTIPLE_CHOICE:
        options = [opt.strip() for opt in question.get("options") or [] if opt and opt.strip()]
        if len(options) < 2:
            raise _invalid(index, "multiple choice questions need at least two options")
        if answer not in options:
            answer = options[0]
    elif question_type == QuestionType.TRUE_FALSE:
        options = list(TRUE_FALSE_OPTIONS)
        answer = "False" if answer.lower() == "false" else "True"
    else:
        options = None
        if not answer:
            raise _invalid(index, "short answer questions need a correct answer")

    return {
        "question": text,
        "type": question_type.value,
        "options": options,
        "correct_answer": answer,
        "points": points,
    }


def normalize_questions(questions: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [normalize_question(q, i) for i, q in enumerate(questions)]


def move_question(questions: Sequence[Any], from_index: int, to_index: int) -> List[Any]:
    """Move one question; both indexes are clamped into range."""
    items = list(questions)
    if not items:
        return items
    last = len(items) - 1
    from_index = max(0, min(from_index, last))
    to_index = max(0, min(to_index, last))
    item = items.pop(from_index)
    items.insert(to_index, item)
    return items


def _same_answer(given: Optional[str], expected: str) -> bool:
    if given is None:
        return False
    return " ".join(given.split()).lower() == " ".join(expected.split()).lower()


def score_quiz(
    questions: Sequence[Dict[str, Any]],
    answers: Sequence[Optional[str]],
    passing_score: int,
) -> Dict[str, Any]:
    """
    Score answers positionally against the questions.

    Comparison ignores case and surrounding or repeated whitespace. A missing
    answer scores zero.
    """
    results = []
    earned = 0
    total = 0
    for index, question in enumerate(questions):
        points = question.get("points", DEFAULT_POINTS) or 0
        given = answers[index] if index < len(answers) else None
        correct = _same_answer(given, question.get("correct_answer", ""))
        total += points
        if correct:
            earned += points
        results.append(
            {
                "index": index,
                "question": question.get("question"),
                "given_answer": given,
                "correct_answer": question.get("correct_answer"),
                "correct": correct,
                "points": points,
                "earned_points": points if correct else 0,
            }
        )

    percentage = round(earned / total * 100, 2) if total else 0.0
    return {
        "earned_points": earned,
        "total_points": total,
        "percentage": percentage,
        "passed": percentage >= passing_score,
        "results": results,
    }
