"""Unit tests for quiz question normalisation, reordering and scoring."""

import pytest

from libs.common.errors import BadRequestError, ErrorCode
from services.quizzes_service.questions import (
    move_question,
    normalize_question,
    normalize_questions,
    score_quiz,
)


class TestNormalizeQuestion:
    """Questions are cleaned per type before they are stored."""

    def test_multiple_choice_drops_blank_options(self):
        question = normalize_question(
            {
                "question": "  Pick one ",
                "type": "MULTIPLE_CHOICE",
                "options": ["A", " ", "B", ""],
                "correct_answer": "B",
            }
        )
        assert question["question"] == "Pick one"
        assert question["options"] == ["A", "B"]
        assert question["correct_answer"] == "B"
        assert question["points"] == 1

    def test_multiple_choice_unknown_answer_falls_back_to_first_option(self):
        question = normalize_question(
            {
                "question": "Pick one",
                "type": "MULTIPLE_CHOICE",
                "options": ["A", "B"],
                "correct_answer": "Z",
            }
        )
        assert question["correct_answer"] == "A"

    def test_multiple_choice_needs_two_options(self):
        with pytest.raises(BadRequestError) as exc:
            normalize_question(
                {"question": "Pick", "type": "MULTIPLE_CHOICE", "options": ["A", " "]}
            )
        assert exc.value.error_code == ErrorCode.INVALID_QUESTION

    def test_true_false_options_are_fixed(self):
        question = normalize_question(
            {
                "question": "Water is wet",
                "type": "TRUE_FALSE",
                "options": ["Yes", "No", "Maybe"],
                "correct_answer": "FALSE",
            }
        )
        assert question["options"] == ["True", "False"]
        assert question["correct_answer"] == "False"

    def test_true_false_defaults_to_true(self):
        question = normalize_question(
            {"question": "Water is wet", "type": "TRUE_FALSE", "correct_answer": ""}
        )
        assert question["correct_answer"] == "True"

    def test_short_answer_has_no_options_and_needs_answer(self):
        question = normalize_question(
            {
                "question": "Name a stroke",
                "type": "SHORT_ANSWER",
                "options": ["ignored"],
                "correct_answer": " freestyle ",
            }
        )
        assert question["options"] is None
        assert question["correct_answer"] == "freestyle"

        with pytest.raises(BadRequestError):
            normalize_question(
                {"question": "Name a stroke", "type": "SHORT_ANSWER", "correct_answer": " "}
            )

    def test_blank_question_text_reports_its_position(self):
        with pytest.raises(BadRequestError) as exc:
            normalize_questions(
                [
                    {"question": "ok", "type": "TRUE_FALSE"},
                    {"question": "   ", "type": "TRUE_FALSE"},
                ]
            )
        assert "Question 2" in exc.value.message

    def test_negative_points_rejected(self):
        with pytest.raises(BadRequestError):
            normalize_question({"question": "q", "type": "TRUE_FALSE", "points": -1})


class TestMoveQuestion:
    def test_moves_item_to_new_position(self):
        assert move_question(["a", "b", "c", "d"], 0, 2) == ["b", "c", "a", "d"]

    def test_indexes_are_clamped(self):
        assert move_question(["a", "b", "c"], 10, -5) == ["c", "a", "b"]

    def test_empty_list_is_unchanged(self):
        assert move_question([], 0, 1) == []

    def test_does_not_mutate_input(self):
        original = ["a", "b"]
        move_question(original, 0, 1)
        assert original == ["a", "b"]


class TestScoreQuiz:
    QUESTIONS = [
        {"question": "q1", "correct_answer": "True", "points": 1},
        {"question": "q2", "correct_answer": "Ten  Minutes", "points": 3},
    ]

    def test_answers_compare_case_and_whitespace_insensitively(self):
        score = score_quiz(self.QUESTIONS, ["true", "  ten minutes "], 70)
        assert score["earned_points"] == 4
        assert score["total_points"] == 4
        assert score["percentage"] == 100.0
        assert score["passed"] is True

    def test_missing_answers_score_zero(self):
        score = score_quiz(self.QUESTIONS, ["True"], 70)
        assert score["earned_points"] == 1
        assert score["percentage"] == 25.0
        assert score["passed"] is False
        assert score["results"][1]["given_answer"] is None
        assert score["results"][1]["correct"] is False

    def test_pass_mark_is_inclusive(self):
        questions = [{"question": "q", "correct_answer": "a", "points": 1}] * 2
        score = score_quiz(questions, ["a", "b"], 50)
        assert score["percentage"] == 50.0
        assert score["passed"] is True

    def test_quiz_without_points_never_divides_by_zero(self):
        score = score_quiz([], [], 70)
        assert score["percentage"] == 0.0
        assert score["passed"] is False
