# sportsquiz/grading/answer_key.py

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from sportsquiz.core.result import ErrorKind, Failure, Result, Success
from sportsquiz.ports.document_store import DocumentStore
from sportsquiz.schemas.quiz import QuizType


logger = logging.getLogger(__name__)

QUIZZES_COLLECTION = "quizzes"
_QUIZ_TYPES = ("multiple_choice", "true_false")


@dataclass(frozen=True)
class AnswerKey:
    """
    Question id → correct answer, plus the type lookup grading needs.

    total_questions counts every stored question, including malformed ones
    left out of ``answers``.
    """
    quiz_id: str
    answers: Dict[str, str]
    question_types: Dict[str, QuizType]
    total_questions: int
    quiz_type: Optional[QuizType] = None
    status: str = "active"
    skipped: Dict[int, str] = field(default_factory=dict)

    def correct_answer_for(self, question_id: str) -> Optional[str]:
        return self.answers.get(question_id)

    def type_for(self, question_id: str) -> Optional[QuizType]:
        return self.question_types.get(question_id, self.quiz_type)


def build_answer_key(quiz_id: str, quiz_data: Dict[str, Any]) -> Result[AnswerKey]:
    """
    Derive the answer key from a stored quiz document.

    Returns:
        Failure(INVALID_QUIZ_STATE) when the quiz has no gradable questions.
    """
    questions = quiz_data.get("questions")
    if not isinstance(questions, list) or not questions:
        logger.error(f"Quiz {quiz_id} is malformed or missing questions; cannot score")
        return Failure(
            ErrorKind.INVALID_QUIZ_STATE,
            "Quiz data is invalid on server. Cannot score.",
            {"quiz_id": quiz_id},
        )

    quiz_type = quiz_data.get("quizType")
    if quiz_type not in _QUIZ_TYPES:
        quiz_type = None

    answers: Dict[str, str] = {}
    question_types: Dict[str, QuizType] = {}
    skipped: Dict[int, str] = {}

    for index, question in enumerate(questions):
        if not isinstance(question, dict):
            skipped[index] = "not an object"
            continue
        question_id = question.get("id")
        correct = question.get("correctAnswer")
        if not isinstance(question_id, str) or not question_id:
            skipped[index] = "missing id"
            continue
        if correct is None or (isinstance(correct, str) and not correct):
            skipped[index] = "missing correctAnswer"
            continue

        answers[question_id] = str(correct)
        question_type = question.get("type")
        if question_type in _QUIZ_TYPES:
            question_types[question_id] = question_type
        elif quiz_type:
            question_types[question_id] = quiz_type

    if not answers:
        logger.error(f"Quiz {quiz_id} has no gradable questions: {skipped}")
        return Failure(
            ErrorKind.INVALID_QUIZ_STATE,
            "Quiz data is invalid on server. Cannot score.",
            {"quiz_id": quiz_id, "skipped": skipped},
        )
    if skipped:
        logger.warning(f"Quiz {quiz_id} has malformed questions left out of the answer key: {skipped}")

    return Success(AnswerKey(
        quiz_id=quiz_id,
        answers=answers,
        question_types=question_types,
        total_questions=len(questions),
        quiz_type=quiz_type,
        status=str(quiz_data.get("status", "active")),
        skipped=skipped,
    ))


def resolve_answer_key(store: DocumentStore, quiz_id: str) -> Result[AnswerKey]:
    """
    Load a quiz and derive its answer key.

    Works for any status: soft-deleted quizzes stay gradable.

    Returns:
        Success(AnswerKey), Failure(NOT_FOUND) or Failure(INVALID_QUIZ_STATE)
    """
    quiz_data = store.get(QUIZZES_COLLECTION, quiz_id)
    if quiz_data is None:
        logger.warning(f"Quiz {quiz_id} not found for grading")
        return Failure(ErrorKind.NOT_FOUND, "Quiz not found.", {"quiz_id": quiz_id})

    return build_answer_key(quiz_id, quiz_data)
