# sportsquiz/generation/normalizer.py

import uuid
from typing import Callable, List, Sequence

from sportsquiz.generation.schema_validator import ValidatedQuestion
from sportsquiz.schemas.quiz import QuizQuestion, QuizType


def new_question_id() -> str:
    return uuid.uuid4().hex


def normalize_questions(
    validated: Sequence[ValidatedQuestion],
    quiz_type: QuizType,
    id_factory: Callable[[], str] = new_question_id
) -> List[QuizQuestion]:
    """
    Validated questions → persisted question shape.

    Each question gets a fresh id from id_factory and is tagged with the quiz
    type. Order is preserved.

    Raises:
        ValueError: id_factory produced a duplicate id within the quiz
    """
    questions: List[QuizQuestion] = []
    seen_ids = set()

    for item in validated:
        question_id = id_factory()
        if question_id in seen_ids:
            raise ValueError(f"Duplicate question id generated: {question_id}")
        seen_ids.add(question_id)

        questions.append(QuizQuestion(
            id=question_id,
            text=item.question,
            type=quiz_type,
            options=list(item.options),
            correct_answer=item.answer,
        ))

    return questions
