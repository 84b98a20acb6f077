# sportsquiz/grading/engine.py

"""
채점 엔진 (부수효과 없음, 저장은 호출 측 책임)

규칙:
  - 퀴즈에 없는 questionId: 오답 + 정답 자리에 QUESTION_NOT_FOUND 기록, 예외 없음
  - multiple_choice: 정답 문자열과 같으면 정답, 아니면 선택값의 첫 글자와
    정답 라벨(첫 글자)을 비교 ("A. Paris" ↔ "A")
  - true_false: 문자열 그대로 비교
  - 결과 순서 = 제출 순서
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from sportsquiz.grading.answer_key import AnswerKey
from sportsquiz.schemas.attempt import GradedAnswer, SubmittedAnswer
from sportsquiz.schemas.quiz import QuizType


logger = logging.getLogger(__name__)

QUESTION_NOT_FOUND = "N/A (Question Not Found)"


@dataclass(frozen=True)
class GradingOutcome:
    correct: int
    incorrect: int
    total: int
    answers: List[GradedAnswer]
    time_spent_seconds: int


def answers_match(selected: str, correct: str, question_type: Optional[QuizType]) -> bool:
    if question_type == "multiple_choice":
        if selected == correct:
            return True
        if not selected or not correct:
            return False
        # NOTE: first character is taken as the label even for malformed input ("Apple" → "A")
        return selected[0] == correct[0]
    return selected == correct


def elapsed_seconds(start_millis: float, now_millis: float) -> int:
    """Whole seconds between start and now, half-up rounding, never negative (0 if not finite)"""
    delta = (now_millis - start_millis) / 1000
    if not math.isfinite(delta):
        return 0
    seconds = math.floor(delta + 0.5)
    return max(0, int(seconds))


def grade_answers(
    answer_key: AnswerKey,
    submitted: Sequence[SubmittedAnswer],
    start_millis: float,
    now_millis: float
) -> GradingOutcome:
    """
    Grade a submission against a resolved answer key.

    Args:
        answer_key: AnswerKeyResolver 결과
        submitted: 제출 답안 (순서 유지)
        start_millis: 클라이언트가 보낸 퀴즈 시작 시각 (epoch millis)
        now_millis: 채점 시각 (epoch millis)
    """
    graded: List[GradedAnswer] = []
    credited = set()
    correct_count = 0

    for answer in submitted:
        correct_answer = answer_key.correct_answer_for(answer.question_id)

        if correct_answer is None:
            logger.warning(
                f"Answer for unknown question {answer.question_id} in quiz {answer_key.quiz_id}"
            )
            graded.append(GradedAnswer(
                question_id=answer.question_id,
                user_answer=answer.selected_option,
                correct_answer=QUESTION_NOT_FOUND,
                is_correct=False,
            ))
            continue

        is_correct = answers_match(
            answer.selected_option,
            correct_answer,
            answer_key.type_for(answer.question_id),
        )
        # A repeated question id is credited once so correct never exceeds total
        if is_correct and answer.question_id not in credited:
            credited.add(answer.question_id)
            correct_count += 1
        graded.append(GradedAnswer(
            question_id=answer.question_id,
            user_answer=answer.selected_option,
            correct_answer=correct_answer,
            is_correct=is_correct,
        ))

    total = answer_key.total_questions
    return GradingOutcome(
        correct=correct_count,
        incorrect=total - correct_count,
        total=total,
        answers=graded,
        time_spent_seconds=elapsed_seconds(start_millis, now_millis),
    )
