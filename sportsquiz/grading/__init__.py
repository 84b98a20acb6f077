# sportsquiz/grading/__init__.py

"""
채점: 저장된 퀴즈 → 정답 키 → 제출 답안 비교
"""

from .answer_key import AnswerKey, build_answer_key, resolve_answer_key
from .engine import QUESTION_NOT_FOUND, GradingOutcome, answers_match, elapsed_seconds, grade_answers

__all__ = [
    "AnswerKey",
    "build_answer_key",
    "resolve_answer_key",
    "QUESTION_NOT_FOUND",
    "GradingOutcome",
    "answers_match",
    "elapsed_seconds",
    "grade_answers",
]
