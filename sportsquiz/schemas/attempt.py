# sportsquiz/schemas/attempt.py

from typing import List, Optional

from pydantic import Field, field_validator

from sportsquiz.schemas.quiz import CamelModel


class SubmittedAnswer(CamelModel):
    """One user answer; selectedOption is kept raw (may be malformed)"""
    question_id: str = Field(..., description="Question ID inside the quiz")
    selected_option: str = Field(..., description="e.g. 'A', 'A. Paris', 'True'")


class GradeSubmissionRequest(CamelModel):
    """GradeSubmission request. Unknown fields are ignored."""
    quiz_id: str = Field(..., description="Quiz ID")
    user_answers: List[SubmittedAnswer] = Field(..., min_length=1, description="Non-empty answer list")
    quiz_start_time: float = Field(..., gt=0, allow_inf_nan=False, description="Client-supplied start time (epoch millis)")

    @field_validator("quiz_id")
    @classmethod
    def _quiz_id_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("quizId is required.")
        return value


class GradedAnswer(CamelModel):
    """Per-question audit record stored in the attempt"""
    question_id: str
    user_answer: str
    correct_answer: str
    is_correct: bool


class QuizAttempt(CamelModel):
    """Persisted grading result (collection: quizAttempts). Immutable."""
    id: str
    user_id: str
    quiz_id: str
    score: int = Field(..., description="Correct answer count")
    total_questions: int
    answers: List[GradedAnswer]
    time_spent: int = Field(..., description="Elapsed whole seconds")
    completed_at: Optional[int] = Field(None, description="Server timestamp (epoch millis)")


class ScoreSummary(CamelModel):
    correct: int
    incorrect: int
    total: int


class ReviewDetail(CamelModel):
    question_id: str
    selected_option: str
    correct_option: str
    is_correct: bool


class GradingResult(CamelModel):
    """GradeSubmission response"""
    score: ScoreSummary
    attempt_id: str
    review_details: List[ReviewDetail]
    time_spent_seconds: int
