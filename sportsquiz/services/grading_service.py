# sportsquiz/services/grading_service.py

"""
GradeSubmission

  requester 확인 → 요청 검증 → 퀴즈 로드 + 정답 키 → 채점 → attempt 문서 1회 쓰기
"""
import logging
import time
from typing import Any, Callable, List, Mapping, Optional, Union

from pydantic import ValidationError

from sportsquiz.core.request_parser import parse_payload
from sportsquiz.core.result import Result, Success
from sportsquiz.grading.answer_key import resolve_answer_key
from sportsquiz.grading.engine import grade_answers
from sportsquiz.ports.document_store import SERVER_TIMESTAMP, DocumentStore
from sportsquiz.schemas.attempt import (
    GradeSubmissionRequest,
    GradingResult,
    QuizAttempt,
    ReviewDetail,
    ScoreSummary,
)
from sportsquiz.schemas.quiz import Requester
from sportsquiz.services.quiz_service import unauthenticated


logger = logging.getLogger(__name__)

ATTEMPTS_COLLECTION = "quizAttempts"


def _now_millis() -> float:
    return time.time() * 1000


class QuizGradingService:
    """
    Grades submissions and stores one immutable attempt per submission.

    Args:
        store: document store (quizzes read, quizAttempts write)
        clock: epoch millis source
        attempt_list_limit: max attempts returned by list_attempts
    """

    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], float] = _now_millis,
        attempt_list_limit: int = 10
    ):
        self._store = store
        self._clock = clock
        self._attempt_list_limit = attempt_list_limit

    def grade_submission(
        self,
        payload: Union[GradeSubmissionRequest, Mapping[str, Any]],
        requester: Optional[Requester]
    ) -> Result[GradingResult]:
        """
        Returns:
            Success(GradingResult) or Failure with one of
            UNAUTHENTICATED, INVALID_ARGUMENT, NOT_FOUND, INVALID_QUIZ_STATE.
            Unknown question ids are never request-level failures.
        """
        if requester is None:
            return unauthenticated()

        parsed = parse_payload(GradeSubmissionRequest, payload)
        if not parsed.ok:
            return parsed
        request: GradeSubmissionRequest = parsed.value

        resolved = resolve_answer_key(self._store, request.quiz_id)
        if not resolved.ok:
            logger.warning(
                f"Submission by {requester.user_id} for quiz {request.quiz_id} rejected: {resolved.code}"
            )
            return resolved

        outcome = grade_answers(
            resolved.value,
            request.user_answers,
            start_millis=request.quiz_start_time,
            now_millis=self._clock(),
        )

        attempt_id = self._store.new_id()
        attempt_document = {
            "id": attempt_id,
            "userId": requester.user_id,
            "quizId": request.quiz_id,
            "score": outcome.correct,
            "totalQuestions": outcome.total,
            "answers": [answer.model_dump(by_alias=True) for answer in outcome.answers],
            "timeSpent": outcome.time_spent_seconds,
            "completedAt": SERVER_TIMESTAMP,
        }
        self._store.create(ATTEMPTS_COLLECTION, attempt_id, attempt_document)
        logger.info(
            f"User {requester.user_id} completed quiz {request.quiz_id}. "
            f"Score: {outcome.correct}/{outcome.total}. Attempt ID: {attempt_id}"
        )

        return Success(GradingResult(
            score=ScoreSummary(correct=outcome.correct, incorrect=outcome.incorrect, total=outcome.total),
            attempt_id=attempt_id,
            review_details=[
                ReviewDetail(
                    question_id=answer.question_id,
                    selected_option=answer.user_answer,
                    correct_option=answer.correct_answer,
                    is_correct=answer.is_correct,
                )
                for answer in outcome.answers
            ],
            time_spent_seconds=outcome.time_spent_seconds,
        ))

    def list_attempts(self, requester: Optional[Requester]) -> Result[List[QuizAttempt]]:
        """Caller's own attempts, newest first"""
        if requester is None:
            return unauthenticated()

        documents = self._store.query(
            ATTEMPTS_COLLECTION,
            filters={"userId": requester.user_id},
            order_by="completedAt",
            descending=True,
            limit=self._attempt_list_limit,
        )
        attempts = []
        for document in documents:
            try:
                attempts.append(QuizAttempt.model_validate(document))
            except ValidationError as e:
                logger.warning(f"Skipping malformed attempt {document.get('id')}: {e}")
        return Success(attempts)
