# sportsquiz/services/quiz_management_service.py

"""
퀴즈 관리: 조회/목록 + 관리자 전용 상태·공개범위 변경 (soft delete)
"""
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from sportsquiz.core.request_parser import FIELD_MESSAGES, parse_payload
from sportsquiz.core.result import ErrorKind, Failure, Result, Success
from sportsquiz.grading.answer_key import QUIZZES_COLLECTION
from sportsquiz.ports.document_store import DocumentStore
from sportsquiz.schemas.quiz import (
    PlayerQuiz,
    Quiz,
    QuizFilter,
    QuizStatus,
    QuizSummary,
    Requester,
    VisibilityUpdateRequest,
)
from sportsquiz.services.quiz_service import unauthenticated


logger = logging.getLogger(__name__)


def _admin_required(action: str) -> Failure:
    return Failure(
        ErrorKind.PERMISSION_DENIED,
        f"You do not have permission to {action}. Only administrators can perform this action.",
    )


def _quiz_not_found(quiz_id: str) -> Failure:
    return Failure(ErrorKind.NOT_FOUND, f"Quiz with ID {quiz_id} not found.", {"quiz_id": quiz_id})


class QuizManagementService:
    """Listing, player view and admin lifecycle operations for quizzes"""

    def __init__(self, store: DocumentStore, quiz_list_limit: int = 20):
        self._store = store
        self._quiz_list_limit = quiz_list_limit

    def _check_quiz_id(self, quiz_id: Any) -> Optional[Failure]:
        if not isinstance(quiz_id, str) or not quiz_id.strip():
            return Failure(ErrorKind.INVALID_ARGUMENT, FIELD_MESSAGES["quizId"])
        return None

    def _load(self, quiz_id: str) -> Result[Dict[str, Any]]:
        document = self._store.get(QUIZZES_COLLECTION, quiz_id)
        if document is None:
            return _quiz_not_found(quiz_id)
        return Success(document)

    def _to_quiz(self, document: Dict[str, Any]) -> Optional[Quiz]:
        try:
            return Quiz.model_validate(document)
        except ValidationError as e:
            logger.warning(f"Skipping malformed quiz document {document.get('id')}: {e}")
            return None

    # ------------------------------------------------------------------
    # Admin lifecycle
    # ------------------------------------------------------------------

    def _set_status(self, quiz_id: str, status: QuizStatus, requester: Optional[Requester]) -> Result[Quiz]:
        if requester is None:
            return unauthenticated()
        action = "delete quizzes" if status == "deleted" else "restore quizzes"
        if not requester.is_admin:
            return _admin_required(action)
        invalid = self._check_quiz_id(quiz_id)
        if invalid:
            return invalid
        quiz_id = quiz_id.strip()

        loaded = self._load(quiz_id)
        if not loaded.ok:
            return loaded
        document = loaded.value

        if status == "deleted" and document.get("visibility") != "global":
            return Failure(
                ErrorKind.PERMISSION_DENIED,
                f"You can only delete global quizzes. Quiz {quiz_id} is not global.",
            )

        updated = self._store.update(QUIZZES_COLLECTION, quiz_id, {"status": status})
        logger.info(f"Admin {requester.user_id} set quiz {quiz_id} status to {status}")
        return Success(Quiz.model_validate(updated))

    def soft_delete_quiz(self, quiz_id: str, requester: Optional[Requester]) -> Result[Quiz]:
        """Mark a global quiz as deleted (admin only). Attempts stay gradable."""
        return self._set_status(quiz_id, "deleted", requester)

    def restore_quiz(self, quiz_id: str, requester: Optional[Requester]) -> Result[Quiz]:
        """deleted → active (admin only)"""
        return self._set_status(quiz_id, "active", requester)

    def update_visibility(self, quiz_id: str, payload: Any, requester: Optional[Requester]) -> Result[Quiz]:
        if requester is None:
            return unauthenticated()
        if not requester.is_admin:
            return _admin_required("change quiz visibility")
        invalid = self._check_quiz_id(quiz_id)
        if invalid:
            return invalid
        quiz_id = quiz_id.strip()

        parsed = parse_payload(VisibilityUpdateRequest, payload)
        if not parsed.ok:
            return parsed

        loaded = self._load(quiz_id)
        if not loaded.ok:
            return loaded

        visibility = parsed.value.visibility
        updated = self._store.update(QUIZZES_COLLECTION, quiz_id, {"visibility": visibility})
        logger.info(f"Admin {requester.user_id} set quiz {quiz_id} visibility to {visibility}")
        return Success(Quiz.model_validate(updated))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_quiz(self, quiz_id: str, requester: Optional[Requester]) -> Result[PlayerQuiz]:
        """
        Player view of a quiz (correct answers removed).

        Private quizzes: creator or admin only. Deleted quizzes: admin only.
        """
        if requester is None:
            return unauthenticated()
        invalid = self._check_quiz_id(quiz_id)
        if invalid:
            return invalid
        quiz_id = quiz_id.strip()

        loaded = self._load(quiz_id)
        if not loaded.ok:
            return loaded
        quiz = self._to_quiz(loaded.value)
        if quiz is None:
            return Failure(
                ErrorKind.INVALID_QUIZ_STATE,
                "Quiz data is invalid on server.",
                {"quiz_id": quiz_id},
            )

        is_owner = quiz.created_by == requester.user_id
        if quiz.status == "deleted" and not requester.is_admin:
            return _quiz_not_found(quiz_id)
        if quiz.visibility == "private" and not (is_owner or requester.is_admin):
            return Failure(ErrorKind.PERMISSION_DENIED, "This quiz is private.")

        return Success(PlayerQuiz.from_quiz(quiz))

    def list_quizzes(self, filter_payload: Any, requester: Optional[Requester]) -> Result[List[QuizSummary]]:
        """
        Newest-first quiz summaries.

        Non-admins browsing someone else's quizzes only see global + active;
        their own quizzes default to active.
        """
        if requester is None:
            return unauthenticated()

        parsed = parse_payload(QuizFilter, filter_payload or {})
        if not parsed.ok:
            return parsed
        quiz_filter: QuizFilter = parsed.value

        if not requester.is_admin:
            if quiz_filter.created_by == requester.user_id:
                if quiz_filter.status is None:
                    quiz_filter = quiz_filter.model_copy(update={"status": "active"})
            else:
                quiz_filter = quiz_filter.model_copy(update={"visibility": "global", "status": "active"})

        documents = self._store.query(
            QUIZZES_COLLECTION,
            filters=quiz_filter.to_store_filters(),
            order_by="createdAt",
            descending=True,
            limit=self._quiz_list_limit,
        )
        summaries = []
        for document in documents:
            quiz = self._to_quiz(document)
            if quiz is not None:
                summaries.append(QuizSummary.from_quiz(quiz))
        return Success(summaries)
