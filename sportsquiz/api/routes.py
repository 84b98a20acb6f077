"""
API Routes

얇은 HTTP 경계: 서비스 결과(Success/Failure)를 HTTP 응답으로 변환한다.
Failure.details(원본 LLM 응답, 내부 오류 등)는 로그에만 남고 응답에는 포함되지 않는다.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from sportsquiz.core.result import ErrorKind, Failure, Result
from sportsquiz.dependencies import (
    get_generation_service,
    get_grading_service,
    get_management_service,
    get_requester,
)
from sportsquiz.schemas.quiz import Requester
from sportsquiz.services.grading_service import QuizGradingService
from sportsquiz.services.quiz_management_service import QuizManagementService
from sportsquiz.services.quiz_service import QuizGenerationService

router = APIRouter()
logger = logging.getLogger(__name__)


STATUS_CODES: Dict[ErrorKind, int] = {
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.CREDENTIAL_UNAVAILABLE: 500,
    ErrorKind.GENERATION_CALL_FAILED: 502,
    ErrorKind.MALFORMED_OUTPUT: 502,
    ErrorKind.COUNT_MISMATCH: 502,
    ErrorKind.SCHEMA_VIOLATION: 502,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_QUIZ_STATE: 500,
    ErrorKind.PERMISSION_DENIED: 403,
}


def _raise_for_failure(failure: Failure) -> None:
    detail = failure.to_public_dict()
    raise HTTPException(status_code=STATUS_CODES.get(failure.kind, 500), detail=detail)


async def _run(operation: str, func: Callable[..., Result], *args: Any) -> Any:
    """
    서비스 호출을 스레드 풀에서 실행하고 결과를 언랩한다.
    """
    try:
        result = await asyncio.to_thread(func, *args)
    except Exception as e:
        logger.error(f"{operation} failed unexpectedly: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail={"code": "internal", "message": f"An unexpected error occurred during {operation}."},
        )

    if not result.ok:
        _raise_for_failure(result)
    return result.value


# ====== Quiz Generation / Grading ======

@router.post("/quizzes/generate")
async def generate_quiz(
    payload: Any = Body(None),
    requester: Optional[Requester] = Depends(get_requester),
    service: QuizGenerationService = Depends(get_generation_service),
):
    """
    AI 퀴즈를 생성하여 저장하고, 저장된 퀴즈를 그대로 반환한다.

    Request example:
    {
        "category": "Football",
        "numberOfQuestions": 5,
        "quizType": "multiple_choice",
        "difficulty": "hard",
        "team": "Arsenal"
    }
    """
    quiz = await _run("quiz generation", service.generate_quiz, payload, requester)
    return quiz.model_dump(by_alias=True)


@router.post("/quizzes/submit")
async def submit_quiz(
    payload: Any = Body(None),
    requester: Optional[Requester] = Depends(get_requester),
    service: QuizGradingService = Depends(get_grading_service),
):
    """제출 답안을 채점하고 attempt를 저장한다."""
    result = await _run("quiz submission", service.grade_submission, payload, requester)
    return result.model_dump(by_alias=True)


# ====== Quiz Browsing ======

@router.get("/quizzes")
async def list_quizzes(
    request: Request,
    requester: Optional[Requester] = Depends(get_requester),
    service: QuizManagementService = Depends(get_management_service),
):
    """필터 쿼리(category, difficulty, team, event, country, title, visibility, createdBy, status, quizType)"""
    filters = dict(request.query_params)
    summaries = await _run("quiz listing", service.list_quizzes, filters, requester)
    return {"quizzes": [summary.model_dump(by_alias=True) for summary in summaries]}


@router.get("/quizzes/{quiz_id}")
async def get_quiz(
    quiz_id: str,
    requester: Optional[Requester] = Depends(get_requester),
    service: QuizManagementService = Depends(get_management_service),
):
    """정답을 제외한 플레이어용 퀴즈"""
    quiz = await _run("quiz lookup", service.get_quiz, quiz_id, requester)
    return quiz.model_dump(by_alias=True)


@router.get("/attempts")
async def list_attempts(
    requester: Optional[Requester] = Depends(get_requester),
    service: QuizGradingService = Depends(get_grading_service),
):
    """내 풀이 기록 (최신순)"""
    attempts = await _run("attempt listing", service.list_attempts, requester)
    return {"attempts": [attempt.model_dump(by_alias=True) for attempt in attempts]}


# ====== Admin ======

@router.post("/quizzes/{quiz_id}/delete")
async def delete_quiz(
    quiz_id: str,
    requester: Optional[Requester] = Depends(get_requester),
    service: QuizManagementService = Depends(get_management_service),
):
    """글로벌 퀴즈 soft delete (관리자 전용)"""
    quiz = await _run("quiz deletion", service.soft_delete_quiz, quiz_id, requester)
    return {"success": True, "message": f"Quiz {quiz.id} successfully marked as deleted."}


@router.post("/quizzes/{quiz_id}/restore")
async def restore_quiz(
    quiz_id: str,
    requester: Optional[Requester] = Depends(get_requester),
    service: QuizManagementService = Depends(get_management_service),
):
    """soft delete 복구 (관리자 전용)"""
    quiz = await _run("quiz restore", service.restore_quiz, quiz_id, requester)
    return {"success": True, "message": f"Quiz {quiz.id} restored."}


@router.patch("/quizzes/{quiz_id}/visibility")
async def update_quiz_visibility(
    quiz_id: str,
    payload: Any = Body(None),
    requester: Optional[Requester] = Depends(get_requester),
    service: QuizManagementService = Depends(get_management_service),
):
    """공개 범위 변경 (관리자 전용)"""
    quiz = await _run("visibility update", service.update_visibility, quiz_id, payload, requester)
    return quiz.model_dump(by_alias=True)
