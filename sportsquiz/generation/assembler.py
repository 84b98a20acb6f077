# sportsquiz/generation/assembler.py

"""
퀴즈 조립: 정규화된 문항 + 설정 메타데이터 → 단일 문서 쓰기용 Quiz 문서
"""
from typing import Any, Dict, List

from sportsquiz.ports.document_store import SERVER_TIMESTAMP
from sportsquiz.schemas.quiz import QuizConfig, QuizQuestion, Requester, Visibility


def resolve_visibility(requested: Visibility, requester: Requester) -> Visibility:
    """
    요청한 공개 범위는 관리자 권한이 있을 때만 존중한다.
    그 외에는 요청과 무관하게 항상 private.
    """
    if requester.is_admin:
        return requested
    return "private"


def default_title(category: str) -> str:
    return f"Generated Quiz - {category}"


def assemble_quiz_document(
    quiz_id: str,
    config: QuizConfig,
    questions: List[QuizQuestion],
    requester: Requester
) -> Dict[str, Any]:
    """
    Build the complete quiz document (camelCase) for one atomic write.

    createdAt is left as SERVER_TIMESTAMP for the store to fill in.
    """
    return {
        "id": quiz_id,
        "title": config.title or default_title(config.category),
        "category": config.category,
        "difficulty": config.resolved_difficulty,
        "quizType": config.quiz_type,
        "team": config.team or "",
        "event": config.event or "",
        "country": config.country or "",
        "questions": [q.model_dump(by_alias=True) for q in questions],
        "createdBy": requester.user_id,
        "visibility": resolve_visibility(config.requested_visibility, requester),
        "status": "active",
        "createdAt": SERVER_TIMESTAMP,
    }
