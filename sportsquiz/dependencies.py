"""
FastAPI Dependency Injection

프로세스 단위 싱글톤(설정, 크리덴셜 캐시, 문서 저장소, 서비스)을 생성하고
엔드포인트에 주입한다. 테스트는 app.dependency_overrides로 교체한다.
"""
import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from sportsquiz.config import get_settings
from sportsquiz.generation.credentials import CredentialCache
from sportsquiz.infrastructure import (
    SettingsSecretResolver,
    UpstageLLMGateway,
    create_document_store,
)
from sportsquiz.ports import DocumentStore, LLMGateway
from sportsquiz.schemas.quiz import Requester
from sportsquiz.services.grading_service import QuizGradingService
from sportsquiz.services.quiz_management_service import QuizManagementService
from sportsquiz.services.quiz_service import QuizGenerationService


logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes"}


@lru_cache()
def get_document_store() -> DocumentStore:
    """
    Document Store 싱글톤 (Redis 또는 InMemory)
    """
    store = create_document_store(get_settings())
    logger.info(f"Document store created: {store!r}")
    return store


@lru_cache()
def get_credential_cache() -> CredentialCache:
    """
    생성용 크리덴셜 캐시 싱글톤 (최초 조회 후 프로세스 수명 동안 유지)
    """
    settings = get_settings()
    return CredentialCache(
        resolver=SettingsSecretResolver(settings),
        secret_name=settings.generation_secret_name,
    )


@lru_cache(maxsize=4)
def build_llm_gateway(api_key: str) -> LLMGateway:
    """
    API 키별 LLM Gateway (키가 같으면 재사용)
    """
    settings = get_settings()
    gateway = UpstageLLMGateway(
        api_key=api_key,
        model=settings.llm_model,
        timeout=settings.llm_timeout,
        temperature=settings.llm_temperature,
    )
    logger.info("LLM Gateway created")
    return gateway


def get_generation_service(
    store: DocumentStore = Depends(get_document_store),
    credentials: CredentialCache = Depends(get_credential_cache),
) -> QuizGenerationService:
    return QuizGenerationService(
        store=store,
        credentials=credentials,
        gateway_factory=build_llm_gateway,
    )


def get_grading_service(
    store: DocumentStore = Depends(get_document_store),
) -> QuizGradingService:
    return QuizGradingService(store=store, attempt_list_limit=get_settings().attempt_list_limit)


def get_management_service(
    store: DocumentStore = Depends(get_document_store),
) -> QuizManagementService:
    return QuizManagementService(store=store, quiz_list_limit=get_settings().quiz_list_limit)


def get_requester(
    x_user_id: Optional[str] = Header(None),
    x_user_admin: Optional[str] = Header(None),
) -> Optional[Requester]:
    """
    게이트웨이가 인증 후 넣어 주는 헤더에서 호출자 정보를 읽는다.
    X-User-Id가 없으면 None (미인증).
    """
    if not x_user_id or not x_user_id.strip():
        return None
    is_admin = (x_user_admin or "").strip().lower() in _TRUTHY
    return Requester(user_id=x_user_id.strip(), is_admin=is_admin)
