"""
Ports (Interfaces)

Clean Architecture의 내부 레이어.
퀴즈 생성/채점 로직이 외부 서비스(LLM, 시크릿 저장소, 문서 DB)에 의존하지 않도록 추상화 제공.
"""
from sportsquiz.ports.llm_gateway import LLMGateway, LLMAPIError, LLMTimeoutError
from sportsquiz.ports.secret_resolver import SecretResolver, SecretResolutionError
from sportsquiz.ports.document_store import (
    SERVER_TIMESTAMP,
    DocumentStore,
    DocumentStoreError,
    DocumentExistsError,
    DocumentNotFoundError,
)

__all__ = [
    "LLMGateway",
    "LLMAPIError",
    "LLMTimeoutError",
    "SecretResolver",
    "SecretResolutionError",
    "SERVER_TIMESTAMP",
    "DocumentStore",
    "DocumentStoreError",
    "DocumentExistsError",
    "DocumentNotFoundError",
]
