"""
Infrastructure (Adapters)

Clean Architecture의 외부 레이어.
Port 인터페이스의 구체적 구현체 (Upstage, Redis, Settings 기반 시크릿).
"""
from sportsquiz.infrastructure.upstage_llm import UpstageLLMGateway
from sportsquiz.infrastructure.settings_secrets import SettingsSecretResolver
from sportsquiz.infrastructure.memory_store import InMemoryDocumentStore
from sportsquiz.infrastructure.redis_store import RedisDocumentStore, create_document_store

__all__ = [
    "UpstageLLMGateway",
    "SettingsSecretResolver",
    "InMemoryDocumentStore",
    "RedisDocumentStore",
    "create_document_store",
]
