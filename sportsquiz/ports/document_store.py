"""
Document Store Port (Interface)

키 기반 JSON 문서 저장소 추상화. 식별자와 서버 타임스탬프는 저장소가 부여한다.
Core는 단일 문서 생성의 원자성만 요구한다.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class _ServerTimestamp:
    """Sentinel replaced by the store with its own clock (epoch millis) on write"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


class DocumentStore(ABC):
    """
    문서 저장소 인터페이스

    구현체:
        - InMemoryDocumentStore: 개발/테스트용
        - RedisDocumentStore: Redis 기반

    Example:
        doc_id = store.new_id()
        stored = store.create("quizzes", doc_id, {"title": "NBA", "createdAt": SERVER_TIMESTAMP})
        stored["createdAt"]  # 1730000000000
    """

    @abstractmethod
    def new_id(self) -> str:
        """Generate a fresh unique document id"""
        pass

    @abstractmethod
    def create(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Atomically create a document.

        Top-level SERVER_TIMESTAMP values are replaced by the store clock.

        Returns:
            The document exactly as stored.

        Raises:
            DocumentExistsError: doc_id already used in the collection
            DocumentStoreError: backend failure
        """
        pass

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Return the document or None"""
        pass

    @abstractmethod
    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge top-level fields into an existing document.

        Raises:
            DocumentNotFoundError: document does not exist
        """
        pass

    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Equality-filtered listing with optional ordering and limit"""
        pass


def matches_filters(document: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
    """Equality match on every filter field"""
    if not filters:
        return True
    return all(document.get(key) == value for key, value in filters.items())


def sort_and_limit(
    documents: List[Dict[str, Any]],
    order_by: Optional[str],
    descending: bool,
    limit: Optional[int]
) -> List[Dict[str, Any]]:
    """Shared ordering helper for adapters that filter in process"""
    if order_by:
        # Documents missing the field sort last in either direction
        present = [d for d in documents if d.get(order_by) is not None]
        missing = [d for d in documents if d.get(order_by) is None]
        present.sort(key=lambda d: d[order_by], reverse=descending)
        documents = present + missing
    if limit is not None:
        documents = documents[:limit]
    return documents


class DocumentStoreError(Exception):
    """저장소 백엔드 오류"""
    pass


class DocumentExistsError(DocumentStoreError):
    """같은 ID의 문서가 이미 존재"""
    pass


class DocumentNotFoundError(DocumentStoreError):
    """문서 없음"""
    pass
