"""
Redis Document Store

Features:
- 문서: JSON 문자열, 키 "<prefix>:<collection>:<doc_id>"
- 생성: Lua 스크립트로 SET NX + 인덱스 ZADD를 원자적으로 실행
- 인덱스: 컬렉션별 sorted set (score = 문서에 찍힌 서버 타임스탬프)
- 수정: WATCH/MULTI 트랜잭션
- 서버 타임스탬프: Redis TIME 명령
"""
import json
import logging
import uuid
from typing import Any, Dict, List, Optional

import redis

from sportsquiz.config import Settings, get_settings
from sportsquiz.ports.document_store import (
    SERVER_TIMESTAMP,
    DocumentStore,
    DocumentStoreError,
    DocumentExistsError,
    DocumentNotFoundError,
    matches_filters,
    sort_and_limit,
)


logger = logging.getLogger(__name__)

# 문서 SET NX + 인덱스 ZADD를 한 번에 실행 (인덱스 실패 시 문서도 지움)
# KEYS: doc key, index key / ARGV: payload, score, doc id
_CREATE_SCRIPT = """
if not redis.call('SET', KEYS[1], ARGV[1], 'NX') then
    return 0
end
local indexed = redis.pcall('ZADD', KEYS[2], ARGV[2], ARGV[3])
if type(indexed) == 'table' and indexed.err then
    redis.call('DEL', KEYS[1])
    return redis.error_reply(indexed.err)
end
return 1
"""


class RedisDocumentStore(DocumentStore):
    """Redis-backed document store (no TTL; documents are permanent)"""

    def __init__(self, settings: Settings = None, client: "redis.Redis" = None):
        if settings is None:
            settings = get_settings()

        self.settings = settings
        self.prefix = settings.redis_key_prefix

        if client is not None:
            self.redis_client = client
            return

        try:
            if settings.redis_url:
                self.redis_client = redis.from_url(
                    settings.redis_url,
                    decode_responses=True,
                    encoding="utf-8"
                )
            else:
                redis_kwargs = {
                    "host": settings.redis_host,
                    "port": settings.redis_port,
                    "db": settings.redis_db,
                    "decode_responses": True,
                    "encoding": "utf-8",
                    "max_connections": 10,
                }
                if settings.redis_password:
                    redis_kwargs["password"] = settings.redis_password
                if settings.redis_ssl:
                    redis_kwargs["ssl"] = True

                self.redis_client = redis.Redis(**redis_kwargs)

            self.redis_client.ping()
            logger.info("Redis document store connected (prefix=%s)", self.prefix)

        except redis.ConnectionError as e:
            logger.warning("Redis connection failed: %s", e)
            raise

    def _doc_key(self, collection: str, doc_id: str) -> str:
        return f"{self.prefix}:{collection}:{doc_id}"

    def _index_key(self, collection: str) -> str:
        return f"{self.prefix}:{collection}:__index__"

    def _server_millis(self) -> int:
        seconds, micros = self.redis_client.time()
        return int(seconds) * 1000 + int(micros) // 1000

    def _apply_server_timestamps(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if not any(v is SERVER_TIMESTAMP for v in data.values()):
            return dict(data)
        timestamp = self._server_millis()
        return {k: (timestamp if v is SERVER_TIMESTAMP else v) for k, v in data.items()}

    def new_id(self) -> str:
        return uuid.uuid4().hex

    def create(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        try:
            timestamp = self._server_millis()
            stored = {k: (timestamp if v is SERVER_TIMESTAMP else v) for k, v in data.items()}
            payload = json.dumps(stored, ensure_ascii=False)

            created = self.redis_client.eval(
                _CREATE_SCRIPT,
                2,
                self._doc_key(collection, doc_id),
                self._index_key(collection),
                payload,
                timestamp,
                doc_id,
            )
            if not created:
                raise DocumentExistsError(f"{collection}/{doc_id} already exists")

            return stored

        except redis.RedisError as e:
            logger.error("Redis create error for %s/%s: %s", collection, doc_id, e)
            raise DocumentStoreError(f"Failed to create {collection}/{doc_id}") from e

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        try:
            data = self.redis_client.get(self._doc_key(collection, doc_id))
        except redis.RedisError as e:
            logger.error("Redis get error for %s/%s: %s", collection, doc_id, e)
            raise DocumentStoreError(f"Failed to read {collection}/{doc_id}") from e

        if data is None:
            return None
        try:
            return json.loads(data)
        except json.JSONDecodeError as e:
            logger.warning("JSON decode error for %s/%s: %s", collection, doc_id, e)
            return None

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        key = self._doc_key(collection, doc_id)
        changes = self._apply_server_timestamps(fields)

        def _merge(pipe: "redis.client.Pipeline") -> Dict[str, Any]:
            current = pipe.get(key)
            if current is None:
                raise DocumentNotFoundError(f"{collection}/{doc_id} not found")
            merged = json.loads(current)
            merged.update(changes)
            pipe.multi()
            pipe.set(key, json.dumps(merged, ensure_ascii=False))
            return merged

        try:
            return self.redis_client.transaction(_merge, key, value_from_callable=True)
        except redis.RedisError as e:
            logger.error("Redis update error for %s/%s: %s", collection, doc_id, e)
            raise DocumentStoreError(f"Failed to update {collection}/{doc_id}") from e

    def query(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        WARNING: filters are applied in process after loading the whole index.
        Fine for quiz-sized collections, slow for very large ones.
        """
        try:
            doc_ids = self.redis_client.zrange(self._index_key(collection), 0, -1)
            if not doc_ids:
                return []
            raw_documents = self.redis_client.mget([self._doc_key(collection, i) for i in doc_ids])
        except redis.RedisError as e:
            logger.error("Redis query error for %s: %s", collection, e)
            raise DocumentStoreError(f"Failed to query {collection}") from e

        documents = []
        for raw in raw_documents:
            if raw is None:
                continue
            try:
                document = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if matches_filters(document, filters):
                documents.append(document)

        return sort_and_limit(documents, order_by, descending, limit)

    def __repr__(self) -> str:
        return f"<RedisDocumentStore prefix={self.prefix}>"


def create_document_store(settings: Settings = None) -> DocumentStore:
    """
    Factory function to create the appropriate document store.

    Returns:
        - RedisDocumentStore if use_redis_store=True and Redis is available
        - InMemoryDocumentStore otherwise (fallback for dev/testing)
    """
    from sportsquiz.infrastructure.memory_store import InMemoryDocumentStore

    settings = settings or get_settings()

    if settings.use_redis_store:
        try:
            store = RedisDocumentStore(settings)
            logger.info("Using RedisDocumentStore")
            return store
        except Exception as e:
            logger.warning("Failed to initialize Redis: %s", e)
            logger.info("Falling back to InMemoryDocumentStore")

    logger.info("Using InMemoryDocumentStore (development mode)")
    return InMemoryDocumentStore()
