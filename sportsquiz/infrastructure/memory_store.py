"""
In-memory Document Store

WARNING: All documents are lost on server restart.
Use only for development/testing.
"""
import copy
import threading
import time
import uuid
from typing import Any, Callable, Dict, List, Optional

from sportsquiz.ports.document_store import (
    SERVER_TIMESTAMP,
    DocumentStore,
    DocumentExistsError,
    DocumentNotFoundError,
    matches_filters,
    sort_and_limit,
)


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class InMemoryDocumentStore(DocumentStore):
    """
    Dict-backed store keyed by (collection, doc_id).

    Server timestamps come from a millisecond clock that never goes backwards
    and never repeats within one store, so createdAt ordering is stable.
    """

    def __init__(self, clock: Callable[[], int] = _epoch_millis):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._last_timestamp = 0

    def _next_timestamp(self) -> int:
        now = max(self._clock(), self._last_timestamp + 1)
        self._last_timestamp = now
        return now

    def _apply_server_timestamps(self, data: Dict[str, Any]) -> Dict[str, Any]:
        stamped = copy.deepcopy({k: v for k, v in data.items() if v is not SERVER_TIMESTAMP})
        pending = [k for k, v in data.items() if v is SERVER_TIMESTAMP]
        if pending:
            timestamp = self._next_timestamp()
            for key in pending:
                stamped[key] = timestamp
        return stamped

    def new_id(self) -> str:
        return uuid.uuid4().hex

    def create(self, collection: str, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            documents = self._collections.setdefault(collection, {})
            if doc_id in documents:
                raise DocumentExistsError(f"{collection}/{doc_id} already exists")
            stored = self._apply_server_timestamps(data)
            documents[doc_id] = stored
            return copy.deepcopy(stored)

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            document = self._collections.get(collection, {}).get(doc_id)
            return copy.deepcopy(document) if document is not None else None

    def update(self, collection: str, doc_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        with self._lock:
            documents = self._collections.get(collection, {})
            if doc_id not in documents:
                raise DocumentNotFoundError(f"{collection}/{doc_id} not found")
            documents[doc_id].update(self._apply_server_timestamps(fields))
            return copy.deepcopy(documents[doc_id])

    def query(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        with self._lock:
            matched = [
                copy.deepcopy(doc)
                for doc in self._collections.get(collection, {}).values()
                if matches_filters(doc, filters)
            ]
        return sort_and_limit(matched, order_by, descending, limit)

    def __repr__(self) -> str:
        return f"<InMemoryDocumentStore collections={len(self._collections)}>"
