# medcabinet/adapters/memory_store.py
from __future__ import annotations

import asyncio
import copy
from typing import Any, Dict, List, Optional, Tuple


class InMemoryDocumentStore:
    """
    Document-store collaborator kept in process memory.
    Same surface as the cloud store: get / query / set(merge) / delete, all async.
    Values are deep-copied in and out so callers never share state with the store.
    """

    def __init__(self) -> None:
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = asyncio.Lock()

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = self._data.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def query(
        self, collection: str, filters: Optional[Dict[str, Any]] = None
    ) -> List[Tuple[str, Dict[str, Any]]]:
        """Equality filter on top-level fields; returns (id, data) pairs."""
        filters = filters or {}
        out: List[Tuple[str, Dict[str, Any]]] = []
        for doc_id, doc in self._data.get(collection, {}).items():
            if all(doc.get(k) == v for k, v in filters.items()):
                out.append((doc_id, copy.deepcopy(doc)))
        return out

    async def set(
        self,
        collection: str,
        doc_id: str,
        fields: Dict[str, Any],
        *,
        merge: bool = False,
    ) -> None:
        async with self._lock:
            docs = self._data.setdefault(collection, {})
            if merge and doc_id in docs:
                docs[doc_id].update(copy.deepcopy(fields))
            else:
                docs[doc_id] = copy.deepcopy(fields)

    async def delete(self, collection: str, doc_id: str) -> bool:
        async with self._lock:
            return self._data.get(collection, {}).pop(doc_id, None) is not None
