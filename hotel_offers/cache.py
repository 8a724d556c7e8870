from __future__ import annotations

import copy
from typing import Any

from hotel_offers.store import DocumentStore


class DocumentCache:
    """Read-through cache of one collection, invalidated by store writes."""

    def __init__(self, store: DocumentStore, collection: str) -> None:
        self._store = store
        self._collection = collection
        self._entries: dict[str, dict[str, Any]] = {}
        self.hits = 0
        self.misses = 0
        store.subscribe(self._on_change)

    def _on_change(self, collection: str, doc_id: str) -> None:
        if collection == self._collection:
            self._entries.pop(doc_id, None)

    async def get(self, doc_id: str) -> dict[str, Any] | None:
        if doc_id in self._entries:
            self.hits += 1
            return copy.deepcopy(self._entries[doc_id])

        self.misses += 1
        doc = await self._store.get(self._collection, doc_id)
        if doc is not None:
            self._entries[doc_id] = doc
            return copy.deepcopy(doc)
        return None

    async def get_many(self, doc_ids: list[str]) -> dict[str, dict[str, Any]]:
        found: dict[str, dict[str, Any]] = {}
        for doc_id in dict.fromkeys(doc_ids):
            doc = await self.get(doc_id)
            if doc is not None:
                found[doc_id] = doc
        return found
