from __future__ import annotations

import asyncio
import copy
import logging
import uuid
from collections import defaultdict
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from hotel_offers.exceptions.custom import DocumentNotFoundError

logger = logging.getLogger(__name__)

OFFERS = "offers"
REQUESTS = "requests"
BOOKINGS = "bookings"
NOTIFICATIONS = "notifications"
ACTIVITY_LOGS = "activityLogs"

ChangeListener = Callable[[str, str], None]


class DocumentStore:
    """In-process document store with per-document locking.

    Documents are plain dicts keyed by (collection, id). Reads return deep
    copies; the only way to modify an existing document is ``transaction``,
    which holds that document's lock across the read-modify-write.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self._locks: dict[tuple[str, str], asyncio.Lock] = {}
        self._lock_users: dict[tuple[str, str], int] = {}
        self._listeners: list[ChangeListener] = []

    def new_id(self) -> str:
        return uuid.uuid4().hex[:20]

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def _emit(self, collection: str, doc_id: str) -> None:
        for listener in self._listeners:
            try:
                listener(collection, doc_id)
            except Exception:
                logger.exception("Change listener failed for %s/%s", collection, doc_id)

    @asynccontextmanager
    async def _hold(self, collection: str, doc_id: str) -> AsyncIterator[None]:
        # Locks live only while someone holds or waits on them
        key = (collection, doc_id)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
                del self._locks[key]

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        doc = copy.deepcopy(data)
        doc_id = doc.get("id") or self.new_id()
        doc["id"] = doc_id
        async with self._hold(collection, doc_id):
            if doc_id in self._collections[collection]:
                raise ValueError(f"{collection}/{doc_id} already exists")
            self._collections[collection][doc_id] = doc
        self._emit(collection, doc_id)
        return doc_id

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        doc = self._collections[collection].get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def require(self, collection: str, doc_id: str) -> dict[str, Any]:
        doc = await self.get(collection, doc_id)
        if doc is None:
            raise DocumentNotFoundError(collection, doc_id)
        return doc

    async def query(
        self, collection: str, where: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        where = where or {}
        return [
            copy.deepcopy(doc)
            for doc in self._collections[collection].values()
            if all(doc.get(field) == value for field, value in where.items())
        ]

    @asynccontextmanager
    async def locked(self, collection: str, doc_id: str) -> AsyncIterator[None]:
        """Hold a document's lock without writing it."""
        async with self._hold(collection, doc_id):
            yield

    @asynccontextmanager
    async def transaction(
        self, collection: str, doc_id: str
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield a mutable copy of a document; commit it on clean exit.

        An exception raised inside the block discards the draft.
        """
        async with self._hold(collection, doc_id):
            current = self._collections[collection].get(doc_id)
            if current is None:
                raise DocumentNotFoundError(collection, doc_id)
            draft = copy.deepcopy(current)
            yield draft
            draft["id"] = doc_id
            self._collections[collection][doc_id] = draft
        self._emit(collection, doc_id)
