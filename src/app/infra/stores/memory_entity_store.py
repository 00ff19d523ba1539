"""Entity store em memória: apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
A revisão é um contador por documento, incrementado a cada escrita.
"""

from __future__ import annotations

import asyncio
import copy
import uuid
from collections.abc import Mapping, Sequence
from typing import Any

from app.protocols.entity_store import EntityStoreProtocol, StoredDocument
from utils.errors import DocumentAlreadyExistsError, DocumentNotFoundError


class MemoryEntityStore(EntityStoreProtocol):
    """Store de documentos em memória com escrita condicional."""

    def __init__(self) -> None:
        # collection -> doc_id -> (data, revision)
        self._collections: dict[str, dict[str, tuple[dict[str, Any], int]]] = {}
        self._lock = asyncio.Lock()

    def _docs(self, collection: str) -> dict[str, tuple[dict[str, Any], int]]:
        return self._collections.setdefault(collection, {})

    @staticmethod
    def _snapshot(collection: str, doc_id: str, entry: tuple[dict[str, Any], int]) -> StoredDocument:
        data, revision = entry
        return StoredDocument(collection, doc_id, copy.deepcopy(data), revision)

    async def get(self, collection: str, doc_id: str) -> StoredDocument | None:
        async with self._lock:
            entry = self._docs(collection).get(doc_id)
            return None if entry is None else self._snapshot(collection, doc_id, entry)

    async def set(
        self,
        collection: str,
        doc_id: str,
        data: Mapping[str, Any],
        *,
        merge: bool = False,
    ) -> None:
        async with self._lock:
            docs = self._docs(collection)
            current = docs.get(doc_id)
            revision = current[1] + 1 if current else 1
            base = dict(current[0]) if (current and merge) else {}
            base.update(copy.deepcopy(dict(data)))
            docs[doc_id] = (base, revision)

    async def create(
        self,
        collection: str,
        data: Mapping[str, Any],
        doc_id: str | None = None,
    ) -> str:
        async with self._lock:
            docs = self._docs(collection)
            new_id = doc_id or uuid.uuid4().hex[:20]
            if new_id in docs:
                raise DocumentAlreadyExistsError(collection, new_id)
            docs[new_id] = (copy.deepcopy(dict(data)), 1)
            return new_id

    async def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        async with self._lock:
            docs = self._docs(collection)
            current = docs.get(doc_id)
            if current is None:
                raise DocumentNotFoundError(collection, doc_id)
            docs[doc_id] = ({**current[0], **copy.deepcopy(dict(fields))}, current[1] + 1)

    async def update_if_match(
        self,
        collection: str,
        doc_id: str,
        fields: Mapping[str, Any],
        revision: Any,
    ) -> bool:
        async with self._lock:
            docs = self._docs(collection)
            current = docs.get(doc_id)
            if current is None or revision is None or current[1] != revision:
                return False
            docs[doc_id] = ({**current[0], **copy.deepcopy(dict(fields))}, current[1] + 1)
            return True

    async def query(
        self,
        collection: str,
        filters: Mapping[str, Any],
    ) -> list[StoredDocument]:
        async with self._lock:
            return [
                self._snapshot(collection, doc_id, entry)
                for doc_id, entry in self._docs(collection).items()
                if all(entry[0].get(key) == value for key, value in filters.items())
            ]

    async def add_to_array(
        self,
        collection: str,
        doc_id: str,
        field_name: str,
        values: Sequence[Any],
    ) -> None:
        async with self._lock:
            docs = self._docs(collection)
            current = docs.get(doc_id)
            if current is None:
                raise DocumentNotFoundError(collection, doc_id)
            data = dict(current[0])
            existing = list(data.get(field_name) or [])
            existing.extend(value for value in values if value not in existing)
            data[field_name] = existing
            docs[doc_id] = (data, current[1] + 1)
