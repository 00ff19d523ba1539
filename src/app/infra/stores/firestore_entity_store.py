"""Entity store sobre Firestore.

O SDK Python do Firestore é síncrono; cada operação roda em
`asyncio.to_thread` com timeout por chamada. A revisão é o `update_time`
do snapshot e a escrita condicional usa
`write_option(last_update_time=...)` (FailedPrecondition = outro escritor
venceu).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from google.api_core import exceptions as gexc
from google.auth import exceptions as auth_exceptions
from google.cloud.firestore_v1 import ArrayUnion
from google.cloud.firestore_v1.base_query import FieldFilter

from app.protocols.entity_store import EntityStoreProtocol, StoredDocument
from utils.errors import (
    DocumentAlreadyExistsError,
    DocumentNotFoundError,
    FirestoreUnavailableError,
    StoreTimeoutError,
)

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FirestoreEntityStore(EntityStoreProtocol):
    """Store de documentos usando Firestore.

    Args:
        firestore_client: Cliente Firestore síncrono
        timeout_seconds: Timeout por chamada RPC
    """

    def __init__(self, firestore_client: FirestoreClient, timeout_seconds: float = 10.0) -> None:
        self._db = firestore_client
        self._timeout = timeout_seconds

    async def _run(self, operation: str, collection: str, fn: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.to_thread(fn, *args)
        except (gexc.DeadlineExceeded, TimeoutError) as exc:
            logger.error(
                "entity_store_timeout",
                extra={"operation": operation, "collection": collection},
            )
            raise StoreTimeoutError(f"Firestore {operation} excedeu {self._timeout}s") from exc
        except (gexc.GoogleAPIError, auth_exceptions.GoogleAuthError) as exc:
            logger.error(
                "entity_store_unavailable",
                extra={
                    "operation": operation,
                    "collection": collection,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise FirestoreUnavailableError(f"Firestore {operation} falhou: {exc}") from exc

    # ── leitura ────────────────────────────────────────────────────────────

    async def get(self, collection: str, doc_id: str) -> StoredDocument | None:
        return await self._run("get", collection, self._get_sync, collection, doc_id)

    def _get_sync(self, collection: str, doc_id: str) -> StoredDocument | None:
        snapshot = self._db.collection(collection).document(doc_id).get(timeout=self._timeout)
        if not snapshot.exists:
            return None
        return StoredDocument(collection, doc_id, snapshot.to_dict() or {}, snapshot.update_time)

    async def query(
        self,
        collection: str,
        filters: Mapping[str, Any],
    ) -> list[StoredDocument]:
        return await self._run("query", collection, self._query_sync, collection, dict(filters))

    def _query_sync(self, collection: str, filters: dict[str, Any]) -> list[StoredDocument]:
        query: Any = self._db.collection(collection)
        for field_name, value in filters.items():
            query = query.where(filter=FieldFilter(field_name, "==", value))
        return [
            StoredDocument(collection, snapshot.id, snapshot.to_dict() or {}, snapshot.update_time)
            for snapshot in query.stream(timeout=self._timeout)
        ]

    # ── escrita ────────────────────────────────────────────────────────────

    async def set(
        self,
        collection: str,
        doc_id: str,
        data: Mapping[str, Any],
        *,
        merge: bool = False,
    ) -> None:
        await self._run("set", collection, self._set_sync, collection, doc_id, dict(data), merge)

    def _set_sync(self, collection: str, doc_id: str, data: dict[str, Any], merge: bool) -> None:
        self._db.collection(collection).document(doc_id).set(
            data, merge=merge, timeout=self._timeout
        )

    async def create(
        self,
        collection: str,
        data: Mapping[str, Any],
        doc_id: str | None = None,
    ) -> str:
        return await self._run("create", collection, self._create_sync, collection, dict(data), doc_id)

    def _create_sync(self, collection: str, data: dict[str, Any], doc_id: str | None) -> str:
        col = self._db.collection(collection)
        doc_ref = col.document(doc_id) if doc_id else col.document()
        try:
            doc_ref.create(data, timeout=self._timeout)
        except gexc.Conflict as exc:
            raise DocumentAlreadyExistsError(collection, doc_ref.id) from exc
        logger.debug("entity_created", extra={"collection": collection, "doc_id": doc_ref.id})
        return doc_ref.id

    async def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        await self._run("update", collection, self._update_sync, collection, doc_id, dict(fields))

    def _update_sync(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        try:
            self._db.collection(collection).document(doc_id).update(fields, timeout=self._timeout)
        except gexc.NotFound as exc:
            raise DocumentNotFoundError(collection, doc_id) from exc

    async def update_if_match(
        self,
        collection: str,
        doc_id: str,
        fields: Mapping[str, Any],
        revision: Any,
    ) -> bool:
        if revision is None:
            return False
        return await self._run(
            "update_if_match",
            collection,
            self._update_if_match_sync,
            collection,
            doc_id,
            dict(fields),
            revision,
        )

    def _update_if_match_sync(
        self,
        collection: str,
        doc_id: str,
        fields: dict[str, Any],
        revision: Any,
    ) -> bool:
        option = self._db.write_option(last_update_time=revision)
        try:
            self._db.collection(collection).document(doc_id).update(
                fields, option=option, timeout=self._timeout
            )
        except (gexc.FailedPrecondition, gexc.NotFound):
            logger.info(
                "entity_revision_mismatch",
                extra={"collection": collection, "doc_id": doc_id},
            )
            return False
        return True

    async def add_to_array(
        self,
        collection: str,
        doc_id: str,
        field_name: str,
        values: Sequence[Any],
    ) -> None:
        await self._run(
            "add_to_array",
            collection,
            self._update_sync,
            collection,
            doc_id,
            {field_name: ArrayUnion(list(values))},
        )
