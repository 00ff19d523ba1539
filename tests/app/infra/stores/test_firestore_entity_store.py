"""Testes do FirestoreEntityStore com cliente mockado."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as gexc

from app.infra.stores import FirestoreEntityStore
from utils.errors import (
    DocumentAlreadyExistsError,
    DocumentNotFoundError,
    FirestoreUnavailableError,
    StoreTimeoutError,
)

UPDATE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def _snapshot(doc_id: str, data: dict | None, exists: bool = True) -> MagicMock:
    snapshot = MagicMock()
    snapshot.id = doc_id
    snapshot.exists = exists
    snapshot.to_dict.return_value = data
    snapshot.update_time = UPDATE_TIME
    return snapshot


def _client_with_doc() -> tuple[MagicMock, MagicMock]:
    client = MagicMock()
    doc_ref = MagicMock()
    client.collection.return_value.document.return_value = doc_ref
    return client, doc_ref


class TestFirestoreEntityStoreReads:
    @pytest.mark.asyncio
    async def test_get_returns_document_with_update_time_revision(self) -> None:
        client, doc_ref = _client_with_doc()
        doc_ref.get.return_value = _snapshot("t1", {"nome": "Alpha"})
        store = FirestoreEntityStore(client, timeout_seconds=5)

        doc = await store.get("teams", "t1")

        assert doc is not None
        assert doc.data == {"nome": "Alpha"}
        assert doc.revision == UPDATE_TIME
        client.collection.assert_called_with("teams")
        doc_ref.get.assert_called_once_with(timeout=5)

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self) -> None:
        client, doc_ref = _client_with_doc()
        doc_ref.get.return_value = _snapshot("t1", None, exists=False)
        store = FirestoreEntityStore(client)

        assert await store.get("teams", "t1") is None

    @pytest.mark.asyncio
    async def test_query_chains_equality_filters(self) -> None:
        client = MagicMock()
        collection = client.collection.return_value
        collection.where.return_value = collection
        collection.stream.return_value = [_snapshot("a", {"status": "pendente"})]
        store = FirestoreEntityStore(client)

        docs = await store.query("convites_times", {"teamId": "t1", "status": "pendente"})

        assert [d.doc_id for d in docs] == ["a"]
        assert collection.where.call_count == 2


class TestFirestoreEntityStoreWrites:
    @pytest.mark.asyncio
    async def test_create_with_generated_id(self) -> None:
        client = MagicMock()
        doc_ref = MagicMock()
        doc_ref.id = "auto123"
        client.collection.return_value.document.return_value = doc_ref
        store = FirestoreEntityStore(client)

        new_id = await store.create("convites_times", {"status": "pendente"})

        assert new_id == "auto123"
        client.collection.return_value.document.assert_called_once_with()
        doc_ref.create.assert_called_once()

    @pytest.mark.asyncio
    async def test_create_conflict_maps_to_already_exists(self) -> None:
        client, doc_ref = _client_with_doc()
        doc_ref.id = "fixed"
        doc_ref.create.side_effect = gexc.AlreadyExists("exists")
        store = FirestoreEntityStore(client)

        with pytest.raises(DocumentAlreadyExistsError):
            await store.create("convites_times", {}, doc_id="fixed")

    @pytest.mark.asyncio
    async def test_update_not_found_maps_to_domain_error(self) -> None:
        client, doc_ref = _client_with_doc()
        doc_ref.update.side_effect = gexc.NotFound("missing")
        store = FirestoreEntityStore(client)

        with pytest.raises(DocumentNotFoundError):
            await store.update("teams", "ghost", {"x": 1})

    @pytest.mark.asyncio
    async def test_update_if_match_uses_last_update_time(self) -> None:
        client, doc_ref = _client_with_doc()
        store = FirestoreEntityStore(client)

        ok = await store.update_if_match("teams", "t1", {"paymentStatus": "paid"}, UPDATE_TIME)

        assert ok is True
        client.write_option.assert_called_once_with(last_update_time=UPDATE_TIME)
        _, kwargs = doc_ref.update.call_args
        assert kwargs["option"] is client.write_option.return_value

    @pytest.mark.asyncio
    async def test_update_if_match_precondition_failure_returns_false(self) -> None:
        client, doc_ref = _client_with_doc()
        doc_ref.update.side_effect = gexc.FailedPrecondition("stale")
        store = FirestoreEntityStore(client)

        assert await store.update_if_match("teams", "t1", {"x": 1}, UPDATE_TIME) is False

    @pytest.mark.asyncio
    async def test_update_if_match_without_revision_skips_io(self) -> None:
        client, doc_ref = _client_with_doc()
        store = FirestoreEntityStore(client)

        assert await store.update_if_match("teams", "t1", {"x": 1}, None) is False
        doc_ref.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_add_to_array_uses_array_union(self) -> None:
        client, doc_ref = _client_with_doc()
        store = FirestoreEntityStore(client)

        await store.add_to_array("teams", "t1", "atletas", ["u1"])

        (fields,), _ = doc_ref.update.call_args
        assert list(fields) == ["atletas"]
        assert type(fields["atletas"]).__name__ == "ArrayUnion"


class TestFirestoreEntityStoreFailures:
    @pytest.mark.asyncio
    async def test_deadline_maps_to_timeout(self) -> None:
        client, doc_ref = _client_with_doc()
        doc_ref.get.side_effect = gexc.DeadlineExceeded("slow")
        store = FirestoreEntityStore(client)

        with pytest.raises(StoreTimeoutError):
            await store.get("teams", "t1")

    @pytest.mark.asyncio
    async def test_api_error_maps_to_unavailable(self) -> None:
        client, doc_ref = _client_with_doc()
        doc_ref.set.side_effect = gexc.ServiceUnavailable("down")
        store = FirestoreEntityStore(client)

        with pytest.raises(FirestoreUnavailableError):
            await store.set("teams", "t1", {"x": 1})
