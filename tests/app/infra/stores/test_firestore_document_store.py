"""Tests for the Firestore document store against an in-process client double."""

from __future__ import annotations

from typing import Any

import pytest
from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore

from app.infra.stores.firestore_document_store import FirestoreDocumentStore
from app.protocols import DocumentWrite
from utils.errors import FirestoreUnavailableError, NotFoundError


class _Ref:
    def __init__(self, client: _Client, path: str) -> None:
        self._client = client
        self.path = path

    def delete(self) -> None:
        self._client.deleted.append(self.path)


class _Collection:
    def __init__(self, client: _Client, name: str) -> None:
        self._client = client
        self._name = name

    def document(self, doc_id: str) -> _Ref:
        return _Ref(self._client, f"{self._name}/{doc_id}")


class _Batch:
    def __init__(self, client: _Client) -> None:
        self._client = client
        self.operations: list[tuple[str, str, dict[str, Any]]] = []

    def set(self, ref: _Ref, data: dict[str, Any]) -> None:
        self.operations.append(("set", ref.path, data))

    def update(self, ref: _Ref, payload: dict[str, Any]) -> None:
        self.operations.append(("update", ref.path, payload))

    def commit(self) -> None:
        if self._client.commit_error is not None:
            raise self._client.commit_error
        self._client.committed.append(self.operations)


class _Client:
    def __init__(self, commit_error: Exception | None = None) -> None:
        self.commit_error = commit_error
        self.committed: list[list[tuple[str, str, dict[str, Any]]]] = []
        self.deleted: list[str] = []

    def collection(self, name: str) -> _Collection:
        return _Collection(self, name)

    def batch(self) -> _Batch:
        return _Batch(self)


PLAN_WRITES = [
    DocumentWrite("cropPlans", "plan-1", data={"farmId": "farm-1"}),
    DocumentWrite(
        "farms",
        "farm-1",
        fields={"updatedAt": "2025-05-01T00:00:00Z"},
        increments={"totalPlannedArea": 1.5},
        array_unions={"cropPlans": ["plan-1"]},
    ),
]


class TestFirestoreBatchWrites:
    """write_batch commits one WriteBatch and maps SDK failures."""

    @pytest.mark.asyncio
    async def test_writes_committed_together(self) -> None:
        client = _Client()
        store = FirestoreDocumentStore(client)  # type: ignore[arg-type]

        await store.write_batch(PLAN_WRITES)

        assert len(client.committed) == 1
        (plan_op, farm_op) = client.committed[0]
        assert plan_op == ("set", "cropPlans/plan-1", {"farmId": "farm-1"})
        kind, path, payload = farm_op
        assert (kind, path) == ("update", "farms/farm-1")
        assert payload["updatedAt"] == "2025-05-01T00:00:00Z"
        assert isinstance(payload["totalPlannedArea"], firestore.Increment)
        assert isinstance(payload["cropPlans"], firestore.ArrayUnion)

    @pytest.mark.asyncio
    async def test_empty_batch_is_noop(self) -> None:
        client = _Client()
        await FirestoreDocumentStore(client).write_batch([])  # type: ignore[arg-type]
        assert client.committed == []

    @pytest.mark.asyncio
    async def test_missing_update_target(self) -> None:
        client = _Client(commit_error=gcp_exceptions.NotFound("no farm"))
        store = FirestoreDocumentStore(client)  # type: ignore[arg-type]

        with pytest.raises(NotFoundError):
            await store.write_batch(PLAN_WRITES)

    @pytest.mark.asyncio
    async def test_outage_mapped_to_unavailable(self) -> None:
        client = _Client(commit_error=gcp_exceptions.ServiceUnavailable("down"))
        store = FirestoreDocumentStore(client)  # type: ignore[arg-type]

        with pytest.raises(FirestoreUnavailableError):
            await store.write_batch(PLAN_WRITES)

    @pytest.mark.asyncio
    async def test_delete(self) -> None:
        client = _Client()
        await FirestoreDocumentStore(client).delete("users", "uid-1")  # type: ignore[arg-type]
        assert client.deleted == ["users/uid-1"]
