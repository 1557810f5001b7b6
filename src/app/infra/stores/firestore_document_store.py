"""Firestore document store.

The Firestore Python SDK is synchronous; every call runs through
``asyncio.to_thread`` bounded by a timeout so a stalled RPC never blocks the
event loop indefinitely. Increments and array unions are sent as Firestore
transforms, so concurrent partial updates are merged server-side. Batches
commit through a Firestore ``WriteBatch`` and apply atomically.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from google.api_core import exceptions as gcp_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from app.protocols.document_store import DocumentStoreProtocol
from utils.errors import FirestoreUnavailableError, NotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from google.cloud.firestore import Client as FirestoreClient

    from app.protocols.document_store import DocumentWrite

logger = logging.getLogger(__name__)

T = TypeVar("T")

HEALTH_COLLECTION = "_health"


def _update_payload(
    fields: dict[str, Any] | None,
    increments: dict[str, float] | None,
    array_unions: dict[str, list[Any]] | None,
) -> dict[str, Any]:
    payload: dict[str, Any] = dict(fields or {})
    for path, amount in (increments or {}).items():
        payload[path] = firestore.Increment(amount)
    for path, values in (array_unions or {}).items():
        payload[path] = firestore.ArrayUnion(values)
    return payload


class FirestoreDocumentStore(DocumentStoreProtocol):
    """Document store backed by Cloud Firestore.

    Args:
        firestore_client: Firestore client
        timeout_seconds: Upper bound for each call
    """

    def __init__(self, firestore_client: FirestoreClient, *, timeout_seconds: float = 10.0) -> None:
        self._db = firestore_client
        self._timeout = timeout_seconds

    async def _run(self, operation: str, collection: str, func: Callable[[], T]) -> T:
        try:
            return await asyncio.wait_for(asyncio.to_thread(func), timeout=self._timeout)
        except TimeoutError as exc:
            logger.error(
                "firestore_call_timeout",
                extra={"operation": operation, "collection": collection},
            )
            raise FirestoreUnavailableError(f"{operation} timed out") from exc
        except gcp_exceptions.NotFound:
            raise
        except gcp_exceptions.GoogleAPICallError as exc:
            logger.error(
                "firestore_call_failed",
                extra={
                    "operation": operation,
                    "collection": collection,
                    "error_type": type(exc).__name__,
                },
            )
            raise FirestoreUnavailableError(f"{operation} failed") from exc

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        def _get() -> dict[str, Any] | None:
            snapshot = self._db.collection(collection).document(doc_id).get()
            if not snapshot.exists:
                return None
            return snapshot.to_dict() or {}

        return await self._run("get", collection, _get)

    async def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        await self._run(
            "set",
            collection,
            lambda: self._db.collection(collection).document(doc_id).set(data),
        )

    async def update(
        self,
        collection: str,
        doc_id: str,
        *,
        fields: dict[str, Any] | None = None,
        increments: dict[str, float] | None = None,
        array_unions: dict[str, list[Any]] | None = None,
    ) -> None:
        payload = _update_payload(fields, increments, array_unions)
        if not payload:
            return

        try:
            await self._run(
                "update",
                collection,
                lambda: self._db.collection(collection).document(doc_id).update(payload),
            )
        except gcp_exceptions.NotFound as exc:
            raise NotFoundError(f"Document {collection}/{doc_id} does not exist") from exc

    async def write_batch(self, writes: Sequence[DocumentWrite]) -> None:
        if not writes:
            return
        batch = self._db.batch()
        for write in writes:
            ref = self._db.collection(write.collection).document(write.doc_id)
            if write.replaces:
                batch.set(ref, write.data)
            else:
                batch.update(ref, _update_payload(write.fields, write.increments, write.array_unions))

        try:
            await self._run("write_batch", writes[0].collection, batch.commit)
        except gcp_exceptions.NotFound as exc:
            raise NotFoundError("Batch update targets a missing document") from exc

    async def delete(self, collection: str, doc_id: str) -> None:
        await self._run(
            "delete",
            collection,
            lambda: self._db.collection(collection).document(doc_id).delete(),
        )

    async def find_by_field(
        self,
        collection: str,
        field: str,
        value: Any,
    ) -> list[tuple[str, dict[str, Any]]]:
        def _query() -> list[tuple[str, dict[str, Any]]]:
            query = self._db.collection(collection).where(filter=FieldFilter(field, "==", value))
            return [(snapshot.id, snapshot.to_dict() or {}) for snapshot in query.stream()]

        return await self._run("find_by_field", collection, _query)

    async def ping(self) -> bool:
        # Any answer counts, the health document need not exist
        await self._run(
            "ping",
            HEALTH_COLLECTION,
            lambda: self._db.collection(HEALTH_COLLECTION).document("check").get(),
        )
        return True
