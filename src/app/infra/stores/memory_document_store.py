"""In-memory document store for development and tests.

Mirrors the Firestore semantics the routes depend on: dotted field paths,
additive increments and array unions applied to the stored document, and
``update`` failing on missing documents. Batches are staged on a copy and swapped in
only when every write applied. Not for staging/production.
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any

from app.protocols.document_store import DocumentStoreProtocol
from utils.errors import NotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.protocols.document_store import DocumentWrite

logger = logging.getLogger(__name__)


def _resolve_parent(document: dict[str, Any], path: str) -> tuple[dict[str, Any], str]:
    *parents, leaf = path.split(".")
    node = document
    for key in parents:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    return node, leaf


def _apply_update(
    collections: dict[str, dict[str, dict[str, Any]]],
    collection: str,
    doc_id: str,
    fields: dict[str, Any] | None,
    increments: dict[str, float] | None,
    array_unions: dict[str, list[Any]] | None,
) -> None:
    document = collections.get(collection, {}).get(doc_id)
    if document is None:
        raise NotFoundError(f"Document {collection}/{doc_id} does not exist")

    for path, value in (fields or {}).items():
        parent, leaf = _resolve_parent(document, path)
        parent[leaf] = copy.deepcopy(value)

    for path, amount in (increments or {}).items():
        parent, leaf = _resolve_parent(document, path)
        current = parent.get(leaf)
        base = current if isinstance(current, (int, float)) and not isinstance(current, bool) else 0
        parent[leaf] = base + amount

    for path, values in (array_unions or {}).items():
        parent, leaf = _resolve_parent(document, path)
        current = parent.get(leaf)
        merged = list(current) if isinstance(current, list) else []
        merged.extend(value for value in values if value not in merged)
        parent[leaf] = merged


class MemoryDocumentStore(DocumentStoreProtocol):
    """Document store held in a dict of collections."""

    def __init__(self, initial: dict[str, dict[str, dict[str, Any]]] | None = None) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = copy.deepcopy(initial or {})

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        document = self._collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(document) if document is not None else None

    async def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    async def update(
        self,
        collection: str,
        doc_id: str,
        *,
        fields: dict[str, Any] | None = None,
        increments: dict[str, float] | None = None,
        array_unions: dict[str, list[Any]] | None = None,
    ) -> None:
        _apply_update(self._collections, collection, doc_id, fields, increments, array_unions)

    async def write_batch(self, writes: Sequence[DocumentWrite]) -> None:
        staged = copy.deepcopy(self._collections)
        for write in writes:
            if write.replaces:
                staged.setdefault(write.collection, {})[write.doc_id] = copy.deepcopy(write.data)
            else:
                _apply_update(
                    staged,
                    write.collection,
                    write.doc_id,
                    write.fields,
                    write.increments,
                    write.array_unions,
                )
        self._collections = staged

    async def delete(self, collection: str, doc_id: str) -> None:
        self._collections.get(collection, {}).pop(doc_id, None)

    async def find_by_field(
        self,
        collection: str,
        field: str,
        value: Any,
    ) -> list[tuple[str, dict[str, Any]]]:
        matches: list[tuple[str, dict[str, Any]]] = []
        for doc_id, document in self._collections.get(collection, {}).items():
            parent, leaf = _resolve_parent(copy.deepcopy(document), field)
            if leaf in parent and parent[leaf] == value:
                matches.append((doc_id, copy.deepcopy(document)))
        return matches

    async def ping(self) -> bool:
        return True

    def count(self, collection: str) -> int:
        """Number of documents in a collection."""
        return len(self._collections.get(collection, {}))
