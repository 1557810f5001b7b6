"""Protocol for the document store.

Documents are schemaless mappings addressed by ``(collection, doc_id)``.
Partial updates take dotted field paths (``"costs.seeds"``) so that nested
fields change without rewriting the parent map; ``increments`` are added to
the stored value by the store itself and ``array_unions`` append values not
already present.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class DocumentWrite:
    """One write inside a batch.

    A write carrying ``data`` replaces the whole document; otherwise it is a
    partial update with the same semantics as ``update``.
    """

    collection: str
    doc_id: str
    data: dict[str, Any] | None = None
    fields: dict[str, Any] | None = None
    increments: dict[str, float] | None = None
    array_unions: dict[str, list[Any]] | None = None

    @property
    def replaces(self) -> bool:
        return self.data is not None


class DocumentStoreProtocol(Protocol):
    """Contract for document reads and writes."""

    async def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Return the document or None when absent."""
        ...

    async def set(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        """Create or replace a whole document."""
        ...

    async def update(
        self,
        collection: str,
        doc_id: str,
        *,
        fields: dict[str, Any] | None = None,
        increments: dict[str, float] | None = None,
        array_unions: dict[str, list[Any]] | None = None,
    ) -> None:
        """Apply a partial update to an existing document.

        Raises:
            NotFoundError: If the document does not exist.
        """
        ...

    async def write_batch(self, writes: Sequence[DocumentWrite]) -> None:
        """Apply every write or none of them.

        Raises:
            NotFoundError: If an update targets a missing document (nothing
                is written).
        """
        ...

    async def delete(self, collection: str, doc_id: str) -> None:
        """Remove a document; absent documents are ignored."""
        ...

    async def find_by_field(
        self,
        collection: str,
        field: str,
        value: Any,
    ) -> list[tuple[str, dict[str, Any]]]:
        """Return ``(doc_id, data)`` pairs whose ``field`` equals ``value``."""
        ...

    async def ping(self) -> bool:
        """Return True when the store answers."""
        ...
