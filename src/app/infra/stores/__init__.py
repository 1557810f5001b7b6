"""Stores - concrete document store implementations.

Modules:
    - firestore_document_store: Cloud Firestore (staging/production)
    - memory_document_store: in-memory store for development/tests
"""

from __future__ import annotations

from app.infra.stores.firestore_document_store import FirestoreDocumentStore
from app.infra.stores.memory_document_store import MemoryDocumentStore

__all__ = [
    "FirestoreDocumentStore",
    "MemoryDocumentStore",
]
