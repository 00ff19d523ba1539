"""Stores: implementações concretas do entity store.

Módulos disponíveis:
    - firestore_entity_store: Firestore (staging/production)
    - memory_entity_store: em memória, para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.firestore_entity_store import FirestoreEntityStore
from app.infra.stores.memory_entity_store import MemoryEntityStore

__all__ = [
    "FirestoreEntityStore",
    "MemoryEntityStore",
]
