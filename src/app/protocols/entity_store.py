"""Contrato do store de documentos (coleções de inscrição e convites).

Cada leitura devolve uma `revision` opaca; `update_if_match` só grava se
o documento ainda estiver nessa revisão. É a única primitiva de
concorrência usada pelos serviços.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class StoredDocument:
    """Documento lido do store.

    Attributes:
        collection: Nome da coleção
        doc_id: ID do documento
        data: Campos do documento (cópia; alterar não afeta o store)
        revision: Token opaco de versão
    """

    collection: str
    doc_id: str
    data: dict[str, Any] = field(default_factory=dict)
    revision: Any = None


class EntityStoreProtocol(ABC):
    """Contrato assíncrono do store de entidades.

    Falhas de infraestrutura levantam `InfrastructureError`
    (`FirestoreUnavailableError` ou `StoreTimeoutError`).
    """

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> StoredDocument | None: ...

    @abstractmethod
    async def set(
        self,
        collection: str,
        doc_id: str,
        data: Mapping[str, Any],
        *,
        merge: bool = False,
    ) -> None: ...

    @abstractmethod
    async def create(
        self,
        collection: str,
        data: Mapping[str, Any],
        doc_id: str | None = None,
    ) -> str:
        """Cria documento novo e devolve o ID (gerado quando omitido)."""

    @abstractmethod
    async def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        """Atualiza campos; `DocumentNotFoundError` se não existir."""

    @abstractmethod
    async def update_if_match(
        self,
        collection: str,
        doc_id: str,
        fields: Mapping[str, Any],
        revision: Any,
    ) -> bool:
        """Atualiza só se a revisão coincidir; False quando outro escritor venceu."""

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Mapping[str, Any],
    ) -> list[StoredDocument]:
        """Busca por igualdade em todos os campos de `filters`."""

    @abstractmethod
    async def add_to_array(
        self,
        collection: str,
        doc_id: str,
        field_name: str,
        values: Sequence[Any],
    ) -> None:
        """Union em campo array (sem duplicar valores existentes)."""
