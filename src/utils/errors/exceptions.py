"""Exceções de infraestrutura e integrações externas."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias (retry é seguro)."""


class FirestoreUnavailableError(InfrastructureError):
    """Falha de indisponibilidade ao acessar Firestore."""


class StoreTimeoutError(InfrastructureError):
    """Operação no entity store excedeu o timeout configurado."""


class DocumentNotFoundError(LookupError):
    """Documento esperado não existe no store."""

    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(f"{collection}/{doc_id} não encontrado")
        self.collection = collection
        self.doc_id = doc_id


class IdentityVerificationError(RuntimeError):
    """Token rejeitado ou verificador remoto indisponível."""


class NotificationError(RuntimeError):
    """Falha ao despachar notificação (nunca propagada ao fluxo principal)."""


class DocumentAlreadyExistsError(ValueError):
    """Criação com ID já ocupado."""

    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(f"{collection}/{doc_id} já existe")
        self.collection = collection
        self.doc_id = doc_id
