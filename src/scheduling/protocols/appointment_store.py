"""Contrato do store de documentos de agendamento.

O core só conhece este protocolo. Implementações concretas (Firestore,
memória) ficam em `scheduling.infra.stores` e traduzem erros do SDK para
a hierarquia de `utils.errors`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any, Final, NamedTuple, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime


class StoreDocument(NamedTuple):
    """Documento entregue num snapshot: id do store + dados crus."""

    document_id: str
    data: Mapping[str, Any]


class _FieldDeletion(Enum):
    DELETE_FIELD = "delete_field"


# Valor de `update` que remove o campo do documento
DELETE_FIELD: Final = _FieldDeletion.DELETE_FIELD


SnapshotCallback = Callable[[Sequence[StoreDocument]], None]
ErrorCallback = Callable[[Exception], None]


@runtime_checkable
class SubscriptionHandle(Protocol):
    """Handle de uma assinatura viva."""

    def unsubscribe(self) -> None:
        """Encerra a assinatura; nenhum callback é entregue depois disso."""
        ...


@runtime_checkable
class AppointmentStoreProtocol(Protocol):
    """Contrato para leitura por assinatura e escrita de agendamentos."""

    def subscribe(
        self,
        owner_id: str,
        range_start: datetime,
        range_end: datetime,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> SubscriptionHandle:
        """Assina os documentos do dono no intervalo [range_start, range_end].

        Cada snapshot entrega o conjunto completo de documentos que casam
        com a consulta, não um diff.
        """
        ...

    async def create(self, payload: Mapping[str, Any]) -> str:
        """Cria documento e retorna o id atribuído pelo store."""
        ...

    async def update(self, document_id: str, fields: Mapping[str, Any]) -> None:
        """Atualiza campos de um documento existente.

        Campos com valor `DELETE_FIELD` são removidos do documento.
        """
        ...

    async def delete(self, document_id: str) -> None:
        """Remove documento."""
        ...


__all__ = [
    "DELETE_FIELD",
    "AppointmentStoreProtocol",
    "ErrorCallback",
    "SnapshotCallback",
    "StoreDocument",
    "SubscriptionHandle",
]
