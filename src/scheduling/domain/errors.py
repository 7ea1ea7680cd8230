"""Erros de domínio do calendário."""

from __future__ import annotations


class InvalidAppointmentDocumentError(ValueError):
    """Documento do store não pode virar CalendarEvent (campo obrigatório ausente)."""

    def __init__(self, document_id: str, reason: str) -> None:
        super().__init__(f"Documento {document_id} inválido: {reason}")
        self.document_id = document_id
        self.reason = reason
