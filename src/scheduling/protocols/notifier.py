"""Contrato para notificações exibidas ao usuário (toasts)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class NotifierProtocol(Protocol):
    """Canal de feedback para o usuário; mensagens já localizadas."""

    def error(self, message: str) -> None:
        """Exibe mensagem de erro."""
        ...

    def info(self, message: str) -> None:
        """Exibe mensagem informativa."""
        ...
