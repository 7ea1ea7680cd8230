"""Contexto de sessão injetado no core de agendamento.

O core nunca consulta o provedor de autenticação diretamente: quem monta
o calendário entrega um SessionContext já resolvido.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SessionContext:
    """Usuário autenticado (ou ausência dele) visto pelo calendário.

    Attributes:
        owner_id: uid do médico dono da agenda; None quando não autenticado
        display_name: Nome exibido como organizador dos agendamentos
    """

    owner_id: str | None = None
    display_name: str = ""

    @property
    def is_authenticated(self) -> bool:
        return bool(self.owner_id)

    @classmethod
    def anonymous(cls) -> SessionContext:
        return cls()
