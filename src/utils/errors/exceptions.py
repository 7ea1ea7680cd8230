"""Exceções compartilhadas para falhas de infraestrutura do store de agendamentos.

A hierarquia espelha as categorias de falha que o core precisa distinguir
para escolher a mensagem exibida ao usuário. O core nunca inspeciona
exceções específicas do SDK fora de `scheduling.infra`.
"""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class AppointmentStoreError(InfrastructureError):
    """Falha genérica em operação remota de agendamento (create/update/delete)."""


class StorePermissionDeniedError(AppointmentStoreError):
    """Regras do store recusaram a operação para o usuário atual."""


class StoreUnauthenticatedError(AppointmentStoreError):
    """Credencial ausente ou expirada no momento da escrita."""


class StoreUnavailableError(AppointmentStoreError):
    """Rede ou serviço indisponível (timeout, offline, 503)."""


class FirestoreUnavailableError(StoreUnavailableError):
    """Falha de indisponibilidade ao acessar Firestore."""


class AppointmentNotFoundError(AppointmentStoreError):
    """Documento de agendamento não existe mais no store."""


class StoreInternalError(AppointmentStoreError):
    """Erro interno do serviço remoto (5xx não transitório)."""
