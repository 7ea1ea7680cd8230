"""Stores: implementações concretas de persistência de agendamentos.

Módulos disponíveis:
    - firestore_appointment_store: Store de agendamentos usando Firestore
    - memory_appointment_store: Store em memória para desenvolvimento/testes
"""

from __future__ import annotations

from scheduling.infra.stores.firestore_appointment_store import (
    APPOINTMENTS_COLLECTION,
    FirestoreAppointmentStore,
    FirestoreSubscription,
)
from scheduling.infra.stores.memory_appointment_store import (
    MemoryAppointmentStore,
    MemorySubscription,
)

__all__ = [
    # Firestore
    "APPOINTMENTS_COLLECTION",
    "FirestoreAppointmentStore",
    "FirestoreSubscription",
    # Memory
    "MemoryAppointmentStore",
    "MemorySubscription",
]
