"""Protocolos (contratos) do core de agendamento."""

from scheduling.protocols.appointment_store import (
    DELETE_FIELD,
    AppointmentStoreProtocol,
    ErrorCallback,
    SnapshotCallback,
    StoreDocument,
    SubscriptionHandle,
)
from scheduling.protocols.notifier import NotifierProtocol

__all__ = [
    "DELETE_FIELD",
    "AppointmentStoreProtocol",
    "ErrorCallback",
    "NotifierProtocol",
    "SnapshotCallback",
    "StoreDocument",
    "SubscriptionHandle",
]
