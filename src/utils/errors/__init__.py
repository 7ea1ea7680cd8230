"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AppointmentNotFoundError,
    AppointmentStoreError,
    FirestoreUnavailableError,
    InfrastructureError,
    StoreInternalError,
    StorePermissionDeniedError,
    StoreUnauthenticatedError,
    StoreUnavailableError,
)

__all__ = [
    "AppointmentNotFoundError",
    "AppointmentStoreError",
    "FirestoreUnavailableError",
    "InfrastructureError",
    "StoreInternalError",
    "StorePermissionDeniedError",
    "StoreUnauthenticatedError",
    "StoreUnavailableError",
]
