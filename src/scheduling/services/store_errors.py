"""Tradução de falhas do store para mensagens exibidas ao usuário."""

from __future__ import annotations

from scheduling.constants.messages import (
    NETWORK_ERROR,
    NOT_FOUND_ERROR,
    PERMISSION_ERROR,
    SERVER_ERROR,
    SESSION_EXPIRED_ERROR,
    UNKNOWN_ERROR,
)
from utils.errors import (
    AppointmentNotFoundError,
    StoreInternalError,
    StorePermissionDeniedError,
    StoreUnauthenticatedError,
    StoreUnavailableError,
)

_MESSAGES: tuple[tuple[type[Exception], str], ...] = (
    (StorePermissionDeniedError, PERMISSION_ERROR),
    (StoreUnauthenticatedError, SESSION_EXPIRED_ERROR),
    (StoreUnavailableError, NETWORK_ERROR),
    (StoreInternalError, SERVER_ERROR),
    (AppointmentNotFoundError, NOT_FOUND_ERROR),
    (TimeoutError, NETWORK_ERROR),
    (ConnectionError, NETWORK_ERROR),
)


def message_for_store_error(exc: BaseException, prefix: str | None = None) -> str:
    """Mensagem localizada para a falha; genérica quando a categoria é desconhecida."""
    message = next(
        (text for error_type, text in _MESSAGES if isinstance(exc, error_type)),
        UNKNOWN_ERROR,
    )
    return f"{prefix} {message}" if prefix else message


__all__ = ["message_for_store_error"]
