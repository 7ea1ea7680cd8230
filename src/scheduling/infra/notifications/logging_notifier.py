"""Notificador padrão: registra as mensagens ao usuário em log estruturado.

Usado quando não há camada de UI conectada (CLI, jobs, testes manuais).
"""

from __future__ import annotations

import logging

from scheduling.protocols.notifier import NotifierProtocol

logger = logging.getLogger(__name__)


class LoggingNotifier(NotifierProtocol):
    """Encaminha notificações para o logger em vez de exibir toasts."""

    def __init__(self, target: logging.Logger | None = None) -> None:
        self._logger = target or logger

    def error(self, message: str) -> None:
        self._logger.warning(
            "user_notified",
            extra={"component": "notifier", "severity": "error", "user_message": message},
        )

    def info(self, message: str) -> None:
        self._logger.info(
            "user_notified",
            extra={"component": "notifier", "severity": "info", "user_message": message},
        )
