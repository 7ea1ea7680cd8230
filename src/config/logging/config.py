"""Configuração centralizada de logging.

Uso:
    from config.logging import configure_logging, get_logger

    # Uma vez, no bootstrap (scheduling.bootstrap.initialize_app)
    configure_logging(level="INFO", service_name="medflow_scheduling")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("reschedule_committed", extra={"document_id": "abc123"})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import ContextFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "medflow_scheduling"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    environment: str = "development",
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON estruturado no root logger.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        environment: Ambiente de execução, repassado ao filter.
        correlation_id_getter: Função opcional que retorna o id do gesto
            ou operação corrente.

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(ContextFilter(service_name, environment, correlation_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substitui handlers existentes para evitar duplicação
    root.handlers = [handler]


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo especificado."""
    return logging.getLogger(name)


def log_fallback(
    logger: logging.Logger,
    component: str,
    reason: str | None = None,
    **fields: object,
) -> None:
    """Registra que um fallback determinístico foi acionado.

    Usado, por exemplo, quando a assinatura do store falha e o calendário
    passa a exibir o conjunto estático de eventos.

    Args:
        logger: Logger instance.
        component: Componente que aplicou o fallback.
        reason: Motivo curto (ex: "subscription_failed"), sem PII.
        **fields: Campos técnicos adicionais (ids, contagens).
    """
    extra: dict[str, object] = {"fallback_used": True, "component": component}
    if reason:
        extra["reason"] = reason
    extra.update(fields)
    logger.warning("Fallback applied for %s", component, extra=extra)
