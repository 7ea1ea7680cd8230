"""Configuração de logging estruturado (JSON) do core de agendamento.

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="medflow_scheduling")
    logger = get_logger(__name__)
    logger.info("appointment_created", extra={"document_id": "abc123"})
"""

from config.logging.config import configure_logging, get_logger, log_fallback
from config.logging.filters import ContextFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "ContextFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "log_fallback",
]
