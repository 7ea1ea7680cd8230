"""Bootstrap do calendário: inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta implementações concretas aos protocolos.

Uso:
    from scheduling.bootstrap import initialize_app, build_scheduling_calendar

    # Na inicialização do serviço
    initialize_app()

    calendar = build_scheduling_calendar(SessionContext(owner_id=uid))
    calendar.open()
"""

from __future__ import annotations

import logging

from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_calendar_settings,
    get_firestore_settings,
)
from scheduling.bootstrap.dependencies import (
    build_scheduling_calendar,
    create_appointment_store,
    create_notifier,
)
from scheduling.observability import get_correlation_id

# Nome do serviço para logs
SERVICE_NAME = "medflow_scheduling"

# Nível de log padrão (pode ser sobrescrito por env)
DEFAULT_LOG_LEVEL = "INFO"

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa o serviço: logging estruturado JSON com correlation_id.

    Deve ser chamada uma vez no início do processo.
    """
    base = get_base_settings()

    configure_logging(
        level=base.log_level or DEFAULT_LOG_LEVEL,
        service_name=base.service_name or SERVICE_NAME,
        environment=base.environment,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app() -> None:
    """Inicializa para testes, com logging em nível DEBUG."""
    configure_logging(
        level="DEBUG",
        service_name=f"{SERVICE_NAME}_test",
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development`/`test` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    environment = base.environment
    strict_mode = base.is_strict
    errors: list[str] = [f"base: {error}" for error in base.validate()]

    calendar_settings = get_calendar_settings()
    calendar_errors = calendar_settings.validate_settings(is_development=not strict_mode)
    errors.extend(f"calendar: {error}" for error in calendar_errors)

    if calendar_settings.store_backend == "firestore":
        firestore_errors = get_firestore_settings().validate(base.gcp_project)
        errors.extend(f"firestore: {error}" for error in firestore_errors)

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


__all__ = [
    "DEFAULT_LOG_LEVEL",
    "SERVICE_NAME",
    "build_scheduling_calendar",
    "create_appointment_store",
    "create_notifier",
    "initialize_app",
    "initialize_test_app",
    "validate_runtime_settings",
]
