"""Formatters de logging estruturado.

Todo log do core de agendamento sai em JSON com os campos abaixo.
Dados de paciente (nome, CNP, telefone, email) nunca entram no payload;
apenas identificadores técnicos (display_id, document_id, gesture_id).
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Ordem fixa para que o formato seja estável entre execuções
REQUIRED_LOG_FIELDS: tuple[str, ...] = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
    "environment",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {
            "asctime": "2026-10-18 10:30:00,120",
            "level": "INFO",
            "logger": "scheduling.services.reschedule_coordinator",
            "message": "reschedule_committed",
            "correlation_id": "gst_4f1c...",
            "service": "medflow_scheduling",
            "environment": "development",
            "document_id": "a1B2c3"
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)
    return JsonFormatter(format_string, rename_fields=FIELD_RENAME_MAP)
