"""Filters de logging para injeção de contexto.

Campos injetados em cada record:
- correlation_id: id do gesto/operação em andamento (ContextVar)
- service: nome do serviço
- environment: ambiente de execução
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class ContextFilter(logging.Filter):
    """Enriquece records com service, environment e correlation_id.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        environment: Ambiente (development|staging|production).
        correlation_id_getter: Função que retorna o id da operação atual.
    """

    def __init__(
        self,
        service_name: str,
        environment: str = "development",
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._environment = environment
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        # correlation_id passado via `extra` tem precedência
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing or self._get_correlation_id()
        record.service = self._service_name
        record.environment = self._environment
        return True
