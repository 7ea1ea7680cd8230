"""Settings base do core de agendamento.

Ambiente, identidade do serviço e projeto GCP, compartilhados por
bootstrap, logging e pela validação de startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "test", "staging", "production"]

_ENVIRONMENT_ALIASES: dict[str, Environment] = {
    "dev": "development",
    "development": "development",
    "test": "test",
    "testing": "test",
    "stage": "staging",
    "staging": "staging",
    "prod": "production",
    "production": "production",
}
_STRICT_ENVIRONMENTS = frozenset({"staging", "production"})


@dataclass(frozen=True)
class BaseSettings:
    """Configurações base do serviço.

    Attributes:
        environment: development|test|staging|production
        service_name: Nome do serviço nos logs
        log_level: Nível do root logger
        gcp_project: Projeto GCP que hospeda o Firestore
    """

    environment: Environment = "development"
    service_name: str = "medflow_scheduling"
    log_level: str = "INFO"
    gcp_project: str = ""

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_strict(self) -> bool:
        """True quando settings inválidas devem impedir o boot."""
        return self.environment in _STRICT_ENVIRONMENTS

    @property
    def allows_memory_store(self) -> bool:
        return self.environment in ("development", "test")

    def validate(self) -> list[str]:
        """Retorna lista de erros (vazia = OK)."""
        errors: list[str] = []
        if self.environment not in _ENVIRONMENT_ALIASES.values():
            errors.append(f"ENVIRONMENT inválido: {self.environment}")
        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")
        if self.log_level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            errors.append(f"LOG_LEVEL inválido: {self.log_level}")
        return errors


def _parse_environment(value: str) -> Environment:
    """Normaliza aliases (prod, stage, dev); desconhecido vira development."""
    return _ENVIRONMENT_ALIASES.get(value.strip().lower(), "development")


def _load_base_from_env() -> BaseSettings:
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "medflow_scheduling"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        gcp_project=(
            os.getenv("GCP_PROJECT", "")
            or os.getenv("GOOGLE_CLOUD_PROJECT", "")
            or os.getenv("GCLOUD_PROJECT", "")
        ),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()
