"""Coleção e projeto do Firestore que guardam os agendamentos."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class FirestoreSettings:
    # Vazio: usa o projeto de BaseSettings.gcp_project
    project_id: str = ""
    collection_appointments: str = "appointments"

    def resolve_project(self, gcp_project: str) -> str:
        return self.project_id or gcp_project

    def validate(self, gcp_project: str) -> list[str]:
        errors: list[str] = []
        if not self.resolve_project(gcp_project):
            errors.append("FIRESTORE_PROJECT_ID ou GCP_PROJECT deve estar configurado")
        if "/" in self.collection_appointments or not self.collection_appointments.strip():
            errors.append(
                f"FIRESTORE_COLLECTION_APPOINTMENTS inválida: {self.collection_appointments!r}"
            )
        return errors


@lru_cache(maxsize=1)
def get_firestore_settings() -> FirestoreSettings:
    return FirestoreSettings(
        project_id=os.getenv("FIRESTORE_PROJECT_ID", "").strip(),
        collection_appointments=os.getenv(
            "FIRESTORE_COLLECTION_APPOINTMENTS", "appointments"
        ).strip(),
    )
