"""Factory do cliente Firestore usado pelo store de agendamentos."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from config.settings import get_base_settings, get_firestore_settings

if TYPE_CHECKING:
    from google.cloud.firestore import Client as FirestoreClient

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Firestore Client Factory
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def create_firestore_client() -> FirestoreClient:
    """Cria cliente Firestore (singleton).

    FIRESTORE_PROJECT_ID tem precedência; sem ele vale o projeto GCP das
    settings base e, por último, a descoberta automática do SDK.

    Returns:
        Cliente Firestore
    """
    from google.cloud import firestore

    project_id = get_firestore_settings().resolve_project(get_base_settings().gcp_project) or None
    client = firestore.Client(project=project_id)
    logger.info("firestore_client_created", extra={"project": project_id})
    return client


__all__ = ["create_firestore_client"]
