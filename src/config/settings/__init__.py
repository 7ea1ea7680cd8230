"""Agregador de settings do MedFlow Scheduling.

Re-exporta todas as settings e funções de cada módulo.
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.calendar import (
    CalendarSettings,
    DefaultView,
    StoreBackend,
    get_calendar_settings,
)
from config.settings.infra import (
    FirestoreSettings,
    get_firestore_settings,
)

__all__ = [
    "BaseSettings",
    "CalendarSettings",
    "DefaultView",
    "Environment",
    "FirestoreSettings",
    "StoreBackend",
    "get_base_settings",
    "get_calendar_settings",
    "get_firestore_settings",
]
