"""Configuração do pytest para o MedFlow Scheduling."""

import sys
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from config.settings import CalendarSettings  # noqa: E402
from scheduling.domain import CalendarView, SessionContext, VisibleRange  # noqa: E402
from tests.fakes.factories import OWNER_ID, WEEK_START  # noqa: E402
from tests.fakes.fake_appointment_store import FakeAppointmentStore  # noqa: E402
from tests.fakes.fake_notifier import CollectingNotifier  # noqa: E402


@pytest.fixture
def session() -> SessionContext:
    return SessionContext(owner_id=OWNER_ID, display_name="Dr. Ionescu")


@pytest.fixture
def anonymous_session() -> SessionContext:
    return SessionContext.anonymous()


@pytest.fixture
def week() -> VisibleRange:
    return VisibleRange.for_view(WEEK_START, CalendarView.WEEK)


@pytest.fixture
def calendar_settings() -> CalendarSettings:
    return CalendarSettings()


@pytest.fixture
def store() -> FakeAppointmentStore:
    return FakeAppointmentStore()


@pytest.fixture
def notifier() -> CollectingNotifier:
    return CollectingNotifier()
