"""Testes da fachada SchedulingCalendar com store fake."""

from __future__ import annotations

import asyncio
from datetime import date, datetime, timedelta

import pytest

from fsm import RescheduleState
from scheduling.constants.messages import (
    APPOINTMENT_CREATED,
    APPOINTMENT_DELETED,
    APPOINTMENT_UPDATED,
    AUTH_REQUIRED_CREATE,
    AUTH_REQUIRED_MODIFY,
    CONFLICT_ERROR,
    CREATE_FAILED_PREFIX,
    DELETE_FAILED_PREFIX,
    INVALID_DATE,
    INVALID_TIME_FORMAT,
    NETWORK_ERROR,
    NOT_FOUND_ERROR,
    SAVE_PENDING_ERROR,
    TITLE_REQUIRED,
    UPDATE_FAILED_PREFIX,
)
from scheduling.domain import AppointmentDraft, CalendarView
from scheduling.protocols import DELETE_FIELD
from scheduling.services import SchedulingCalendar
from scheduling.services.appointment_cache import CacheSource
from tests.fakes.factories import OWNER_ID, WEEK_START, make_document
from tests.fakes.fake_appointment_store import FakeAppointmentStore
from utils.errors import FirestoreUnavailableError, StorePermissionDeniedError


def _draft(**overrides) -> AppointmentDraft:
    fields = {
        "patient_name": "Stanescu Andrei",
        "appointment_date": WEEK_START + timedelta(days=1),
        "start_time": "10:00",
        "duration_min": 30,
    }
    fields.update(overrides)
    return AppointmentDraft(**fields)


@pytest.fixture
def calendar(store, notifier, session, calendar_settings) -> SchedulingCalendar:
    return SchedulingCalendar(
        store=store,
        notifier=notifier,
        session=session,
        settings=calendar_settings,
        today=WEEK_START + timedelta(days=2),
    )


@pytest.fixture
def anonymous_calendar(
    store, notifier, anonymous_session, calendar_settings
) -> SchedulingCalendar:
    return SchedulingCalendar(
        store=store,
        notifier=notifier,
        session=anonymous_session,
        settings=calendar_settings,
        today=WEEK_START,
    )


@pytest.fixture
def opened(calendar: SchedulingCalendar, store) -> SchedulingCalendar:
    calendar.open()
    store.emit([
        make_document("doc-2", datetime(2025, 3, 12, 15, 0), patientName="Marin Ion"),
        make_document("doc-1", datetime(2025, 3, 10, 9, 0)),
    ])
    return calendar


def _display_id(calendar: SchedulingCalendar, document_id: str) -> str:
    return next(e.display_id for e in calendar.events if e.document_id == document_id)


class _GatedCreateStore(FakeAppointmentStore):
    """Segura `create` até o teste liberar."""

    def __init__(self) -> None:
        super().__init__()
        self.release = asyncio.Event()

    async def create(self, payload):
        await self.release.wait()
        return await super().create(payload)


class TestLifecycle:
    def test_open_subscribes_visible_week(self, calendar: SchedulingCalendar, store) -> None:
        assert calendar.visible_range.start == WEEK_START
        assert not calendar.is_open

        calendar.open()

        assert calendar.is_open
        assert store.last_subscription.owner_id == OWNER_ID
        assert store.last_subscription.range_start.date() == WEEK_START

    def test_unauthenticated_open_does_not_subscribe(
        self, anonymous_calendar: SchedulingCalendar, store
    ) -> None:
        anonymous_calendar.open()

        assert store.subscriptions == []
        assert anonymous_calendar.events == []
        assert not anonymous_calendar.cache.is_subscribed

    def test_close_tears_down_subscription(self, opened: SchedulingCalendar, store) -> None:
        opened.on_event_click(_display_id(opened, "doc-1"))

        opened.close()

        assert not store.last_subscription.active
        assert not opened.is_open
        assert opened.selected_event is None

    def test_range_change_resubscribes_only_when_changed(
        self, opened: SchedulingCalendar, store
    ) -> None:
        opened.change_range(opened.visible_range)
        assert len(store.subscriptions) == 1

        opened.next_range()
        assert len(store.subscriptions) == 2
        assert not store.subscriptions[0].active
        assert store.last_subscription.range_start.date() == date(2025, 3, 17)

        opened.change_view(CalendarView.DAY)
        assert opened.visible_range.view is CalendarView.DAY
        opened.previous_range()
        assert opened.visible_range.start == date(2025, 3, 16)
        assert len(store.subscriptions) == 4

    def test_range_change_while_closed_does_not_subscribe(
        self, calendar: SchedulingCalendar, store
    ) -> None:
        calendar.next_range()
        assert store.subscriptions == []

    def test_subscription_failure_shows_placeholders(
        self, calendar: SchedulingCalendar, store, notifier
    ) -> None:
        calendar.open()
        store.fail_subscription(FirestoreUnavailableError("offline"))

        assert calendar.cache.state.source is CacheSource.PLACEHOLDER
        assert len(calendar.events) == 5
        assert notifier.errors == []


class TestReading:
    def test_events_are_sorted(self, opened: SchedulingCalendar) -> None:
        assert [e.document_id for e in opened.events] == ["doc-1", "doc-2"]

    def test_layout(self, opened: SchedulingCalendar) -> None:
        layout = opened.layout()

        assert [item.column for item in layout] == [1, 3]
        assert layout[0].as_css() == {"top": "80px", "height": "80px"}
        assert layout[1].as_css() == {"top": "560px", "height": "80px"}
        assert layout[0].treatment.border_style == "solid"
        assert layout[1].label == "15:00 - 16:00"

    def test_on_event_click(self, opened: SchedulingCalendar) -> None:
        display_id = _display_id(opened, "doc-2")

        selected = opened.on_event_click(display_id)

        assert selected is not None
        assert selected.title == "Marin Ion"
        assert opened.selected_event == selected
        assert opened.on_event_click("missing") is None
        assert opened.selected_event is None


class TestDrag:
    @pytest.mark.asyncio
    async def test_on_drag_end_delegates(self, opened: SchedulingCalendar, store) -> None:
        display_id = _display_id(opened, "doc-1")

        outcome = await opened.on_drag_end(display_id, offset_px=320, target_day=2)

        assert outcome is not None
        assert outcome.state is RescheduleState.COMMITTED
        assert opened.cache.get(display_id).start_time == "12:00"
        assert store.writes[0][0] == "update"

    @pytest.mark.asyncio
    async def test_on_drag_end_unknown_event(self, opened: SchedulingCalendar) -> None:
        assert await opened.on_drag_end("missing", offset_px=80, target_day=1) is None

    @pytest.mark.asyncio
    async def test_event_with_pending_create_cannot_be_moved_or_edited(
        self, notifier, session, calendar_settings
    ) -> None:
        store = _GatedCreateStore()
        calendar = SchedulingCalendar(
            store=store,
            notifier=notifier,
            session=session,
            settings=calendar_settings,
            today=WEEK_START,
        )
        calendar.open()
        store.emit([])

        creating = asyncio.create_task(calendar.on_create(_draft()))
        await asyncio.sleep(0)
        [pending] = calendar.events
        assert pending.is_pending_create

        outcome = await calendar.on_drag_end(pending.display_id, offset_px=480, target_day=2)
        assert outcome is not None
        assert outcome.state is RescheduleState.REJECTED
        assert await calendar.on_update(pending.display_id, {"title": "Altcineva"}) is None
        assert calendar.cache.get(pending.display_id) == pending

        store.release.set()
        created = await creating

        assert created is not None
        assert (created.start_time, created.document_id) == ("10:00", "doc-new-1")
        assert [kind for kind, _ in store.writes] == ["create"]
        assert notifier.errors == [SAVE_PENDING_ERROR, SAVE_PENDING_ERROR]


class TestCreate:
    @pytest.mark.asyncio
    async def test_unauthenticated_create_makes_no_store_call(
        self, anonymous_calendar: SchedulingCalendar, store, notifier
    ) -> None:
        anonymous_calendar.open()

        result = await anonymous_calendar.on_create(_draft())

        assert result is None
        assert store.writes == []
        assert notifier.errors == [AUTH_REQUIRED_CREATE]
        assert anonymous_calendar.events == []

    @pytest.mark.asyncio
    async def test_invalid_draft(self, opened: SchedulingCalendar, store, notifier) -> None:
        assert await opened.on_create(_draft(patient_name="  ")) is None
        assert notifier.errors == [TITLE_REQUIRED]
        assert store.writes == []

    @pytest.mark.asyncio
    async def test_conflict(self, opened: SchedulingCalendar, store, notifier) -> None:
        draft = _draft(appointment_date=WEEK_START, start_time="09:30")

        assert await opened.on_create(draft) is None
        assert notifier.errors == [CONFLICT_ERROR]
        assert store.writes == []

    @pytest.mark.asyncio
    async def test_create_confirms_provisional(
        self, opened: SchedulingCalendar, store, notifier
    ) -> None:
        created = await opened.on_create(_draft())

        assert created is not None
        assert created.document_id == "doc-new-1"
        assert notifier.infos == [APPOINTMENT_CREATED]
        [(kind, payload)] = store.writes
        assert kind == "create"
        assert payload["userId"] == OWNER_ID
        assert "patientEmail" not in payload

        # snapshot remoto absorve o provisório mantendo o display_id
        store.emit([
            make_document("doc-1", datetime(2025, 3, 10, 9, 0)),
            make_document("doc-new-1", datetime(2025, 3, 11, 10, 0), duration=30),
        ])
        matching = [e for e in opened.events if e.document_id == "doc-new-1"]
        assert len(matching) == 1
        assert matching[0].display_id == created.display_id
        assert not matching[0].provisional

    @pytest.mark.asyncio
    async def test_failed_create_discards_provisional(
        self, opened: SchedulingCalendar, store, notifier
    ) -> None:
        store.fail_with["create"] = FirestoreUnavailableError("offline")

        assert await opened.on_create(_draft()) is None
        assert len(opened.events) == 2
        assert notifier.errors == [f"{CREATE_FAILED_PREFIX} {NETWORK_ERROR}"]

    @pytest.mark.asyncio
    async def test_create_resolving_after_close(
        self, opened: SchedulingCalendar, store, notifier
    ) -> None:
        opened.close()

        created = await opened.on_create(_draft())

        assert created is not None
        assert created.document_id == "doc-new-1"
        assert notifier.infos == []


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_persists_changes(
        self, opened: SchedulingCalendar, store, notifier
    ) -> None:
        display_id = _display_id(opened, "doc-1")

        updated = await opened.on_update(
            display_id,
            {"title": "Popescu Maria Elena", "end_time": "10:30", "document_id": "hijack"},
        )

        assert updated is not None
        assert updated.document_id == "doc-1"
        assert opened.cache.get(display_id).title == "Popescu Maria Elena"
        [(kind, (document_id, payload))] = store.writes
        assert (kind, document_id) == ("update", "doc-1")
        assert payload["patientName"] == "Popescu Maria Elena"
        assert payload["duration"] == 90
        assert notifier.infos == [APPOINTMENT_UPDATED]

    @pytest.mark.asyncio
    async def test_update_moves_day_with_date(self, opened: SchedulingCalendar) -> None:
        display_id = _display_id(opened, "doc-1")

        updated = await opened.on_update(display_id, {"event_date": "2025-03-14"})

        assert updated is not None
        assert (updated.day, updated.event_date) == (5, date(2025, 3, 14))

    @pytest.mark.asyncio
    async def test_failed_update_restores_original(
        self, opened: SchedulingCalendar, store, notifier
    ) -> None:
        display_id = _display_id(opened, "doc-1")
        original = opened.cache.get(display_id)
        store.fail_with["update"] = StorePermissionDeniedError("denied")

        assert await opened.on_update(display_id, {"title": "Altcineva"}) is None
        assert opened.cache.get(display_id) == original
        assert notifier.errors[0].startswith(UPDATE_FAILED_PREFIX)

    @pytest.mark.asyncio
    async def test_invalid_update(self, opened: SchedulingCalendar, store, notifier) -> None:
        display_id = _display_id(opened, "doc-1")

        assert await opened.on_update(display_id, {"title": ""}) is None
        assert notifier.errors == [TITLE_REQUIRED]
        assert store.writes == []

    @pytest.mark.asyncio
    async def test_malformed_date_is_reported(
        self, opened: SchedulingCalendar, store, notifier
    ) -> None:
        display_id = _display_id(opened, "doc-1")
        original = opened.cache.get(display_id)

        assert await opened.on_update(display_id, {"event_date": "2025-13-40"}) is None
        assert await opened.on_update(display_id, {"event_date": 20250314}) is None

        assert notifier.errors == [INVALID_DATE, INVALID_DATE]
        assert opened.cache.get(display_id) == original
        assert store.writes == []

    @pytest.mark.asyncio
    async def test_non_string_time_is_reported(
        self, opened: SchedulingCalendar, store, notifier
    ) -> None:
        display_id = _display_id(opened, "doc-1")

        assert await opened.on_update(display_id, {"start_time": 9}) is None
        assert await opened.on_update(display_id, {"title": 42}) is None

        assert notifier.errors == [INVALID_TIME_FORMAT, TITLE_REQUIRED]
        assert store.writes == []

    @pytest.mark.asyncio
    async def test_unpadded_time_is_normalized(self, opened: SchedulingCalendar, store) -> None:
        display_id = _display_id(opened, "doc-1")

        updated = await opened.on_update(display_id, {"start_time": "9:30"})

        assert updated is not None
        assert (updated.start_time, updated.end_time) == ("09:30", "10:00")
        [(_, (_, payload))] = store.writes
        assert payload["duration"] == 30

    @pytest.mark.asyncio
    async def test_clearing_patient_email_reaches_store(
        self, opened: SchedulingCalendar, store
    ) -> None:
        display_id = _display_id(opened, "doc-1")

        updated = await opened.on_update(display_id, {"patient_email": ""})

        assert updated is not None
        [(_, (_, payload))] = store.writes
        assert payload["patientEmail"] is DELETE_FIELD

    @pytest.mark.asyncio
    async def test_update_missing_event(self, opened: SchedulingCalendar, notifier) -> None:
        assert await opened.on_update("missing", {"title": "x"}) is None
        assert notifier.errors == [NOT_FOUND_ERROR]

    @pytest.mark.asyncio
    async def test_update_requires_session(
        self, anonymous_calendar: SchedulingCalendar, notifier
    ) -> None:
        assert await anonymous_calendar.on_update("event_1", {"title": "x"}) is None
        assert notifier.errors == [AUTH_REQUIRED_MODIFY]


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete(self, opened: SchedulingCalendar, store, notifier) -> None:
        display_id = _display_id(opened, "doc-1")
        opened.on_event_click(display_id)

        assert await opened.on_delete(display_id) is True
        assert opened.cache.get(display_id) is None
        assert opened.selected_event is None
        assert store.writes == [("delete", "doc-1")]
        assert notifier.infos == [APPOINTMENT_DELETED]

    @pytest.mark.asyncio
    async def test_failed_delete_reinserts(
        self, opened: SchedulingCalendar, store, notifier
    ) -> None:
        display_id = _display_id(opened, "doc-1")
        store.fail_with["delete"] = FirestoreUnavailableError("offline")

        assert await opened.on_delete(display_id) is False
        assert opened.cache.get(display_id) is not None
        assert notifier.errors == [f"{DELETE_FAILED_PREFIX} {NETWORK_ERROR}"]

    @pytest.mark.asyncio
    async def test_delete_missing(self, opened: SchedulingCalendar, store) -> None:
        assert await opened.on_delete("missing") is False
        assert store.writes == []
