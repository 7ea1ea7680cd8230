"""Testes do reducer de cache e da assinatura do intervalo visível."""

from __future__ import annotations

import asyncio
import threading
from datetime import date, datetime

import pytest

from scheduling.domain import CalendarView, VisibleRange
from scheduling.services.appointment_cache import (
    AppointmentCache,
    CacheCleared,
    CacheSource,
    CacheState,
    EventRemoved,
    EventRestored,
    EventUpserted,
    ProvisionalAdded,
    ProvisionalConfirmed,
    ProvisionalDiscarded,
    SnapshotReceived,
    SubscriptionFailed,
    reduce_cache,
)
from tests.fakes.factories import OWNER_ID, WEEK_START, make_document, make_event
from utils.errors import FirestoreUnavailableError


def _state(*events, source: CacheSource = CacheSource.LIVE) -> CacheState:
    return CacheState(events=tuple(events), source=source)


class TestReduceCache:
    def test_snapshot_replaces_remote_events(self) -> None:
        state = _state(make_event("event_old", document_id="doc-gone"))
        incoming = (make_event("event_new", document_id="doc-2"),)

        result = reduce_cache(state, SnapshotReceived(events=incoming))

        assert [e.document_id for e in result.events] == ["doc-2"]
        assert result.source is CacheSource.LIVE

    def test_snapshot_keeps_display_id_per_document(self) -> None:
        state = _state(make_event("event_stable", document_id="doc-1"))
        fresh = make_event("event_fresh", document_id="doc-1", start_time="11:00", end_time="12:00")
        incoming = (fresh,)

        result = reduce_cache(state, SnapshotReceived(events=incoming))

        assert result.events[0].display_id == "event_stable"
        assert result.events[0].start_time == "11:00"

    def test_snapshot_keeps_unconfirmed_provisional(self) -> None:
        provisional = make_event("event_tmp", document_id=None, provisional=True)
        state = _state(provisional)

        result = reduce_cache(state, SnapshotReceived(events=()))

        assert result.events == (provisional,)

    def test_snapshot_absorbs_confirmed_provisional(self) -> None:
        confirmed = make_event("event_tmp", document_id="doc-9", provisional=True)
        remote = make_event("event_remote", document_id="doc-9")

        result = reduce_cache(_state(confirmed), SnapshotReceived(events=(remote,)))

        assert len(result.events) == 1
        assert result.events[0].display_id == "event_tmp"
        assert not result.events[0].provisional

    def test_subscription_failed_uses_placeholders(self) -> None:
        provisional = make_event("event_tmp", document_id=None, provisional=True)
        placeholder = make_event("placeholder_1", document_id=None)
        state = _state(make_event("event_live"), provisional)

        result = reduce_cache(state, SubscriptionFailed(placeholders=(placeholder,)))

        assert result.events == (placeholder, provisional)
        assert result.source is CacheSource.PLACEHOLDER

    def test_upsert_replaces_or_appends(self) -> None:
        original = make_event("a")
        moved = original.model_copy(update={"start_time": "11:00", "end_time": "12:00"})
        state = reduce_cache(_state(original), EventUpserted(event=moved))
        assert state.events == (moved,)

        state = reduce_cache(state, ProvisionalAdded(event=make_event("b", document_id=None)))
        assert [e.display_id for e in state.events] == ["a", "b"]

    def test_restore_only_reinserts_when_asked(self) -> None:
        snapshot = make_event("a")
        assert reduce_cache(_state(), EventRestored(snapshot=snapshot)).events == ()
        restored = reduce_cache(_state(), EventRestored(snapshot=snapshot, reinsert=True))
        assert restored.events == (snapshot,)

    def test_confirm_sets_document_id(self) -> None:
        provisional = make_event("event_tmp", document_id=None, provisional=True)

        result = reduce_cache(_state(provisional), ProvisionalConfirmed("event_tmp", "doc-7"))

        assert result.events[0].document_id == "doc-7"
        assert result.events[0].display_id == "event_tmp"

    def test_confirm_after_snapshot_merges_into_remote(self) -> None:
        provisional = make_event("event_tmp", document_id=None, provisional=True)
        remote = make_event("event_remote", document_id="doc-7")

        state = _state(remote, provisional)

        result = reduce_cache(state, ProvisionalConfirmed("event_tmp", "doc-7"))

        assert len(result.events) == 1
        assert result.events[0].display_id == "event_tmp"
        assert result.events[0].document_id == "doc-7"
        assert not result.events[0].provisional

    def test_confirm_unknown_is_noop(self) -> None:
        state = _state(make_event("a"))
        assert reduce_cache(state, ProvisionalConfirmed("missing", "doc-1")) is state

    def test_remove_discard_and_clear(self) -> None:
        state = _state(make_event("a"), make_event("b", document_id=None, provisional=True))

        state = reduce_cache(state, EventRemoved("a"))
        assert [e.display_id for e in state.events] == ["b"]
        state = reduce_cache(state, ProvisionalDiscarded("b"))
        assert state.events == ()
        assert reduce_cache(state, CacheCleared()) == CacheState()

    def test_unknown_action(self) -> None:
        with pytest.raises(TypeError):
            reduce_cache(CacheState(), object())  # type: ignore[arg-type]

    def test_reducer_does_not_mutate_input(self) -> None:
        state = _state(make_event("a"))
        reduce_cache(state, EventRemoved("a"))
        assert len(state.events) == 1


class TestAppointmentCacheSubscription:
    def test_subscribe_passes_owner_and_aware_range(self, store, week: VisibleRange) -> None:
        cache = AppointmentCache(store)

        cache.subscribe(OWNER_ID, week)

        subscription = store.last_subscription
        assert subscription.owner_id == OWNER_ID
        assert subscription.range_start.tzinfo is not None
        assert subscription.range_start.replace(tzinfo=None) == datetime(2025, 3, 10)
        assert subscription.range_end.date() == datetime(2025, 3, 16).date()
        assert cache.is_subscribed

    def test_snapshot_populates_cache(self, store, week: VisibleRange) -> None:
        changes: list[CacheState] = []
        cache = AppointmentCache(store, on_change=changes.append)
        cache.subscribe(OWNER_ID, week)

        store.emit([make_document("doc-1", datetime(2025, 3, 10, 9, 0))])

        assert [e.document_id for e in cache.events] == ["doc-1"]
        assert cache.state.source is CacheSource.LIVE
        assert len(changes) == 1

    def test_resubscribe_ignores_stale_callbacks(self, store, week: VisibleRange) -> None:
        cache = AppointmentCache(store)
        cache.subscribe(OWNER_ID, week)
        first = store.last_subscription
        cache.subscribe(OWNER_ID, week.next())

        first.on_snapshot([make_document("doc-old", datetime(2025, 3, 10, 9, 0))])

        assert not first.active
        assert cache.events == ()

    def test_unsubscribe_stops_updates(self, store, week: VisibleRange) -> None:
        cache = AppointmentCache(store)
        cache.subscribe(OWNER_ID, week)
        subscription = store.last_subscription

        cache.unsubscribe()
        subscription.on_snapshot([make_document("doc-1", datetime(2025, 3, 10, 9, 0))])

        assert not subscription.active
        assert not cache.is_subscribed
        assert cache.events == ()

    def test_subscription_error_falls_back_to_placeholders(self, store) -> None:
        cache = AppointmentCache(store)
        cache.subscribe(OWNER_ID, VisibleRange.for_view(date(2025, 3, 12), CalendarView.DAY))

        store.fail_subscription(FirestoreUnavailableError("offline"))

        assert cache.state.source is CacheSource.PLACEHOLDER
        assert len(cache.events) == 5
        assert min(e.event_date for e in cache.events) == WEEK_START

    def test_subscribe_raising_falls_back(self, store, week: VisibleRange) -> None:
        store.subscribe_error = FirestoreUnavailableError("offline")
        cache = AppointmentCache(store)

        cache.subscribe(OWNER_ID, week)

        assert cache.state.source is CacheSource.PLACEHOLDER

    @pytest.mark.asyncio
    async def test_snapshot_from_sdk_thread_is_marshalled_to_loop(
        self, store, week: VisibleRange
    ) -> None:
        cache = AppointmentCache(store)
        cache.subscribe(OWNER_ID, week)
        document = make_document("doc-1", datetime(2025, 3, 10, 9, 0))

        worker = threading.Thread(target=store.emit, args=([document],))
        worker.start()
        worker.join()
        # callback agendado via call_soon_threadsafe ainda não rodou
        assert cache.events == ()

        await asyncio.sleep(0)

        assert [e.document_id for e in cache.events] == ["doc-1"]
