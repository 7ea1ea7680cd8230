"""Testes do FirestoreAppointmentStore com cliente fake."""

from __future__ import annotations

from datetime import datetime

import pytest
from google.api_core import exceptions as api_exceptions
from google.cloud import firestore
from google.cloud.firestore import SERVER_TIMESTAMP

from scheduling.infra.stores import FirestoreAppointmentStore
from scheduling.infra.stores.firestore_appointment_store import _translate_error
from scheduling.protocols import DELETE_FIELD, StoreDocument
from tests.fakes.factories import OWNER_ID
from tests.fakes.fake_firestore import FakeFirestoreClient, FakeSnapshotDoc
from utils.errors import (
    AppointmentNotFoundError,
    AppointmentStoreError,
    FirestoreUnavailableError,
    StoreInternalError,
    StorePermissionDeniedError,
    StoreUnauthenticatedError,
)

RANGE_START = datetime(2025, 3, 10).astimezone()
RANGE_END = datetime(2025, 3, 16, 23, 59, 59).astimezone()


def _noop(_value: object) -> None:
    return None


def _subscribe(store, on_snapshot=_noop, on_error=_noop):
    return store.subscribe(OWNER_ID, RANGE_START, RANGE_END, on_snapshot, on_error)


@pytest.fixture
def client() -> FakeFirestoreClient:
    return FakeFirestoreClient()


@pytest.fixture
def firestore_store(client: FakeFirestoreClient) -> FirestoreAppointmentStore:
    return FirestoreAppointmentStore(client, collection="appointments_test")


class TestSubscribe:
    def test_builds_owner_range_query(self, firestore_store, client) -> None:
        _subscribe(firestore_store)

        [(query, _watch)] = client.watches
        assert client.collections == ["appointments_test"]
        assert query.filters == [
            ("userId", "==", OWNER_ID),
            ("dateTime", ">=", RANGE_START),
            ("dateTime", "<=", RANGE_END),
        ]
        assert query.order == ["dateTime"]

    def test_forwards_snapshots(self, firestore_store, client) -> None:
        received: list[list[StoreDocument]] = []
        _subscribe(firestore_store, on_snapshot=received.append)
        [(_query, watch)] = client.watches

        watch.callback(
            [
                FakeSnapshotDoc("doc-1", {"patientName": "Marin Ion"}),
                FakeSnapshotDoc("doc-2", None),
            ],
            [],
            None,
        )

        assert received == [[
            StoreDocument("doc-1", {"patientName": "Marin Ion"}),
            StoreDocument("doc-2", {}),
        ]]

    def test_conversion_failure_goes_to_on_error(self, firestore_store, client) -> None:
        errors: list[Exception] = []
        _subscribe(firestore_store, on_error=errors.append)
        [(_query, watch)] = client.watches

        class _Broken:
            id = "doc-broken"

            def to_dict(self):
                raise api_exceptions.PermissionDenied("rules")

        watch.callback([_Broken()], [], None)

        assert len(errors) == 1
        assert isinstance(errors[0], StorePermissionDeniedError)

    def test_setup_failure_is_translated(self, firestore_store, client) -> None:
        client.failures["subscribe"] = api_exceptions.Unauthenticated("token expired")

        with pytest.raises(StoreUnauthenticatedError):
            _subscribe(firestore_store)

    def test_unsubscribe_is_idempotent(self, firestore_store, client) -> None:
        handle = _subscribe(firestore_store)
        [(_query, watch)] = client.watches

        handle.unsubscribe()
        handle.unsubscribe()

        assert watch.unsubscribed == 1


class TestWrites:
    @pytest.mark.asyncio
    async def test_create_adds_server_timestamps(self, firestore_store, client) -> None:
        document_id = await firestore_store.create({"patientName": "Marin Ion", "userId": OWNER_ID})

        assert document_id == "fs-1"
        [(operation, ref_id, data)] = client.operations
        assert (operation, ref_id) == ("add", "fs-1")
        assert data["patientName"] == "Marin Ion"
        assert data["createdAt"] is SERVER_TIMESTAMP
        assert data["updatedAt"] is SERVER_TIMESTAMP

    @pytest.mark.asyncio
    async def test_update_touches_updated_at(self, firestore_store, client) -> None:
        moved = datetime(2025, 3, 12, 14, 0).astimezone()

        await firestore_store.update("doc-1", {"dateTime": moved})

        [(operation, ref_id, fields)] = client.operations
        assert (operation, ref_id) == ("update", "doc-1")
        assert fields == {"dateTime": moved, "updatedAt": SERVER_TIMESTAMP}

    @pytest.mark.asyncio
    async def test_update_translates_field_deletion(self, firestore_store, client) -> None:
        await firestore_store.update("doc-1", {"patientEmail": DELETE_FIELD, "notes": ""})

        [(_, _, fields)] = client.operations
        assert fields["patientEmail"] is firestore.DELETE_FIELD
        assert fields["notes"] == ""

    @pytest.mark.asyncio
    async def test_delete(self, firestore_store, client) -> None:
        await firestore_store.delete("doc-1")
        assert client.operations == [("delete", "doc-1", None)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("operation", "failure", "expected"),
        [
            ("update", api_exceptions.NotFound("gone"), AppointmentNotFoundError),
            ("delete", api_exceptions.ServiceUnavailable("offline"), FirestoreUnavailableError),
            ("create", api_exceptions.PermissionDenied("rules"), StorePermissionDeniedError),
        ],
    )
    async def test_write_failures_are_translated(
        self, firestore_store, client, operation, failure, expected
    ) -> None:
        client.failures[operation] = failure

        with pytest.raises(expected):
            if operation == "create":
                await firestore_store.create({"patientName": "Marin Ion"})
            elif operation == "update":
                await firestore_store.update("doc-1", {"duration": 30})
            else:
                await firestore_store.delete("doc-1")


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (api_exceptions.PermissionDenied("x"), StorePermissionDeniedError),
        (api_exceptions.Unauthenticated("x"), StoreUnauthenticatedError),
        (api_exceptions.NotFound("x"), AppointmentNotFoundError),
        (api_exceptions.DeadlineExceeded("x"), FirestoreUnavailableError),
        (api_exceptions.RetryError("x", None), FirestoreUnavailableError),
        (TimeoutError("x"), FirestoreUnavailableError),
        (api_exceptions.InternalServerError("x"), StoreInternalError),
        (ValueError("x"), AppointmentStoreError),
    ],
)
def test_translate_error(exc: Exception, expected: type[Exception]) -> None:
    translated = _translate_error(exc)
    assert type(translated) is expected


def test_translate_error_keeps_domain_errors() -> None:
    original = StoreInternalError("already translated")
    assert _translate_error(original) is original
