"""Fake mínimo do cliente Firestore (collection/where/order_by/on_snapshot)."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any


@dataclass
class FakeSnapshotDoc:
    id: str
    data: dict[str, Any] | None

    def to_dict(self) -> dict[str, Any] | None:
        return self.data


@dataclass
class FakeWatch:
    callback: Any
    unsubscribed: int = 0

    def unsubscribe(self) -> None:
        self.unsubscribed += 1


@dataclass
class FakeDocumentRef:
    collection: FakeCollection
    id: str

    def update(self, fields: dict[str, Any]) -> None:
        self.collection.client.maybe_fail("update")
        self.collection.client.operations.append(("update", self.id, fields))

    def delete(self) -> None:
        self.collection.client.maybe_fail("delete")
        self.collection.client.operations.append(("delete", self.id, None))


@dataclass
class FakeQuery:
    collection: FakeCollection
    filters: list[tuple[str, str, Any]] = field(default_factory=list)
    order: list[str] = field(default_factory=list)

    def where(self, *, filter: Any) -> FakeQuery:  # noqa: A002
        self.filters.append((filter.field_path, filter.op_string, filter.value))
        return self

    def order_by(self, field_path: str) -> FakeQuery:
        self.order.append(field_path)
        return self

    def on_snapshot(self, callback: Any) -> FakeWatch:
        self.collection.client.maybe_fail("subscribe")
        watch = FakeWatch(callback)
        self.collection.client.watches.append((self, watch))
        return watch


@dataclass
class FakeCollection:
    client: FakeFirestoreClient
    name: str

    def where(self, *, filter: Any) -> FakeQuery:  # noqa: A002
        return FakeQuery(self).where(filter=filter)

    def add(self, data: dict[str, Any]) -> tuple[Any, FakeDocumentRef]:
        self.client.maybe_fail("create")
        ref = FakeDocumentRef(self, f"fs-{next(self.client.ids)}")
        self.client.operations.append(("add", ref.id, data))
        return None, ref

    def document(self, document_id: str) -> FakeDocumentRef:
        return FakeDocumentRef(self, document_id)


class FakeFirestoreClient:
    """Registra operações; `failures[op]` faz a operação levantar."""

    def __init__(self) -> None:
        self.collections: list[str] = []
        self.operations: list[tuple[str, str, Any]] = []
        self.watches: list[tuple[FakeQuery, FakeWatch]] = []
        self.failures: dict[str, Exception] = {}
        self.ids = itertools.count(1)

    def collection(self, name: str) -> FakeCollection:
        self.collections.append(name)
        return FakeCollection(self, name)

    def maybe_fail(self, operation: str) -> None:
        if operation in self.failures:
            raise self.failures[operation]
