"""Document store backed by SQLAlchemy.

Documents are JSON objects addressed by ``(collection, document_id)``. The
store offers the create/get/update/query/subscribe primitives consumed by the
use cases, a transaction primitive for multi-document writes and a strictly
monotonic server timestamp. Every call runs the synchronous SQLAlchemy work
in a worker thread and is bounded by the configured timeout.
"""

from __future__ import annotations

import contextlib
import copy
import logging
import threading
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Protocol, TypeVar
from uuid import uuid4

import anyio
from anyio import to_thread
from sqlalchemy import Engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from cargomatch.domain.errors import (
    NotFoundError,
    PersistenceError,
    PersistenceTimeoutError,
)
from cargomatch.infrastructure.database import build_session_factory, initialize_database
from cargomatch.infrastructure.models import DocumentModel
from cargomatch.infrastructure.realtime import ListenerRegistry, QueryListener, Snapshot
from cargomatch.utils import now_utc, to_timestamp_string

logger = logging.getLogger(__name__)

T = TypeVar("T")

_OPERATORS = ("==", "!=", "<", "<=", ">", ">=", "in")


class _ServerTimestamp:
    """Sentinel replaced by the store's monotonic timestamp on write."""

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class FieldFilter:
    """Condition applied to a (possibly dotted) document field."""

    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in _OPERATORS:
            raise ValueError(f"Unsupported filter operator: {self.op!r}")

    def matches(self, document: Mapping[str, Any]) -> bool:
        actual = resolve_field(document, self.field)
        expected = _encode_value(self.value)
        if self.op == "==":
            return actual == expected
        if self.op == "!=":
            return actual != expected
        if self.op == "in":
            return actual in (expected or [])
        if actual is None or expected is None:
            return False
        try:
            if self.op == "<":
                return actual < expected
            if self.op == "<=":
                return actual <= expected
            if self.op == ">":
                return actual > expected
            return actual >= expected
        except TypeError:
            return False


OrderBy = tuple[str, str]


def where(field: str, op: str, value: Any) -> FieldFilter:
    """Shorthand constructor for :class:`FieldFilter`."""

    return FieldFilter(field, op, value)


def resolve_field(document: Mapping[str, Any], path: str) -> Any:
    """Return the value at dotted ``path`` or ``None`` when any part is missing."""

    current: Any = document
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def _encode_value(value: Any) -> Any:
    """Convert ``value`` into its JSON-compatible stored representation."""

    if isinstance(value, datetime):
        return to_timestamp_string(value)
    if isinstance(value, Mapping):
        return {key: _encode_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode_value(item) for item in value]
    return value


def _sort_key(path: str) -> Callable[[Mapping[str, Any]], tuple]:
    def key(document: Mapping[str, Any]) -> tuple:
        value = resolve_field(document, path)
        if value is None:
            return (0,)
        return (1, value)

    return key


def apply_query(
    documents: Iterable[dict[str, Any]],
    filters: Sequence[FieldFilter] = (),
    order_by: Sequence[OrderBy] = (),
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Filter, sort and truncate ``documents`` given in insertion order.

    Sorting is stable, so documents with equal keys keep their insertion order.
    """

    results = [document for document in documents if all(f.matches(document) for f in filters)]
    for field_path, direction in reversed(list(order_by)):
        results.sort(key=_sort_key(field_path), reverse=direction.lower() == "desc")
    if limit is not None:
        results = results[: max(limit, 0)]
    return results


class DocumentStore(Protocol):
    """Persistence collaborator consumed by the core use cases."""

    def server_timestamp(self) -> datetime: ...

    async def create(
        self, collection: str, data: Mapping[str, Any], *, document_id: str | None = None
    ) -> str: ...

    async def get(self, collection: str, document_id: str) -> dict[str, Any] | None: ...

    async def update(
        self, collection: str, document_id: str, changes: Mapping[str, Any]
    ) -> None: ...

    async def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: Sequence[OrderBy] = (),
        limit: int | None = None,
    ) -> list[dict[str, Any]]: ...

    async def subscribe(
        self,
        collection: str,
        callback: Callable[[Snapshot], Any],
        filters: Sequence[FieldFilter] = (),
        order_by: Sequence[OrderBy] = (),
        limit: int | None = None,
    ) -> Callable[[], None]: ...

    async def run_transaction(self, work: Callable[["Transaction"], T]) -> T: ...


class Transaction:
    """Synchronous view of the store used inside :meth:`SqlDocumentStore.run_transaction`.

    All reads and writes share one SQLAlchemy session; nothing becomes visible
    to other readers until the surrounding transaction commits.
    """

    def __init__(self, store: "SqlDocumentStore", session: Session) -> None:
        self._store = store
        self._session = session
        self.touched: set[str] = set()

    def server_timestamp(self) -> datetime:
        return self._store.server_timestamp()

    def get(self, collection: str, document_id: str) -> dict[str, Any] | None:
        model = self._get_model(collection, document_id)
        return _to_document(model) if model is not None else None

    def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: Sequence[OrderBy] = (),
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        statement = (
            select(DocumentModel)
            .where(DocumentModel.collection == collection)
            .order_by(DocumentModel.seq.asc())
        )
        documents = [_to_document(model) for model in self._session.scalars(statement)]
        return apply_query(documents, filters, order_by, limit)

    def create(
        self,
        collection: str,
        data: Mapping[str, Any],
        *,
        document_id: str | None = None,
    ) -> str:
        new_id = document_id or uuid4().hex
        payload = self._prepare(data)
        payload.pop("id", None)
        model = DocumentModel(
            collection=collection,
            document_id=new_id,
            data=payload,
            created_at=now_utc(),
        )
        self._session.add(model)
        self._session.flush()
        self.touched.add(collection)
        return new_id

    def update(self, collection: str, document_id: str, changes: Mapping[str, Any]) -> None:
        model = self._get_model(collection, document_id)
        if model is None:
            raise NotFoundError(f"Document '{document_id}' not found in '{collection}'")
        data = copy.deepcopy(model.data or {})
        prepared = self._prepare(changes)
        prepared.pop("id", None)
        data.update(prepared)
        model.data = data
        model.updated_at = now_utc()
        self._session.flush()
        self.touched.add(collection)

    def _get_model(self, collection: str, document_id: str) -> DocumentModel | None:
        statement = select(DocumentModel).where(
            DocumentModel.collection == collection,
            DocumentModel.document_id == document_id,
        )
        return self._session.scalars(statement).first()

    def _prepare(self, data: Mapping[str, Any]) -> dict[str, Any]:
        prepared: dict[str, Any] = {}
        for key, value in data.items():
            if value is SERVER_TIMESTAMP:
                value = self._store.server_timestamp()
            prepared[key] = _encode_value(value)
        return prepared


def _to_document(model: DocumentModel) -> dict[str, Any]:
    document = copy.deepcopy(model.data or {})
    document["id"] = model.document_id
    return document


class SqlDocumentStore:
    """:class:`DocumentStore` implementation on top of a SQLAlchemy engine."""

    def __init__(self, engine: Engine, *, timeout: float = 10.0) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self._engine = engine
        self._session_factory: sessionmaker = build_session_factory(engine)
        self._timeout = timeout
        self._write_lock = threading.Lock()
        # A single shared connection would expose uncommitted writes to readers.
        self._shared_connection = isinstance(engine.pool, StaticPool)
        self._clock_lock = threading.Lock()
        self._last_timestamp: datetime | None = None
        self._listeners = ListenerRegistry()
        initialize_database(engine)

    @property
    def listeners(self) -> ListenerRegistry:
        return self._listeners

    def server_timestamp(self) -> datetime:
        """Return a UTC timestamp strictly greater than any previously returned."""

        with self._clock_lock:
            current = now_utc()
            if self._last_timestamp is not None and current <= self._last_timestamp:
                current = self._last_timestamp + timedelta(microseconds=1)
            self._last_timestamp = current
            return current

    async def create(
        self,
        collection: str,
        data: Mapping[str, Any],
        *,
        document_id: str | None = None,
    ) -> str:
        return await self.run_transaction(
            lambda tx: tx.create(collection, data, document_id=document_id)
        )

    async def get(self, collection: str, document_id: str) -> dict[str, Any] | None:
        return await self._call(self._read, lambda tx: tx.get(collection, document_id))

    async def update(
        self, collection: str, document_id: str, changes: Mapping[str, Any]
    ) -> None:
        await self.run_transaction(lambda tx: tx.update(collection, document_id, changes))

    async def query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: Sequence[OrderBy] = (),
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        return await self._call(
            self._read, lambda tx: tx.query(collection, filters, order_by, limit)
        )

    async def subscribe(
        self,
        collection: str,
        callback: Callable[[Snapshot], Any],
        filters: Sequence[FieldFilter] = (),
        order_by: Sequence[OrderBy] = (),
        limit: int | None = None,
    ) -> Callable[[], None]:
        """Deliver the current snapshot now and again after every change to it."""

        listener = self._listeners.register(
            collection,
            filters=filters,
            order_by=order_by,
            limit=limit,
            callback=callback,
        )
        await self._listeners.refresh(listener, self._load_snapshot, force=True)

        def unsubscribe() -> None:
            self._listeners.unregister(listener)

        return unsubscribe

    async def run_transaction(self, work: Callable[[Transaction], T]) -> T:
        """Run ``work`` atomically and notify listeners once it has committed."""

        result, touched = await self._call(self._write, work)
        await self._notify(touched)
        return result

    async def _call(self, runner: Callable[..., Any], work: Callable[[Transaction], Any]) -> Any:
        try:
            with anyio.fail_after(self._timeout):
                return await to_thread.run_sync(runner, work, abandon_on_cancel=True)
        except TimeoutError as exc:
            logger.error("Document store call exceeded %.2f seconds", self._timeout)
            raise PersistenceTimeoutError(
                f"Document store did not respond within {self._timeout} seconds"
            ) from exc

    def _read(self, work: Callable[[Transaction], Any]) -> Any:
        guard = self._write_lock if self._shared_connection else contextlib.nullcontext()
        try:
            with guard, self._session_factory() as session:
                return work(Transaction(self, session))
        except SQLAlchemyError as exc:
            logger.exception("Document store read failed")
            raise PersistenceError(f"Document store read failed: {exc}") from exc

    def _write(self, work: Callable[[Transaction], Any]) -> tuple[Any, set[str]]:
        with self._write_lock:
            try:
                with self._session_factory() as session:
                    with session.begin():
                        transaction = Transaction(self, session)
                        result = work(transaction)
                    return result, transaction.touched
            except SQLAlchemyError as exc:
                logger.exception("Document store write failed")
                raise PersistenceError(f"Document store write failed: {exc}") from exc

    async def _load_snapshot(self, listener: QueryListener) -> Snapshot:
        return await self._call(
            self._read,
            lambda tx: tx.query(
                listener.collection, listener.filters, listener.order_by, listener.limit
            ),
        )

    async def _notify(self, collections: Iterable[str]) -> None:
        for listener in self._listeners.listeners_for(sorted(collections)):
            try:
                await self._listeners.refresh(listener, self._load_snapshot)
            except PersistenceError:
                logger.exception(
                    "Could not refresh listener %s on '%s'",
                    listener.listener_id,
                    listener.collection,
                )


__all__ = [
    "DocumentStore",
    "SqlDocumentStore",
    "Transaction",
    "FieldFilter",
    "OrderBy",
    "SERVER_TIMESTAMP",
    "apply_query",
    "resolve_field",
    "where",
]
