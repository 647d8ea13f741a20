"""Registry of live query listeners grouped by collection."""

from __future__ import annotations

import inspect
import itertools
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, DefaultDict, Sequence

logger = logging.getLogger(__name__)

Snapshot = list[dict[str, Any]]
SnapshotCallback = Callable[[Snapshot], "Awaitable[None] | None"]
SnapshotLoader = Callable[["QueryListener"], Awaitable[Snapshot]]


@dataclass(eq=False)
class QueryListener:
    """A live query whose results are pushed to ``callback`` on every change."""

    listener_id: int
    collection: str
    filters: Sequence[Any]
    order_by: Sequence[tuple[str, str]]
    limit: int | None
    callback: SnapshotCallback
    last_snapshot: Snapshot | None = None
    generation: int = 0


class ListenerRegistry:
    """Keep active listeners per collection and deliver refreshed snapshots."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, dict[int, QueryListener]] = defaultdict(dict)
        self._ids = itertools.count(1)

    def register(
        self,
        collection: str,
        *,
        filters: Sequence[Any],
        order_by: Sequence[tuple[str, str]],
        limit: int | None,
        callback: SnapshotCallback,
    ) -> QueryListener:
        """Register a new listener for ``collection`` and return it."""

        listener = QueryListener(
            listener_id=next(self._ids),
            collection=collection,
            filters=tuple(filters),
            order_by=tuple(order_by),
            limit=limit,
            callback=callback,
        )
        self._listeners[collection][listener.listener_id] = listener
        return listener

    def unregister(self, listener: QueryListener) -> None:
        """Remove ``listener``; unknown listeners are ignored."""

        listeners = self._listeners.get(listener.collection)
        if listeners is None:
            return
        listeners.pop(listener.listener_id, None)
        if not listeners:
            self._listeners.pop(listener.collection, None)

    def listeners_for(self, collections: Sequence[str]) -> list[QueryListener]:
        """Return the listeners currently attached to any of ``collections``."""

        active: list[QueryListener] = []
        for collection in collections:
            active.extend(self._listeners.get(collection, {}).values())
        return active

    def count(self, collection: str | None = None) -> int:
        """Return the number of listeners, optionally for one collection."""

        if collection is not None:
            return len(self._listeners.get(collection, {}))
        return sum(len(listeners) for listeners in self._listeners.values())

    async def refresh(
        self,
        listener: QueryListener,
        loader: SnapshotLoader,
        *,
        force: bool = False,
    ) -> None:
        """Reload ``listener``'s query and deliver the snapshot when it changed."""

        if not self._is_registered(listener):
            return
        listener.generation += 1
        generation = listener.generation
        snapshot = await loader(listener)
        # A newer refresh started while this one was loading; it will deliver.
        if generation != listener.generation or not self._is_registered(listener):
            return
        if not force and snapshot == listener.last_snapshot:
            return
        listener.last_snapshot = snapshot
        try:
            outcome = listener.callback([dict(item) for item in snapshot])
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            logger.exception(
                "Listener %s on collection '%s' failed while handling a snapshot",
                listener.listener_id,
                listener.collection,
            )

    def _is_registered(self, listener: QueryListener) -> bool:
        return listener.listener_id in self._listeners.get(listener.collection, {})


__all__ = ["ListenerRegistry", "QueryListener", "Snapshot", "SnapshotCallback"]
