"""Fan-in of several live subscriptions into one dashboard view."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

logger = logging.getLogger(__name__)

DashboardView = Mapping[str, tuple[Any, ...]]
DashboardCallback = Callable[[DashboardView], "Awaitable[None] | None"]
Unsubscribe = Callable[[], None]


class DashboardAggregator:
    """Own upstream subscriptions and republish a merged view on every change.

    Each upstream feeds one named slice. Whenever a slice changes the
    aggregator hands ``callback`` a read-only mapping holding the latest value
    of every slice, so consumers never see a partially updated object.
    """

    def __init__(self, callback: DashboardCallback, *, slices: Sequence[str]) -> None:
        self._callback = callback
        self._slices: dict[str, tuple[Any, ...]] = {name: () for name in slices}
        self._unsubscribers: list[Unsubscribe] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def view(self) -> DashboardView:
        """Return the current merged view."""

        return MappingProxyType(dict(self._slices))

    def attach(self, unsubscribe: Unsubscribe) -> None:
        """Take ownership of an upstream subscription."""

        if self._closed:
            unsubscribe()
            return
        self._unsubscribers.append(unsubscribe)

    async def publish(self, name: str, items: Iterable[Any]) -> None:
        """Replace slice ``name`` and deliver the merged view."""

        if self._closed:
            return
        if name not in self._slices:
            raise KeyError(f"Unknown dashboard slice '{name}'")
        self._slices[name] = tuple(items)
        outcome = self._callback(self.view)
        if inspect.isawaitable(outcome):
            await outcome

    def feed(self, name: str) -> Callable[[list[Any]], Awaitable[None]]:
        """Return an upstream callback that publishes into slice ``name``."""

        async def receive(items: list[Any]) -> None:
            await self.publish(name, items)

        return receive

    def close(self) -> None:
        """Cancel every upstream subscription; later changes are ignored."""

        if self._closed:
            return
        self._closed = True
        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            unsubscribe()
        logger.debug("Dashboard aggregator closed %s subscriptions", len(unsubscribers))


__all__ = ["DashboardAggregator", "DashboardView", "DashboardCallback"]
