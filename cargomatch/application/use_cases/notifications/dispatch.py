"""Fan-out of notifications that must never undo a committed change."""

from __future__ import annotations

import logging
from collections.abc import Awaitable

logger = logging.getLogger(__name__)


async def dispatch_safely(notification: Awaitable[str], *, description: str) -> str | None:
    """Await ``notification`` and return its id, or ``None`` when sending failed.

    The change that triggered the notification is already committed, so any
    failure is logged and never reaches the caller.
    """

    try:
        return await notification
    except Exception:
        logger.exception("Could not send %s notification", description)
        return None


__all__ = ["dispatch_safely"]
