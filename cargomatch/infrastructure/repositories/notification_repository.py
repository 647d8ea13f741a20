"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from cargomatch.domain.entities import Notification
from cargomatch.domain.errors import NotFoundError
from cargomatch.infrastructure.document_store import (
    SERVER_TIMESTAMP,
    DocumentStore,
    FieldFilter,
    Transaction,
    where,
)
from cargomatch.utils import parse_timestamp

NOTIFICATIONS_COLLECTION = "notifications"


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    collection = NOTIFICATIONS_COLLECTION

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def create(
        self,
        *,
        recipient_id: str,
        title: str,
        body: str,
        type: str,
        data: Mapping[str, Any] | None,
        priority: str,
    ) -> str:
        return await self.store.create(
            NOTIFICATIONS_COLLECTION,
            {
                "recipient_id": recipient_id,
                "title": title,
                "body": body,
                "type": type,
                "data": dict(data or {}),
                "read": False,
                "read_at": None,
                "priority": priority,
                "created_at": SERVER_TIMESTAMP,
            },
        )

    async def get(self, notification_id: str) -> Notification | None:
        document = await self.store.get(NOTIFICATIONS_COLLECTION, notification_id)
        return self.to_entity(document) if document else None

    async def list_for_user(
        self,
        user_id: str,
        *,
        limit: int | None = 50,
        unread_only: bool = False,
        since: datetime | None = None,
    ) -> list[Notification]:
        documents = await self.store.query(
            NOTIFICATIONS_COLLECTION,
            self.filters(user_id, unread_only=unread_only, since=since),
            [("created_at", "desc")],
            limit,
        )
        return [self.to_entity(document) for document in documents]

    async def count_unread(self, user_id: str) -> int:
        documents = await self.store.query(
            NOTIFICATIONS_COLLECTION, self.filters(user_id, unread_only=True)
        )
        return len(documents)

    async def mark_as_read(self, notification_id: str) -> None:
        def work(tx: Transaction) -> None:
            if tx.get(NOTIFICATIONS_COLLECTION, notification_id) is None:
                raise NotFoundError(f"Notification {notification_id} not found")
            tx.update(
                NOTIFICATIONS_COLLECTION,
                notification_id,
                {"read": True, "read_at": tx.server_timestamp()},
            )

        await self.store.run_transaction(work)

    async def mark_all_as_read(self, user_id: str) -> int:
        def work(tx: Transaction) -> int:
            unread = tx.query(
                NOTIFICATIONS_COLLECTION, self.filters(user_id, unread_only=True)
            )
            read_at = tx.server_timestamp()
            for document in unread:
                tx.update(
                    NOTIFICATIONS_COLLECTION,
                    document["id"],
                    {"read": True, "read_at": read_at},
                )
            return len(unread)

        return await self.store.run_transaction(work)

    async def subscribe(
        self,
        user_id: str,
        callback: Callable[[list[Notification]], Any],
        *,
        limit: int,
        unread_only: bool = False,
    ) -> Callable[[], None]:
        def deliver(documents: list[dict[str, Any]]) -> Any:
            return callback([self.to_entity(document) for document in documents])

        return await self.store.subscribe(
            NOTIFICATIONS_COLLECTION,
            deliver,
            self.filters(user_id, unread_only=unread_only),
            [("created_at", "desc")],
            limit,
        )

    @staticmethod
    def filters(
        user_id: str,
        *,
        unread_only: bool = False,
        since: datetime | None = None,
    ) -> list[FieldFilter]:
        filters = [where("recipient_id", "==", user_id)]
        if unread_only:
            filters.append(where("read", "==", False))
        if since is not None:
            filters.append(where("created_at", ">=", since))
        return filters

    @staticmethod
    def to_entity(document: Mapping[str, Any]) -> Notification:
        return Notification(
            id=document.get("id"),
            recipient_id=document.get("recipient_id", ""),
            title=document.get("title") or "",
            body=document.get("body") or "",
            type=document.get("type") or "",
            data=dict(document.get("data") or {}),
            priority=document.get("priority") or "normal",
            read=bool(document.get("read")),
            created_at=parse_timestamp(document.get("created_at")),
            read_at=parse_timestamp(document.get("read_at")),
        )


__all__ = ["NotificationRepository", "NOTIFICATIONS_COLLECTION"]
