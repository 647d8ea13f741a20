"""Persistence helpers for driver invitation documents."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from cargomatch.domain.entities import DriverInvitation
from cargomatch.infrastructure.document_store import DocumentStore, where
from cargomatch.utils import parse_timestamp

INVITATIONS_COLLECTION = "driver_invitations"


class InvitationRepository:
    """Provide CRUD operations for :class:`DriverInvitation` objects."""

    collection = INVITATIONS_COLLECTION

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def create(
        self,
        *,
        job_id: str,
        driver_id: str,
        message: str,
        status: str,
        sent_at: datetime,
        expires_at: datetime,
    ) -> str:
        return await self.store.create(
            INVITATIONS_COLLECTION,
            {
                "job_id": job_id,
                "driver_id": driver_id,
                "message": message,
                "type": "invitation",
                "status": status,
                "sent_at": sent_at,
                "expires_at": expires_at,
            },
        )

    async def list_for_driver(
        self, driver_id: str, *, statuses: tuple[str, ...]
    ) -> list[DriverInvitation]:
        documents = await self.store.query(
            INVITATIONS_COLLECTION,
            [where("driver_id", "==", driver_id), where("status", "in", list(statuses))],
            [("sent_at", "desc")],
        )
        return [self.to_entity(document) for document in documents]

    @staticmethod
    def to_entity(document: Mapping[str, Any]) -> DriverInvitation:
        return DriverInvitation(
            id=document.get("id"),
            job_id=document.get("job_id", ""),
            driver_id=document.get("driver_id", ""),
            message=document.get("message") or "",
            status=document.get("status") or "sent",
            sent_at=parse_timestamp(document.get("sent_at")),
            expires_at=parse_timestamp(document.get("expires_at")),
        )


__all__ = ["InvitationRepository", "INVITATIONS_COLLECTION"]
