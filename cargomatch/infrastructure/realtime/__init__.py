"""Realtime listener helpers for the infrastructure layer."""

from .listeners import ListenerRegistry, QueryListener, Snapshot, SnapshotCallback

__all__ = ["ListenerRegistry", "QueryListener", "Snapshot", "SnapshotCallback"]
