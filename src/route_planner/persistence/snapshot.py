"""Single-slot storage for the most recently computed route.

The slot is last-writer-wins and ``mark_completed`` is a plain
read-modify-write; completion updates must be issued one at a time.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from ..config import settings
from ..models.domain import OptimizedRoute
from ..services.outputs.routing_formatter import route_from_json, route_to_json
from .filesystem import FileStorage

logger = logging.getLogger(__name__)


class RouteSnapshotStore(Protocol):
    def save(self, route: OptimizedRoute) -> None: ...

    def load(self) -> OptimizedRoute | None: ...

    def clear(self) -> None: ...


class InMemorySnapshotStore:
    """Keeps the serialized snapshot in memory, exactly as it would be written to disk."""

    def __init__(self) -> None:
        self._record: dict | None = None

    def save(self, route: OptimizedRoute) -> None:
        self._record = route_to_json(route)

    def load(self) -> OptimizedRoute | None:
        if self._record is None:
            return None
        return route_from_json(self._record)

    def clear(self) -> None:
        self._record = None


class JsonFileSnapshotStore:
    """Stores the snapshot as one JSON document named after the slot key."""

    def __init__(self, root: Path | None = None, key: str | None = None) -> None:
        self.storage = FileStorage(root=root)
        self.key = key or settings.snapshot_key
        self.path = self.storage.path_for(self.key)

    def save(self, route: OptimizedRoute) -> None:
        self.storage.write_json(self.path, route_to_json(route))

    def load(self) -> OptimizedRoute | None:
        try:
            record = self.storage.read_json(self.path)
            if record is None:
                return None
            return route_from_json(record)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable route snapshot at {self.path}: {e}")
            return None

    def clear(self) -> None:
        self.storage.delete(self.path)


def mark_completed(store: RouteSnapshotStore, stop_id: str) -> OptimizedRoute | None:
    """Flip one stop to completed. No-op when the slot is empty or the id is unknown."""
    route = store.load()
    if route is None:
        return None
    stop = next((s for s in route.stops if s.id == stop_id), None)
    if stop is None:
        logger.debug(f"Stop '{stop_id}' not found in snapshot; nothing to update")
        return route
    if not stop.completed:
        stop.completed = True
        store.save(route)
    return route


def mark_all_completed(store: RouteSnapshotStore) -> OptimizedRoute | None:
    route = store.load()
    if route is None:
        return None
    for stop in route.stops:
        stop.completed = True
    store.save(route)
    return route


def route_progress(route: OptimizedRoute) -> dict:
    completed = sum(1 for stop in route.stops if stop.completed)
    total = len(route.stops)
    return {
        "completed": completed,
        "total": total,
        "percent": round(completed / total * 100, 1) if total else 0.0,
        "all_completed": total > 0 and completed == total,
    }
