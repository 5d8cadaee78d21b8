"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ...models.domain import Coordinates


class ProviderUnavailableError(ConnectionError):
    """The external directions service cannot be used for this request."""


class StartNotGeocodedError(ValueError):
    """The start address has no coordinates but destinations do."""


@dataclass(slots=True)
class RankingEntry:
    """Directions summary for a single destination; empty fields mean a lookup miss."""

    address: str
    distance: Optional[str] = None
    duration: Optional[str] = None


@dataclass(slots=True)
class DetailedRoute:
    duration: float
    distance: float
    encoded_path: str
    path: List[Coordinates]
