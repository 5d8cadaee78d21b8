"""Stop sequencing: external duration ranking with a nearest-neighbor fallback.

The engine pools deliveries and pickups into one destination set, drops any
address without coordinates, and returns an ``OptimizedRoute`` whose stops are
numbered 0 (start) to N in visiting order. When a ranking provider is wired in,
destinations are sorted by the provider's travel-time estimate from the start;
if the provider is unavailable or returns nothing, a deterministic greedy tour
is built from great-circle distances instead.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import datetime, timezone
from typing import Protocol, Sequence

from ...models.domain import Address, OptimizedRoute, RouteStop
from ..geospatial import distance_km, path_length_km
from .models import ProviderUnavailableError, RankingEntry, StartNotGeocodedError

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"(\d+)")


class RankingProvider(Protocol):
    def rank(self, origin: str, destinations: Sequence[Address]) -> list[RankingEntry]: ...


def parse_duration_minutes(duration: str | None) -> float:
    """Extract the first integer of a free-text duration ("15 min" -> 15).

    Missing or unparsable values sort last.
    """
    if not duration:
        return math.inf
    match = _LEADING_NUMBER.search(duration)
    return float(match.group(1)) if match else math.inf


def _empty_route() -> OptimizedRoute:
    return OptimizedRoute(stops=[], total_distance=0.0, created_at=datetime.now(timezone.utc))


def nearest_neighbor_route(start: Address, destinations: Sequence[Address]) -> OptimizedRoute:
    """Greedy tour from ``start``; ties go to the earliest destination in input order."""
    if start.coordinates is None:
        raise StartNotGeocodedError(f"Start address '{start.address}' has not been geocoded.")

    unvisited = [dest for dest in destinations if dest.coordinates is not None]
    stops = [RouteStop.from_address(start, order=0)]
    current = start.coordinates
    total_distance = 0.0
    order = 1

    while unvisited:
        nearest_index = 0
        nearest_distance = math.inf
        for index, candidate in enumerate(unvisited):
            hop = distance_km(current, candidate.coordinates)
            if hop < nearest_distance:
                nearest_distance = hop
                nearest_index = index

        nearest = unvisited.pop(nearest_index)
        stops.append(RouteStop.from_address(nearest, order=order))
        total_distance += nearest_distance
        current = nearest.coordinates
        order += 1

    return OptimizedRoute(
        stops=stops,
        total_distance=round(total_distance, 2),
        created_at=datetime.now(timezone.utc),
    )


def ranked_route(
    start: Address, destinations: Sequence[Address], ranking: Sequence[RankingEntry]
) -> OptimizedRoute:
    """Order destinations by ranked duration, pairing entries with destinations by position."""
    paired = list(zip(destinations, ranking))
    paired.sort(key=lambda item: parse_duration_minutes(item[1].duration))

    stops = [RouteStop.from_address(start, order=0)]
    stops.extend(RouteStop.from_address(dest, order=order) for order, (dest, _) in enumerate(paired, start=1))

    # Display distance is great-circle along the new order, not the provider's road distance.
    points = [stop.coordinates for stop in stops if stop.coordinates is not None]
    return OptimizedRoute(
        stops=stops,
        total_distance=round(path_length_km(points), 2),
        created_at=datetime.now(timezone.utc),
    )


class RouteSequencer:
    """Produces a visiting order for a start point and pooled destinations."""

    def __init__(self, ranking_provider: RankingProvider | None = None) -> None:
        self.ranking_provider = ranking_provider

    @property
    def external_ranking_enabled(self) -> bool:
        return self.ranking_provider is not None

    def sequence(
        self,
        start: Address,
        deliveries: Sequence[Address],
        pickups: Sequence[Address],
    ) -> OptimizedRoute:
        destinations = [addr for addr in [*deliveries, *pickups] if addr.coordinates is not None]
        dropped = len(deliveries) + len(pickups) - len(destinations)
        if dropped:
            logger.debug(f"Dropped {dropped} destination(s) without coordinates")

        if not destinations:
            return _empty_route()
        if start.coordinates is None:
            raise StartNotGeocodedError(f"Start address '{start.address}' has not been geocoded.")

        route = self._try_ranked(start, destinations)
        if route is not None:
            return route
        return nearest_neighbor_route(start, destinations)

    def _try_ranked(self, start: Address, destinations: list[Address]) -> OptimizedRoute | None:
        if self.ranking_provider is None:
            return None
        try:
            ranking = self.ranking_provider.rank(start.address, destinations)
        except (ProviderUnavailableError, ValueError) as e:
            logger.warning(f"Ranking provider unavailable, using nearest-neighbor fallback: {e}")
            return None
        except Exception as e:
            logger.exception(f"Unexpected ranking provider failure, using nearest-neighbor fallback: {e}")
            return None

        if not ranking:
            return None
        if len(ranking) != len(destinations):
            logger.warning(
                f"Ranking size mismatch ({len(ranking)} entries for {len(destinations)} destinations), "
                f"using nearest-neighbor fallback"
            )
            return None

        logger.info(f"Route ranked by external directions for {len(destinations)} destination(s)")
        return ranked_route(start, destinations, ranking)
