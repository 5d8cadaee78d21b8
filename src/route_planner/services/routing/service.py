"""Routing orchestration service."""

from __future__ import annotations

import logging
from functools import lru_cache

from ...config import settings
from ...persistence.snapshot import JsonFileSnapshotStore, RouteSnapshotStore
from ...schemas.routing import OptimizedRouteModel, RouteRequest
from .models import ProviderUnavailableError
from .ranking_client import DirectionsRankingClient
from .sequencer import RouteSequencer

logger = logging.getLogger(__name__)


@lru_cache()
def build_sequencer() -> RouteSequencer:
    """Resolve the ranking strategy once per process."""
    if not settings.ranking_enabled:
        logger.info("External route ranking disabled; using nearest-neighbor sequencing")
        return RouteSequencer()
    try:
        return RouteSequencer(ranking_provider=DirectionsRankingClient())
    except ProviderUnavailableError as e:
        logger.warning(f"Ranking client initialization failed: {e}. Using nearest-neighbor sequencing.")
        return RouteSequencer()


@lru_cache()
def get_snapshot_store() -> RouteSnapshotStore:
    return JsonFileSnapshotStore()


def optimize_route(
    payload: RouteRequest,
    store: RouteSnapshotStore,
    sequencer: RouteSequencer | None = None,
) -> OptimizedRouteModel:
    if not payload.deliveries and not payload.pickups:
        raise ValueError("Add at least one delivery or pickup address.")

    sequencer = sequencer or build_sequencer()
    route = sequencer.sequence(
        start=payload.start.to_domain("start"),
        deliveries=[item.to_domain("delivery") for item in payload.deliveries],
        pickups=[item.to_domain("pickup") for item in payload.pickups],
    )
    logger.info(f"Sequenced {len(route.stops)} stop(s), total distance {route.total_distance} km")

    if payload.persist:
        store.save(route)
    return OptimizedRouteModel.from_domain(route)
