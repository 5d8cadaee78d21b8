"""Routing endpoints."""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ...models.domain import Coordinates, OptimizedRoute
from ...persistence.snapshot import (
    RouteSnapshotStore,
    mark_all_completed,
    mark_completed,
    route_progress,
)
from ...schemas.routing import (
    CoordinatesModel,
    DirectionsResponse,
    OptimizedRouteModel,
    RouteProgressModel,
    RouteRequest,
)
from ...services.outputs.routing_formatter import route_to_csv
from ...services.routing.directions import (
    RapidApiRouteClient,
    google_maps_directions_url,
    navigation_url,
)
from ...services.routing.models import ProviderUnavailableError
from ...services.routing.service import get_snapshot_store, optimize_route

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])


def _require_route(route: OptimizedRoute | None) -> OptimizedRoute:
    if route is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No route has been computed yet.")
    return route


@router.post("/optimize", response_model=OptimizedRouteModel, status_code=status.HTTP_200_OK)
def optimize(payload: RouteRequest, store: RouteSnapshotStore = Depends(get_snapshot_store)) -> OptimizedRouteModel:
    try:
        return optimize_route(payload, store)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize route: {str(exc)}",
        ) from exc


@router.get("/current", response_model=OptimizedRouteModel, status_code=status.HTTP_200_OK)
def get_current(store: RouteSnapshotStore = Depends(get_snapshot_store)) -> OptimizedRouteModel:
    return OptimizedRouteModel.from_domain(_require_route(store.load()))


@router.delete("/current", status_code=status.HTTP_204_NO_CONTENT)
def clear_current(store: RouteSnapshotStore = Depends(get_snapshot_store)) -> Response:
    store.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/current/stops/{stop_id}/complete", response_model=OptimizedRouteModel, status_code=status.HTTP_200_OK)
def complete_stop(stop_id: str, store: RouteSnapshotStore = Depends(get_snapshot_store)) -> OptimizedRouteModel:
    """Mark one stop as delivered/picked up. Unknown stop ids leave the route untouched."""
    return OptimizedRouteModel.from_domain(_require_route(mark_completed(store, stop_id)))


@router.post("/current/complete-all", response_model=OptimizedRouteModel, status_code=status.HTTP_200_OK)
def complete_all(store: RouteSnapshotStore = Depends(get_snapshot_store)) -> OptimizedRouteModel:
    return OptimizedRouteModel.from_domain(_require_route(mark_all_completed(store)))


@router.get("/current/progress", response_model=RouteProgressModel, status_code=status.HTTP_200_OK)
def progress(store: RouteSnapshotStore = Depends(get_snapshot_store)) -> RouteProgressModel:
    return RouteProgressModel(**route_progress(_require_route(store.load())))


@router.get("/current/export.csv", status_code=status.HTTP_200_OK)
def export_csv(store: RouteSnapshotStore = Depends(get_snapshot_store)) -> Response:
    route = _require_route(store.load())
    return Response(
        content=route_to_csv(route),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="route.csv"'},
    )


@router.get("/directions", response_model=DirectionsResponse, status_code=status.HTTP_200_OK)
def directions(
    origin: str = Query(..., min_length=1, description="Origin address"),
    destination: str = Query(..., min_length=1, description="Destination address"),
    origin_lat: float | None = Query(default=None, ge=-90, le=90),
    origin_lng: float | None = Query(default=None, ge=-180, le=180),
    destination_lat: float | None = Query(default=None, ge=-90, le=90),
    destination_lng: float | None = Query(default=None, ge=-180, le=180),
    app: Literal["google", "waze"] = Query(default="google"),
) -> DirectionsResponse:
    """Navigation links for one leg, plus driving details when both points are geocoded."""
    response = DirectionsResponse(
        origin=origin,
        destination=destination,
        google_maps_url=google_maps_directions_url(origin, destination),
        navigation_url=navigation_url(destination, app),
    )
    coords = (origin_lat, origin_lng, destination_lat, destination_lng)
    if any(value is None for value in coords):
        return response

    try:
        client = RapidApiRouteClient()
    except ProviderUnavailableError as exc:
        logger.debug(f"Detailed route unavailable: {exc}")
        return response

    detailed = client.detailed_route(
        Coordinates(lat=origin_lat, lng=origin_lng),
        Coordinates(lat=destination_lat, lng=destination_lng),
    )
    if detailed is not None:
        response.duration = detailed.duration
        response.distance = detailed.distance
        response.encoded_path = detailed.encoded_path
        response.path = [CoordinatesModel(lat=point.lat, lng=point.lng) for point in detailed.path]
    return response
