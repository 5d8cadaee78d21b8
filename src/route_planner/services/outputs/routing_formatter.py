"""Serializers for routing outputs."""

from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Any

from ...models.domain import Coordinates, OptimizedRoute, RouteStop


def _stop_to_json(stop: RouteStop) -> dict:
    return {
        "id": stop.id,
        "address": stop.address,
        "coordinates": (
            {"lat": stop.coordinates.lat, "lng": stop.coordinates.lng} if stop.coordinates else None
        ),
        "type": stop.type,
        "order": stop.order,
        "completed": stop.completed,
    }


def _stop_from_json(data: dict) -> RouteStop:
    coordinates = data.get("coordinates")
    return RouteStop(
        id=str(data["id"]),
        address=str(data["address"]),
        type=data["type"],
        coordinates=Coordinates(lat=float(coordinates["lat"]), lng=float(coordinates["lng"])) if coordinates else None,
        order=int(data["order"]),
        completed=bool(data.get("completed", False)),
    )


def route_to_json(route: OptimizedRoute) -> dict:
    """Snapshot record: ``{stops, totalDistance, createdAt}`` with an ISO-8601 timestamp."""
    return {
        "stops": [_stop_to_json(stop) for stop in route.stops],
        "totalDistance": route.total_distance,
        "createdAt": route.created_at.isoformat(),
    }


def route_from_json(data: dict[str, Any]) -> OptimizedRoute:
    created_at = datetime.fromisoformat(str(data["createdAt"]).replace("Z", "+00:00"))
    return OptimizedRoute(
        stops=[_stop_from_json(stop) for stop in data.get("stops", [])],
        total_distance=float(data.get("totalDistance", 0.0)),
        created_at=created_at,
    )


def route_to_csv(route: OptimizedRoute) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "order",
        "id",
        "type",
        "address",
        "lat",
        "lng",
        "completed",
        "total_distance_km",
        "created_at",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for stop in route.stops:
        writer.writerow(
            {
                "order": stop.order,
                "id": stop.id,
                "type": stop.type,
                "address": stop.address,
                "lat": stop.coordinates.lat if stop.coordinates else "",
                "lng": stop.coordinates.lng if stop.coordinates else "",
                "completed": stop.completed,
                "total_distance_km": route.total_distance,
                "created_at": route.created_at.isoformat(),
            }
        )
    return buffer.getvalue()
