"""Point-to-point route details and navigation deep links."""

from __future__ import annotations

import logging
from typing import Literal
from urllib.parse import quote, urlencode

import httpx

from ...config import settings
from ...models.domain import Coordinates
from .models import DetailedRoute, ProviderUnavailableError

logger = logging.getLogger(__name__)


class RapidApiRouteClient:
    """Client for the RapidAPI route planner ``/routing`` endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        host: str | None = None,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.rapidapi_key
        if not self.api_key:
            raise ProviderUnavailableError("RapidAPI key is not configured.")
        self.host = host or settings.rapidapi_host
        self.timeout = timeout
        self._transport = transport

    def detailed_route(self, start: Coordinates, destination: Coordinates) -> DetailedRoute | None:
        """Driving duration, distance and geometry between two points; ``None`` on a miss."""
        params = {
            "waypoints": f"{start.lat},{start.lng}|{destination.lat},{destination.lng}",
            "mode": "drive",
        }
        headers = {"X-RapidAPI-Key": self.api_key, "X-RapidAPI-Host": self.host}
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(f"https://{self.host}/routing", params=params, headers=headers)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to fetch route from RapidAPI: {e}")
            return None

        routes = data.get("routes") if isinstance(data, dict) else None
        if not routes:
            return None

        route = routes[0]
        geometry = route.get("geometry") or ""
        try:
            return DetailedRoute(
                duration=float(route["duration"]),
                distance=float(route["distance"]),
                encoded_path=geometry,
                path=decode_polyline(geometry) if geometry else [],
            )
        except (KeyError, TypeError, ValueError, IndexError) as e:
            logger.error(f"Malformed RapidAPI route payload: {e}")
            return None


def decode_polyline(polyline: str) -> list[Coordinates]:
    """Decode Google polyline string to a list of coordinates.

    Args:
        polyline: Encoded polyline string

    Returns:
        List of Coordinates in path order
    """
    coordinates = []
    index = 0
    lat = 0
    lng = 0

    while index < len(polyline):
        deltas = []
        for _ in range(2):
            shift = 0
            result = 0
            while True:
                b = ord(polyline[index]) - 63
                index += 1
                result |= (b & 0x1F) << shift
                shift += 5
                if b < 0x20:
                    break
            deltas.append(~(result >> 1) if (result & 1) else (result >> 1))
        lat += deltas[0]
        lng += deltas[1]
        coordinates.append(Coordinates(lat=lat / 1e5, lng=lng / 1e5))

    return coordinates


def google_maps_directions_url(origin: str, destination: str) -> str:
    query = urlencode(
        {"api": 1, "origin": origin, "destination": destination, "travelmode": "driving"},
        quote_via=quote,
    )
    return f"https://www.google.com/maps/dir/?{query}"


def navigation_url(address: str, app: Literal["google", "waze"] = "google") -> str:
    """Deep link that opens the address in the chosen GPS app."""
    if app == "waze":
        return f"https://waze.com/ul?q={quote(address)}&navigate=yes"
    return f"https://www.google.com/maps/search/?api=1&query={quote(address)}"
