"""Google Geocoding API client used before sequencing to resolve stop coordinates."""

from __future__ import annotations

import logging

import httpx

from ..config import settings
from ..models.domain import Coordinates, GeocodingResult
from .routing.models import ProviderUnavailableError

logger = logging.getLogger(__name__)


class GoogleGeocodingClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.google_maps_api_key
        if not self.api_key:
            raise ProviderUnavailableError("Google Maps API key is not configured.")
        self.base_url = base_url or settings.geocoding_base_url
        self.timeout = timeout
        self._transport = transport

    def geocode(self, address: str) -> GeocodingResult | None:
        """Resolve an address to coordinates; ``None`` when Google finds no match."""
        if not address or not address.strip():
            raise ValueError("Address is required for geocoding.")

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(self.base_url, params={"address": address, "key": self.api_key})
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ProviderUnavailableError(f"Geocoding request failed: {e}") from e

        status = data.get("status")
        results = data.get("results") or []
        if status != "OK" or not results:
            logger.info(f"Geocoding returned no match for '{address}' (status={status})")
            return None

        best = results[0]
        try:
            location = best["geometry"]["location"]
            coordinates = Coordinates(lat=float(location["lat"]), lng=float(location["lng"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderUnavailableError(f"Malformed geocoding payload: {e}") from e

        return GeocodingResult(
            address=address,
            coordinates=coordinates,
            formatted_address=best.get("formatted_address") or address,
        )
