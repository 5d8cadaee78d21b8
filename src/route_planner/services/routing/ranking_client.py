"""HTTP client for ranking destinations through the SerpAPI Google Maps directions search."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

import httpx

from ...config import settings
from ...models.domain import Address
from .models import ProviderUnavailableError, RankingEntry

logger = logging.getLogger(__name__)


class DirectionsRankingClient:
    """Fetches a real-world distance/duration estimate from the origin to each destination."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        engine: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        max_parallel_requests: int | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.serpapi_key
        if not self.api_key:
            raise ProviderUnavailableError("SerpAPI key is not configured.")
        self.base_url = base_url or settings.serpapi_base_url
        self.engine = engine or settings.serpapi_engine
        self.timeout = timeout if timeout is not None else settings.provider_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.provider_max_retries
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else settings.provider_backoff_seconds
        )
        self.max_parallel_requests = max_parallel_requests or settings.provider_max_parallel_requests
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        """Create a short-lived client; lookups run on worker threads."""
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self._transport,
        )

    def _directions_request(self, origin: str, destination: str) -> dict:
        params = {
            "engine": self.engine,
            "api_key": self.api_key,
            "q": f"{origin} to {destination}",
            "type": "directions",
        }
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(self.base_url, params=params)
                    response.raise_for_status()
                    data = response.json()
                    if not isinstance(data, dict):
                        raise ValueError("Directions response is not a JSON object.")
                    return data
                except httpx.HTTPStatusError as e:
                    code = e.response.status_code
                    if code in (401, 403):
                        raise ProviderUnavailableError(
                            f"Directions service rejected the credential (HTTP {code})."
                        ) from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ProviderUnavailableError(f"Directions service returned HTTP {code}.") from e
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ProviderUnavailableError(
                            f"Directions request timed out after {self.max_retries} retries: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Directions timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except (httpx.TransportError, OSError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ProviderUnavailableError(
                            f"Failed to connect to directions service at {self.base_url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Directions network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)
                except ValueError as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ProviderUnavailableError(f"Malformed directions payload: {e}") from e
                    time.sleep(self.backoff_seconds * attempt)
        finally:
            client.close()

    def _lookup(self, origin: str, destination: str) -> RankingEntry:
        data = self._directions_request(origin, destination)
        directions = data.get("directions")
        if not isinstance(directions, list) or not directions or not isinstance(directions[0], dict):
            logger.debug(f"No directions for '{destination}': {data.get('error', 'empty result')}")
            return RankingEntry(address=destination)
        best = directions[0]
        distance = best.get("distance")
        duration = best.get("duration")
        return RankingEntry(
            address=destination,
            distance=str(distance) if distance is not None else None,
            duration=str(duration) if duration is not None else None,
        )

    def rank(self, origin: str, destinations: Sequence[Address]) -> list[RankingEntry]:
        """Look up every destination concurrently; results keep the input order.

        Raises ProviderUnavailableError when any lookup cannot reach the service,
        so callers never see a partially-fetched ranking.
        """
        if not origin or not origin.strip():
            raise ValueError("Origin address is required for ranking.")
        if not destinations:
            return []

        workers = min(self.max_parallel_requests, len(destinations))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(lambda dest: self._lookup(origin, dest.address), destinations))

    def check_health(self) -> bool:
        """Return True when a single directions lookup succeeds."""
        try:
            self._directions_request("Times Square, New York", "Central Park, New York")
            return True
        except ProviderUnavailableError:
            return False
