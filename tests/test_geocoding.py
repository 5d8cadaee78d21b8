import httpx
import pytest

from src.route_planner.services.geocoding import GoogleGeocodingClient
from src.route_planner.services.routing.models import ProviderUnavailableError


def _client(handler) -> GoogleGeocodingClient:
    return GoogleGeocodingClient(
        api_key="geo-key",
        base_url="https://maps.test/geocode/json",
        transport=httpx.MockTransport(handler),
    )


def test_geocode_returns_first_result():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["address"] == "Av. Paulista, 1000"
        assert request.url.params["key"] == "geo-key"
        return httpx.Response(
            200,
            json={
                "status": "OK",
                "results": [
                    {
                        "formatted_address": "Av. Paulista, 1000 - Bela Vista, São Paulo - SP",
                        "geometry": {"location": {"lat": -23.5651, "lng": -46.6525}},
                    }
                ],
            },
        )

    result = _client(handler).geocode("Av. Paulista, 1000")

    assert result.address == "Av. Paulista, 1000"
    assert result.coordinates.lat == -23.5651
    assert result.coordinates.lng == -46.6525
    assert result.formatted_address.startswith("Av. Paulista")


def test_geocode_zero_results_is_none():
    result = _client(lambda request: httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})).geocode("???")
    assert result is None


def test_geocode_transport_failure_is_unavailable():
    with pytest.raises(ProviderUnavailableError):
        _client(lambda request: httpx.Response(500)).geocode("Somewhere")


def test_geocode_requires_key(monkeypatch):
    from src.route_planner.services import geocoding

    monkeypatch.setattr(geocoding.settings, "google_maps_api_key", None)
    with pytest.raises(ProviderUnavailableError):
        GoogleGeocodingClient()
