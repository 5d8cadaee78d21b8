import httpx
import pytest

from src.route_planner.models.domain import Address, Coordinates
from src.route_planner.services.routing.models import ProviderUnavailableError
from src.route_planner.services.routing.ranking_client import DirectionsRankingClient


def _address(aid: str, text: str) -> Address:
    return Address(id=aid, address=text, type="delivery", coordinates=Coordinates(0.0, 0.0))


def _client(handler, **kwargs) -> DirectionsRankingClient:
    return DirectionsRankingClient(
        api_key="test-key",
        base_url="https://serpapi.test/search",
        max_retries=kwargs.pop("max_retries", 0),
        backoff_seconds=0.0,
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def test_missing_key_means_provider_unavailable(monkeypatch):
    from src.route_planner.services.routing import ranking_client

    monkeypatch.setattr(ranking_client.settings, "serpapi_key", None)
    with pytest.raises(ProviderUnavailableError):
        DirectionsRankingClient()


def test_rank_returns_entries_in_destination_order():
    durations = {"Alpha": "30 min", "Beta": "7 min", "Gamma": "12 min"}

    def handler(request: httpx.Request) -> httpx.Response:
        params = request.url.params
        assert params["engine"] == "google_maps"
        assert params["type"] == "directions"
        assert params["api_key"] == "test-key"
        origin, destination = params["q"].split(" to ")
        assert origin == "Depot"
        return httpx.Response(
            200,
            json={"directions": [{"distance": "5 km", "duration": durations[destination]}]},
        )

    destinations = [_address("1", "Alpha"), _address("2", "Beta"), _address("3", "Gamma")]
    ranking = _client(handler).rank("Depot", destinations)

    assert [entry.address for entry in ranking] == ["Alpha", "Beta", "Gamma"]
    assert [entry.duration for entry in ranking] == ["30 min", "7 min", "12 min"]
    assert all(entry.distance == "5 km" for entry in ranking)


def test_destination_without_directions_is_kept_as_miss():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["q"].endswith("Nowhere"):
            return httpx.Response(200, json={"error": "Google Maps hasn't returned any results."})
        return httpx.Response(200, json={"directions": [{"distance": "2 km", "duration": "4 min"}]})

    ranking = _client(handler).rank("Depot", [_address("1", "Nowhere"), _address("2", "Somewhere")])

    assert len(ranking) == 2
    assert ranking[0].address == "Nowhere"
    assert ranking[0].distance is None and ranking[0].duration is None
    assert ranking[1].duration == "4 min"


def test_server_error_makes_provider_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "busy"})

    with pytest.raises(ProviderUnavailableError):
        _client(handler).rank("Depot", [_address("1", "Alpha")])


def test_transient_error_is_retried():
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] == 1:
            return httpx.Response(502)
        return httpx.Response(200, json={"directions": [{"distance": "1 km", "duration": "2 min"}]})

    ranking = _client(handler, max_retries=1).rank("Depot", [_address("1", "Alpha")])

    assert calls["count"] == 2
    assert ranking[0].duration == "2 min"


def test_malformed_payload_makes_provider_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>not json</html>")

    with pytest.raises(ProviderUnavailableError):
        _client(handler).rank("Depot", [_address("1", "Alpha")])


def test_rejected_credential_is_not_retried():
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(401, json={"error": "Invalid API key."})

    with pytest.raises(ProviderUnavailableError):
        _client(handler, max_retries=3).rank("Depot", [_address("1", "Alpha")])
    assert calls["count"] == 1


def test_empty_destination_list_returns_empty_ranking():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert _client(handler).rank("Depot", []) == []


def test_check_health():
    ok = _client(lambda request: httpx.Response(200, json={"directions": []}))
    down = _client(lambda request: httpx.Response(500))

    assert ok.check_health() is True
    assert down.check_health() is False
