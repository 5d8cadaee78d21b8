from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from src.route_planner.models.domain import Coordinates, OptimizedRoute, RouteStop
from src.route_planner.persistence.filesystem import FileStorage
from src.route_planner.persistence.snapshot import (
    InMemorySnapshotStore,
    JsonFileSnapshotStore,
    mark_all_completed,
    mark_completed,
    route_progress,
)


def _route() -> OptimizedRoute:
    return OptimizedRoute(
        stops=[
            RouteStop(id="S", address="Rua A, 1", type="start", coordinates=Coordinates(-23.5505, -46.6333), order=0),
            RouteStop(id="D1", address="Rua B, 2", type="delivery", coordinates=Coordinates(-23.5612, -46.6559), order=1),
            RouteStop(
                id="P1",
                address="Rua C, 3",
                type="pickup",
                coordinates=Coordinates(-23.5475, -46.6361),
                order=2,
                completed=True,
            ),
        ],
        total_distance=4.37,
        created_at=datetime(2025, 3, 14, 9, 26, 53, 589000, tzinfo=timezone.utc),
    )


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path: Path):
    if request.param == "memory":
        return InMemorySnapshotStore()
    return JsonFileSnapshotStore(root=tmp_path, key="optimized_route")


def test_file_storage_writes_and_reads_json(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    path = storage.path_for("slot")

    assert path.parent == tmp_path / "snapshots"
    assert storage.read_json(path) is None

    storage.write_json(path, {"hello": "world"})

    assert path.read_text(encoding="utf-8") == '{\n  "hello": "world"\n}'
    assert storage.read_json(path) == {"hello": "world"}

    storage.delete(path)
    assert not path.exists()


def test_load_from_empty_slot_returns_none(store) -> None:
    assert store.load() is None


def test_snapshot_round_trip_preserves_route(store) -> None:
    route = _route()
    store.save(route)

    loaded = store.load()

    assert loaded == route
    assert isinstance(loaded.created_at, datetime)
    assert [stop.completed for stop in loaded.stops] == [False, False, True]


def test_save_overwrites_previous_snapshot(store) -> None:
    store.save(_route())
    replacement = OptimizedRoute(stops=[], total_distance=0.0, created_at=datetime.now(timezone.utc))
    store.save(replacement)

    assert store.load() == replacement


def test_clear_empties_slot(store) -> None:
    store.save(_route())
    store.clear()
    assert store.load() is None


def test_snapshot_file_uses_wire_format(tmp_path: Path) -> None:
    store = JsonFileSnapshotStore(root=tmp_path, key="optimized_route")
    store.save(_route())

    record = store.storage.read_json(tmp_path / "snapshots" / "optimized_route.json")

    assert set(record) == {"stops", "totalDistance", "createdAt"}
    assert record["createdAt"] == "2025-03-14T09:26:53.589000+00:00"
    assert record["stops"][1] == {
        "id": "D1",
        "address": "Rua B, 2",
        "coordinates": {"lat": -23.5612, "lng": -46.6559},
        "type": "delivery",
        "order": 1,
        "completed": False,
    }


def test_mark_completed_flips_flag(store) -> None:
    store.save(_route())

    updated = mark_completed(store, "D1")

    assert updated.stops[1].completed is True
    assert store.load().stops[1].completed is True


def test_mark_completed_unknown_stop_is_noop(store) -> None:
    store.save(_route())

    mark_completed(store, "does-not-exist")

    assert store.load() == _route()


def test_mark_completed_on_empty_slot_is_noop(store) -> None:
    assert mark_completed(store, "D1") is None
    assert store.load() is None


def test_mark_all_completed_and_progress(store) -> None:
    store.save(_route())
    assert route_progress(store.load()) == {"completed": 1, "total": 3, "percent": 33.3, "all_completed": False}

    mark_all_completed(store)

    assert route_progress(store.load()) == {"completed": 3, "total": 3, "percent": 100.0, "all_completed": True}


def test_progress_of_empty_route() -> None:
    empty = OptimizedRoute(stops=[], total_distance=0.0, created_at=datetime.now(timezone.utc))
    assert route_progress(empty)["percent"] == 0.0
    assert route_progress(empty)["all_completed"] is False


def test_concurrent_saves_leave_one_complete_snapshot(tmp_path: Path) -> None:
    store = JsonFileSnapshotStore(root=tmp_path, key="optimized_route")
    base = _route()
    routes = [
        OptimizedRoute(stops=base.stops, total_distance=float(i), created_at=base.created_at + timedelta(seconds=i))
        for i in range(200)
    ]

    with ThreadPoolExecutor(max_workers=8) as executor:
        futures = [executor.submit(store.save, route) for route in routes]
        errors = [future.exception() for future in futures if future.exception() is not None]

    assert errors == []
    loaded = store.load()
    assert loaded in routes
    assert list((tmp_path / "snapshots").glob("*.tmp")) == []


def test_unreadable_snapshot_file_loads_as_empty(tmp_path: Path, caplog) -> None:
    store = JsonFileSnapshotStore(root=tmp_path, key="optimized_route")
    store.path.write_text('{"stops": [', encoding="utf-8")

    assert store.load() is None
    assert "unreadable route snapshot" in caplog.text

    store.path.write_text('{"stops": []}', encoding="utf-8")
    assert store.load() is None

    store.save(_route())
    assert store.load() == _route()
