import math

import pytest

from src.route_planner.models.domain import Coordinates
from src.route_planner.services.geospatial import EARTH_RADIUS_KM, distance_km, haversine_km, path_length_km


def test_distance_to_self_is_zero():
    point = Coordinates(lat=-23.5505, lng=-46.6333)
    assert distance_km(point, point) == 0.0


def test_distance_is_symmetric_and_non_negative():
    pairs = [
        (Coordinates(0.0, 0.0), Coordinates(0.0, 1.0)),
        (Coordinates(-23.55, -46.63), Coordinates(-22.90, -43.17)),
        (Coordinates(51.5, -0.12), Coordinates(40.71, -74.0)),
        (Coordinates(89.9, 179.9), Coordinates(-89.9, -179.9)),
    ]
    for a, b in pairs:
        assert distance_km(a, b) == distance_km(b, a)
        assert distance_km(a, b) >= 0


def test_one_degree_on_equator_matches_arc_length():
    expected = EARTH_RADIUS_KM * math.pi / 180
    assert haversine_km(0, 0, 0, 1) == pytest.approx(expected)


def test_path_length_sums_hops():
    points = [Coordinates(0, 0), Coordinates(0, 1), Coordinates(0, 3)]
    assert path_length_km(points) == pytest.approx(haversine_km(0, 0, 0, 3))
    assert path_length_km(points[:1]) == 0
    assert path_length_km([]) == 0
