import pytest

from evacnav.services.geospatial import (
    bearing_degrees,
    haversine_km,
    haversine_m,
    nearest_index,
    planar_distance,
)


def test_haversine_one_degree_of_longitude_at_equator():
    assert haversine_km(0.0, 0.0, 0.0, 1.0) == pytest.approx(111.195, rel=1e-4)
    assert haversine_m(0.0, 0.0, 0.0, 1.0) == pytest.approx(111195.0, rel=1e-4)


def test_haversine_same_point_is_zero():
    assert haversine_m(33.889, 135.163, 33.889, 135.163) == 0.0


@pytest.mark.parametrize(
    "target, expected",
    [((1.0, 0.0), 0.0), ((0.0, 1.0), 90.0), ((-1.0, 0.0), 180.0), ((0.0, -1.0), 270.0)],
)
def test_bearing_cardinal_directions(target, expected):
    assert bearing_degrees(0.0, 0.0, *target) == pytest.approx(expected)


def test_bearing_same_point_is_in_range():
    bearing = bearing_degrees(33.889, 135.163, 33.889, 135.163)

    assert 0.0 <= bearing < 360.0


def test_planar_distance_uses_raw_degrees():
    assert planar_distance((0.0, 0.0), (3.0, 4.0)) == pytest.approx(5.0)


def test_nearest_index_first_wins_on_ties():
    points = [(1.0, 0.0), (-1.0, 0.0), (0.0, 2.0)]

    assert nearest_index(points, (0.0, 0.0)) == 0


def test_nearest_index_empty():
    assert nearest_index([], (0.0, 0.0)) is None
