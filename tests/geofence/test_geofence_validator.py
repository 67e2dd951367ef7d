import math

import pytest

from fakes import HUB, north_of
from hub_attendance.core.exceptions import InvalidCoordinateError
from hub_attendance.geofence.model import Coordinate
from hub_attendance.geofence.validator import GeofenceValidator, haversine_m


def test_hub_itself_is_inside():
    fence = GeofenceValidator(HUB, radius_m=100)

    assert fence.distance_m(HUB.lat, HUB.lng) == 0
    assert fence.is_within_hub(HUB.lat, HUB.lng)


def test_distance_along_meridian():
    p = north_of(HUB, 40)

    assert haversine_m(HUB, p) == pytest.approx(40, abs=1e-6)
    assert haversine_m(p, HUB) == pytest.approx(haversine_m(HUB, p))


def test_boundary_is_inclusive():
    edge = north_of(HUB, 100)
    fence = GeofenceValidator(HUB, radius_m=100)
    exact = GeofenceValidator(HUB, radius_m=fence.distance_m(edge.lat, edge.lng))

    assert exact.is_within_hub(edge.lat, edge.lng)


@pytest.mark.parametrize("meters, inside", [(99, True), (101, False)])
def test_one_meter_either_side_of_radius(meters, inside):
    fence = GeofenceValidator(HUB, radius_m=100)
    p = north_of(HUB, meters)

    assert fence.is_within_hub(p.lat, p.lng) is inside


def test_default_hub():
    fence = GeofenceValidator()

    assert fence.hub == Coordinate(6.5244, 3.3792)
    assert fence.radius_m == 100


@pytest.mark.parametrize(
    "lat, lng",
    [(91, 0), (-90.5, 0), (0, 180.1), (math.nan, 0), (0, math.inf), ("north", 0), (True, 0)],
)
def test_invalid_coordinates(lat, lng):
    fence = GeofenceValidator(HUB, radius_m=100)

    with pytest.raises(InvalidCoordinateError):
        fence.is_within_hub(lat, lng)


def test_coordinate_from_mapping_aliases():
    assert Coordinate.from_mapping({"latitude": "6.5", "longitude": 3.3}) == Coordinate(6.5, 3.3)

    with pytest.raises(InvalidCoordinateError):
        Coordinate.from_mapping({"lat": 6.5})
    with pytest.raises(InvalidCoordinateError):
        Coordinate.from_mapping(None)


def test_negative_radius():
    with pytest.raises(ValueError):
        GeofenceValidator(HUB, radius_m=-1)
