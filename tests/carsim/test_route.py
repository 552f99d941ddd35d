"""Tests for carsim.simulation.route: the shared cyclic loop."""

import pytest

from carsim.geo import GeoPoint
from carsim.simulation.fleet import DEFAULT_ROUTE
from carsim.simulation.route import Route, RouteConfigError

pytestmark = pytest.mark.unit


def _square() -> Route:
    return Route.from_lonlat([(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)])


class TestConstruction:
    def test_empty_rejected(self):
        with pytest.raises(RouteConfigError):
            Route([])

    def test_single_waypoint_rejected(self):
        with pytest.raises(RouteConfigError, match="at least 2"):
            Route([GeoPoint(lon=0.0, lat=0.0)])

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            Route.from_lonlat([(1.0, 2.0)])

    def test_two_waypoints_accepted(self):
        route = Route.from_lonlat([(0.0, 0.0), (0.0, 1.0)])
        assert len(route) == 2

    def test_from_lonlat_order(self):
        route = Route.from_lonlat([(101.0, 12.0), (102.0, 13.0)])
        assert route.start == GeoPoint(lon=101.0, lat=12.0)

    def test_accepts_generator(self):
        route = Route(GeoPoint(lon=float(i), lat=0.0) for i in range(3))
        assert len(route) == 3

    def test_source_list_mutation_does_not_leak(self):
        points = [GeoPoint(lon=0.0, lat=0.0), GeoPoint(lon=0.0, lat=1.0)]
        route = Route(points)
        points.append(GeoPoint(lon=5.0, lat=5.0))
        assert len(route) == 2


class TestIndexing:
    def test_index_wraps(self):
        route = _square()
        assert route[4] == route[0]
        assert route[5] == route[1]

    def test_segment_endpoints(self):
        route = _square()
        assert route.segment(1) == (GeoPoint(lon=0.0, lat=1.0), GeoPoint(lon=1.0, lat=1.0))

    def test_last_segment_closes_loop(self):
        route = _square()
        p1, p2 = route.segment(3)
        assert p1 == GeoPoint(lon=1.0, lat=0.0)
        assert p2 == route.start

    def test_iteration_in_order(self):
        assert [p.lat for p in _square()] == [0.0, 1.0, 1.0, 0.0]

    def test_to_list(self):
        assert _square().to_list()[1] == {"lon": 0.0, "lat": 1.0}

    def test_no_attribute_assignment(self):
        route = _square()
        with pytest.raises(AttributeError):
            route.extra = 1  # type: ignore[attr-defined]


class TestDefaultRoute:
    def test_has_seven_waypoints(self):
        assert len(DEFAULT_ROUTE) == 7

    def test_starts_at_first_loop_point(self):
        assert DEFAULT_ROUTE.start == GeoPoint(lon=101.119146, lat=12.688903)
