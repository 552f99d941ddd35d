"""Tests for carsim.simulation.vehicle: SimulatedCar placement and activation."""

import pytest

from carsim.simulation.fleet import build_default_fleet
from carsim.simulation.route import Route
from carsim.simulation.vehicle import SimulatedCar

pytestmark = pytest.mark.unit

ROUTE = Route.from_lonlat([(0.0, 0.0), (0.0, 1.0), (1.0, 1.0)])


def _car(**kw) -> SimulatedCar:
    defaults = dict(car_id="c1", name="Test Car", driver="Tester", speed_factor=0.1)
    defaults.update(kw)
    return SimulatedCar(**defaults)


class TestValidation:
    @pytest.mark.parametrize("factor", [0.0, -0.1, 1.0, 1.5])
    def test_speed_factor_out_of_range(self, factor):
        with pytest.raises(ValueError, match="speed_factor"):
            _car(speed_factor=factor)

    def test_negative_start_delay(self):
        with pytest.raises(ValueError, match="start_delay"):
            _car(start_delay=-1.0)

    def test_defaults(self):
        car = _car()
        assert car.active is False
        assert car.segment_index == 0
        assert car.progress == 0.0
        assert car.heading is None
        assert car.speed_mps is None


class TestPlacement:
    def test_pinned_at_route_start(self):
        car = _car()
        car.place_on(ROUTE, started_at=1000.0)
        assert car.position == ROUTE.start
        assert car.previous_position == ROUTE.start
        assert car.last_tick_at == 1000.0

    def test_activation_deadline(self):
        car = _car(start_delay=4.0)
        car.place_on(ROUTE, started_at=1000.0)
        assert car.activate_at == 1004.0

    def test_place_resets_motion_state(self):
        car = _car()
        car.segment_index = 2
        car.progress = 0.7
        car.heading = 45.0
        car.speed_mps = 12.0
        car.place_on(ROUTE, started_at=0.0)
        assert (car.segment_index, car.progress) == (0, 0.0)
        assert car.heading is None
        assert car.speed_mps is None


class TestActivation:
    def test_not_due(self):
        car = _car(start_delay=4.0)
        car.place_on(ROUTE, started_at=0.0)
        assert car.activate_if_due(2.0) is False
        assert car.active is False

    def test_due_exactly_at_deadline(self):
        car = _car(start_delay=4.0)
        car.place_on(ROUTE, started_at=0.0)
        assert car.activate_if_due(4.0) is True
        assert car.active is True

    def test_flips_only_once(self):
        car = _car()
        car.place_on(ROUTE, started_at=0.0)
        assert car.activate_if_due(0.0) is True
        assert car.activate_if_due(10.0) is False
        assert car.active is True

    def test_unplaced_car_never_activates(self):
        car = _car()
        assert car.activate_if_due(1e12) is False
        assert car.active is False


class TestDefaultFleet:
    def test_two_cars(self):
        fleet = build_default_fleet()
        assert [c.car_id for c in fleet] == ["car-1", "car-2"]

    def test_second_car_delayed(self):
        fleet = {c.car_id: c for c in build_default_fleet()}
        assert fleet["car-1"].start_delay == 0.0
        assert fleet["car-2"].start_delay == 4.0
        assert fleet["car-2"].driver == "Pang"

    def test_fresh_instances(self):
        assert build_default_fleet()[0] is not build_default_fleet()[0]
