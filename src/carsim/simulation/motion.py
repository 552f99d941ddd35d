"""Per-tick motion: move a car one step along its segment of the loop."""

from __future__ import annotations

from carsim.geo import bearing_degrees, distance_meters, interpolate

from .route import Route
from .vehicle import SimulatedCar


def advance(car: SimulatedCar, route: Route, now: float) -> None:
    """Advance *car* by one tick's worth of motion at wall-clock time *now*.

    Progress grows by ``speed_factor``; crossing 1.0 keeps the overshoot and
    moves to the next segment.  Position is interpolated on the segment,
    heading follows the segment direction, and speed is the great-circle
    distance covered since the previous tick divided by the elapsed time.
    A non-positive elapsed time leaves the last speed in place.
    """
    if not car.active:
        return

    car.progress += car.speed_factor
    if car.progress >= 1.0:
        car.progress -= 1.0
        car.segment_index = (car.segment_index + 1) % len(route)

    p1, p2 = route.segment(car.segment_index)

    car.previous_position = car.position
    car.position = interpolate(p1, p2, car.progress)
    car.heading = bearing_degrees(p1, p2)

    dt = now - car.last_tick_at
    if dt > 0:
        car.speed_mps = distance_meters(car.previous_position, car.position) / dt

    car.last_tick_at = now
