"""Wire projections of fleet state.

Three shapes leave the process:

  - ``serialize``: the per-tick ``location:update`` payload.  Coordinates
    are rounded to 6 decimals (~0.1 m), heading to whole degrees and speed
    converted to km/h with one decimal.
  - ``serialize_init``: the ``location:init`` list sent once to a new
    subscriber.  Same keys; coordinates and heading are the live values,
    speed is rounded once.
  - ``raw_state``: the unrounded internal state served by ``GET /cars``.

All three are pure functions of the car state they are given.
"""

from __future__ import annotations

import math
from typing import Iterable

from .vehicle import SimulatedCar

MPS_TO_KMH = 3.6


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def speed_kmh(car: SimulatedCar) -> float:
    if car.speed_mps is None:
        return 0.0
    return round(car.speed_mps * MPS_TO_KMH, 1)


def project_car(car: SimulatedCar) -> dict:
    """Rounded per-car projection used in ``location:update``."""
    return {
        "id": car.car_id,
        "name": car.name,
        "driver": car.driver,
        "lat": round(car.position.lat, 6),
        "lon": round(car.position.lon, 6),
        "heading": _round_half_up(car.heading) if car.heading is not None else 0,
        "speed": speed_kmh(car),
    }


def serialize(cars: Iterable[SimulatedCar], timestamp_ms: int) -> dict:
    """Snapshot of the whole fleet at *timestamp_ms* (epoch milliseconds)."""
    return {
        "timestamp": timestamp_ms,
        "cars": [project_car(c) for c in cars],
    }


def serialize_init(cars: Iterable[SimulatedCar]) -> list[dict]:
    """Connect-time projection sent as ``location:init``."""
    return [
        {
            "id": c.car_id,
            "name": c.name,
            "driver": c.driver,
            "lat": c.position.lat,
            "lon": c.position.lon,
            "heading": c.heading if c.heading is not None else 0,
            "speed": speed_kmh(c),
        }
        for c in cars
    ]


def raw_state(cars: Iterable[SimulatedCar]) -> list[dict]:
    """Full unrounded internal state, for bootstrap and debugging."""
    out = []
    for c in cars:
        out.append({
            "id": c.car_id,
            "name": c.name,
            "driver": c.driver,
            "segment_index": c.segment_index,
            "progress": c.progress,
            "speed_factor": c.speed_factor,
            "start_delay": c.start_delay,
            "active": c.active,
            "lat": c.position.lat,
            "lon": c.position.lon,
            "prev_lat": c.previous_position.lat,
            "prev_lon": c.previous_position.lon,
            "heading": c.heading,
            "velocity": c.speed_mps,
            "last_update": int(c.last_tick_at * 1000),
        })
    return out
