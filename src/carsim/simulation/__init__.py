"""Simulation subsystem: route, cars, motion, tick engine, snapshots."""
from .engine import INIT_EVENT, UPDATE_EVENT, SimulationEngine
from .fleet import DEFAULT_ROUTE, build_default_fleet
from .motion import advance
from .route import Route, RouteConfigError
from .snapshot import project_car, raw_state, serialize, serialize_init
from .vehicle import SimulatedCar

__all__ = [
    "DEFAULT_ROUTE",
    "INIT_EVENT",
    "Route",
    "RouteConfigError",
    "SimulatedCar",
    "SimulationEngine",
    "UPDATE_EVENT",
    "advance",
    "build_default_fleet",
    "project_car",
    "raw_state",
    "serialize",
    "serialize_init",
]
