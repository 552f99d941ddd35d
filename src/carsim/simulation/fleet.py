"""Static fleet data: the demo loop and the two cars that drive it."""

from __future__ import annotations

from .route import Route
from .vehicle import SimulatedCar

# (lon, lat): a ~350 m loop
DEFAULT_ROUTE = Route.from_lonlat([
    (101.119146, 12.688903),
    (101.118602, 12.689261),
    (101.1177763, 12.6895659),
    (101.1182391, 12.690386515),
    (101.119258, 12.689816),
    (101.118836, 12.68912555),
    (101.1191712, 12.688914),
])

# (id, name, driver, speed_factor, start_delay seconds)
_FLEET_TABLE: list[tuple[str, str, str, float, float]] = [
    ("car-1", "Tesla Model Y", "Fang", 0.005, 0.0),
    ("car-2", "Toyota Corolla", "Pang", 0.003, 4.0),
]


def build_default_fleet() -> list[SimulatedCar]:
    """Fresh, unplaced cars for the default loop."""
    return [
        SimulatedCar(
            car_id=car_id,
            name=name,
            driver=driver,
            speed_factor=speed_factor,
            start_delay=start_delay,
        )
        for car_id, name, driver, speed_factor, start_delay in _FLEET_TABLE
    ]
