"""SimulatedCar: one car driving the shared loop.

Architecture
------------
SimulatedCar is a flat dataclass.  It carries two kinds of state:

  - Intrinsic, fixed at construction: id, name, driver, speed_factor
    (fraction of a segment covered per tick) and start_delay (seconds
    after simulation start before the car moves).
  - Motion state, written only by ``motion.advance`` and
    ``activate_if_due``: segment_index, progress, position,
    previous_position, heading, speed_mps, last_tick_at, active.

Activation is a deadline, not a timer: ``place_on`` stamps
``activate_at = started_at + start_delay`` and the engine checks it at the
top of every tick.  That keeps every state transition on the tick thread.

Heading and speed are ``None`` until the first active tick computes them;
serializers map ``None`` to 0.
"""

from __future__ import annotations

from dataclasses import dataclass

from carsim.geo import GeoPoint

from .route import Route


@dataclass
class SimulatedCar:
    """A single simulated car.

    Lifecycle:
      placed (inactive, pinned at route start) -> active (moving) forever
    """

    car_id: str
    name: str
    driver: str
    speed_factor: float  # fraction of a segment per tick, 0 < s < 1
    start_delay: float = 0.0  # seconds after simulation start

    segment_index: int = 0
    progress: float = 0.0  # [0, 1) along the current segment
    active: bool = False
    activate_at: float | None = None  # absolute epoch seconds
    position: GeoPoint | None = None
    previous_position: GeoPoint | None = None
    heading: float | None = None  # degrees, 0 = north, clockwise
    speed_mps: float | None = None
    last_tick_at: float = 0.0  # epoch seconds

    def __post_init__(self) -> None:
        # Factors >= 1 would need multiple segment wraps per tick.
        if not 0.0 < self.speed_factor < 1.0:
            raise ValueError(
                f"{self.car_id}: speed_factor must be in (0, 1), got {self.speed_factor}"
            )
        if self.start_delay < 0:
            raise ValueError(
                f"{self.car_id}: start_delay must be >= 0, got {self.start_delay}"
            )

    def place_on(self, route: Route, started_at: float) -> None:
        """Reset to the route start and arm the activation deadline."""
        self.segment_index = 0
        self.progress = 0.0
        self.active = False
        self.position = route.start
        self.previous_position = route.start
        self.heading = None
        self.speed_mps = None
        self.last_tick_at = started_at
        self.activate_at = started_at + self.start_delay

    def activate_if_due(self, now: float) -> bool:
        """Flip ``active`` once the deadline has passed. Returns True on the flip."""
        if self.active or self.activate_at is None:
            return False
        if now >= self.activate_at:
            self.active = True
            return True
        return False
