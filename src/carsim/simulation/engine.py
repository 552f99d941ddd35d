"""SimulationEngine: 10 Hz tick loop driving the car fleet.

Architecture
------------
The engine is the sole owner of every SimulatedCar.  One daemon thread
(``sim-tick``) sleeps ``tick_interval`` seconds, then runs ``tick()``:

  1. For every car, check its activation deadline, then ``advance`` it
     one step along the shared Route.
  2. Project the fleet into a rounded snapshot and publish it on the
     EventBus as ``location:update``.

Ticks run back to back on a single thread, so they never overlap; a slow
tick delays the next one instead of racing it.  All reads from other
threads (HTTP handlers, WebSocket connect) go through the same lock the
tick holds while mutating, so a reader never sees a half-advanced car.

Data flow:
  Engine --(location:update)--> EventBus --(ws bridge)--> WebSocket clients
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Iterable

from loguru import logger

from carsim.comms.event_bus import EventBus

from .motion import advance
from .route import Route
from .snapshot import raw_state, serialize, serialize_init
from .vehicle import SimulatedCar

DEFAULT_TICK_INTERVAL = 0.1  # seconds

UPDATE_EVENT = "location:update"
INIT_EVENT = "location:init"


class SimulationEngine:
    """Drives simulated cars around a loop and publishes snapshots."""

    def __init__(
        self,
        route: Route,
        cars: Iterable[SimulatedCar],
        event_bus: EventBus | None = None,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if tick_interval <= 0:
            raise ValueError(f"tick_interval must be > 0, got {tick_interval}")
        self._route = route
        self._event_bus = event_bus if event_bus is not None else EventBus()
        self._tick_interval = tick_interval
        self._clock = clock
        self._lock = threading.Lock()
        self._running = False
        self._thread: threading.Thread | None = None
        self._tick_count = 0
        self._last_snapshot: dict | None = None

        self._started_at = clock()
        self._cars: dict[str, SimulatedCar] = {}
        for car in cars:
            if car.car_id in self._cars:
                raise ValueError(f"Duplicate car id: {car.car_id}")
            car.place_on(route, self._started_at)
            self._cars[car.car_id] = car

    # -- Accessors ----------------------------------------------------------

    @property
    def route(self) -> Route:
        return self._route

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def tick_interval(self) -> float:
        return self._tick_interval

    @property
    def started_at(self) -> float:
        return self._started_at

    @property
    def tick_count(self) -> int:
        return self._tick_count

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def last_snapshot(self) -> dict | None:
        return self._last_snapshot

    def get_cars(self) -> list[SimulatedCar]:
        with self._lock:
            return list(self._cars.values())

    def get_car(self, car_id: str) -> SimulatedCar | None:
        with self._lock:
            return self._cars.get(car_id)

    # -- Projections ----------------------------------------------------------

    def snapshot(self, now: float | None = None) -> dict:
        """Rounded fleet snapshot without advancing the simulation."""
        if now is None:
            now = self._clock()
        with self._lock:
            return serialize(self._cars.values(), int(now * 1000))

    def init_payload(self) -> list[dict]:
        """The ``location:init`` list for a newly connected subscriber."""
        with self._lock:
            return serialize_init(self._cars.values())

    def raw_state(self) -> list[dict]:
        with self._lock:
            return raw_state(self._cars.values())

    def car_state(self, car_id: str) -> dict | None:
        with self._lock:
            car = self._cars.get(car_id)
            if car is None:
                return None
            return raw_state([car])[0]

    # -- Lifecycle ----------------------------------------------------------

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(
            target=self._tick_loop, name="sim-tick", daemon=True
        )
        self._thread.start()
        logger.info(
            f"Simulation started: {len(self._cars)} cars, "
            f"{len(self._route)} waypoints, {1 / self._tick_interval:.0f} Hz"
        )

    def stop(self) -> None:
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        logger.info(f"Simulation stopped after {self._tick_count} ticks")

    # -- Tick loop ----------------------------------------------------------

    def _tick_loop(self) -> None:
        while self._running:
            time.sleep(self._tick_interval)
            if not self._running:
                break
            self.tick()

    def tick(self, now: float | None = None) -> dict:
        """Advance every car one step and publish the resulting snapshot."""
        if now is None:
            now = self._clock()
        with self._lock:
            for car in self._cars.values():
                if car.activate_if_due(now):
                    logger.info(
                        f"{car.car_id} ({car.name}) started after {car.start_delay:.1f}s"
                    )
                advance(car, self._route, now)
            snapshot = serialize(self._cars.values(), int(now * 1000))
            self._tick_count += 1
            self._last_snapshot = snapshot
        self._event_bus.publish(UPDATE_EVENT, snapshot)
        return snapshot
