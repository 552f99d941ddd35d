"""Route: the closed loop of waypoints every car drives.

A Route is built once at startup and shared by reference across the whole
fleet.  It is read-only: the tuple of waypoints never changes, and all
indexing wraps modulo the waypoint count so the last waypoint connects back
to the first.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from carsim.geo import GeoPoint


class RouteConfigError(ValueError):
    """Raised when a route cannot form a loop (fewer than two waypoints)."""


class Route:
    """Immutable cyclic sequence of waypoints."""

    __slots__ = ("_waypoints",)

    def __init__(self, waypoints: Iterable[GeoPoint]) -> None:
        points = tuple(waypoints)
        if len(points) < 2:
            raise RouteConfigError(
                f"Route needs at least 2 waypoints, got {len(points)}"
            )
        self._waypoints = points

    @classmethod
    def from_lonlat(cls, pairs: Iterable[tuple[float, float]]) -> Route:
        """Build a route from ``(lon, lat)`` tuples."""
        return cls(GeoPoint(lon=lon, lat=lat) for lon, lat in pairs)

    def __len__(self) -> int:
        return len(self._waypoints)

    def __getitem__(self, index: int) -> GeoPoint:
        return self._waypoints[index % len(self._waypoints)]

    def __iter__(self) -> Iterator[GeoPoint]:
        return iter(self._waypoints)

    def __repr__(self) -> str:
        return f"Route({len(self._waypoints)} waypoints)"

    @property
    def start(self) -> GeoPoint:
        return self._waypoints[0]

    @property
    def waypoints(self) -> tuple[GeoPoint, ...]:
        return self._waypoints

    def segment(self, index: int) -> tuple[GeoPoint, GeoPoint]:
        """Endpoints of segment *index*: waypoint index -> index + 1 (wrapping)."""
        return self[index], self[index + 1]

    def to_list(self) -> list[dict]:
        return [p.to_dict() for p in self._waypoints]
