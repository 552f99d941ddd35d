"""Geographic helpers: bearings, great-circle distance, interpolation.

Convention:
    - Points are (lon, lat) in decimal degrees
    - Heading 0 = North, clockwise in degrees
    - Distances are meters on a spherical Earth

Bearings use the planar lon/lat delta rather than the spherical forward
azimuth.  Segments on the loop are a few hundred meters long, so the error
is far below what a map marker can show.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

EARTH_RADIUS_M = 6_371_000.0


@dataclass(frozen=True)
class GeoPoint:
    """A longitude/latitude pair in decimal degrees."""

    lon: float
    lat: float

    def to_dict(self) -> dict:
        return {"lon": self.lon, "lat": self.lat}


def bearing_degrees(frm: GeoPoint, to: GeoPoint) -> float:
    """Compass bearing from *frm* to *to*, in [0, 360).

    atan2(dx, dy) so that 0 = north (+lat) and 90 = east (+lon).
    Identical points give 0.
    """
    dx = to.lon - frm.lon
    dy = to.lat - frm.lat
    heading = math.degrees(math.atan2(dx, dy))
    if heading < 0:
        heading += 360.0
    # -0.0 and tiny negatives can round up to exactly 360
    if heading >= 360.0:
        heading -= 360.0
    return heading


def distance_meters(p1: GeoPoint, p2: GeoPoint) -> float:
    """Haversine great-circle distance in meters."""
    d_lat = math.radians(p2.lat - p1.lat)
    d_lon = math.radians(p2.lon - p1.lon)
    lat1 = math.radians(p1.lat)
    lat2 = math.radians(p2.lat)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def interpolate(p1: GeoPoint, p2: GeoPoint, t: float) -> GeoPoint:
    """Point at fraction *t* of the straight lon/lat line from *p1* to *p2*."""
    return GeoPoint(lon=lerp(p1.lon, p2.lon, t), lat=lerp(p1.lat, p2.lat, t))
