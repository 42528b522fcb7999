# geogroup/geo/distance.py
"""
Great-circle helpers.

Distances are statute miles unless the name says otherwise; bearings are
degrees clockwise from north in [0, 360).
"""

from __future__ import annotations

import math

from geogroup.geo.types import GeoPoint


EARTH_RADIUS_MI = 3959.0
EARTH_RADIUS_KM = 6371.0


def _haversine(a: GeoPoint, b: GeoPoint, r: float) -> float:
    p1 = math.radians(a.latitude)
    p2 = math.radians(b.latitude)
    dphi = math.radians(b.latitude - a.latitude)
    dl = math.radians(b.longitude - a.longitude)
    x = math.sin(dphi / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dl / 2) ** 2
    # rounding can push x just past 1 for near-antipodal pairs
    x = min(1.0, max(0.0, x))
    return r * 2 * math.atan2(math.sqrt(x), math.sqrt(1 - x))


def haversine_miles(a: GeoPoint, b: GeoPoint) -> float:
    return _haversine(a, b, EARTH_RADIUS_MI)


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    return _haversine(a, b, EARTH_RADIUS_KM)


def initial_bearing(origin: GeoPoint, target: GeoPoint) -> float:
    """Initial compass bearing from origin towards target, in [0, 360)."""
    lat1 = math.radians(origin.latitude)
    lat2 = math.radians(target.latitude)
    dl = math.radians(target.longitude - origin.longitude)

    y = math.sin(dl) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dl)

    bearing = math.degrees(math.atan2(y, x))
    return (bearing + 360.0) % 360.0


def angular_difference(a: float, b: float) -> float:
    """Smallest angle between two bearings, in [0, 180]."""
    diff = abs(a - b) % 360.0
    return min(diff, 360.0 - diff)
