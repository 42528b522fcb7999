# geogroup/geo/centroid.py
from __future__ import annotations

import math
from typing import Sequence

from geogroup.geo.types import GeoPoint


# returned for an empty point set; not a real location
EMPTY_CENTROID = GeoPoint(0.0, 0.0)


def spherical_centroid(points: Sequence[GeoPoint]) -> GeoPoint:
    """
    Mean position of points on the sphere.

    Each point becomes a 3-D unit vector, the vectors are averaged and the
    result is converted back to lat/lon. Unlike a plain lat/lon average this
    behaves across the 180th meridian and near the poles.
    """
    if not points:
        return EMPTY_CENTROID

    x = y = z = 0.0
    for p in points:
        lat = math.radians(p.latitude)
        lon = math.radians(p.longitude)
        x += math.cos(lat) * math.cos(lon)
        y += math.cos(lat) * math.sin(lon)
        z += math.sin(lat)

    n = len(points)
    x, y, z = x / n, y / n, z / n

    lon = math.atan2(y, x)
    lat = math.atan2(z, math.sqrt(x * x + y * y))
    return GeoPoint(math.degrees(lat), math.degrees(lon))
