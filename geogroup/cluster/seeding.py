# geogroup/cluster/seeding.py
"""
k-means++ seeding on the sphere.

The first seed is uniform; every later seed is drawn with probability
proportional to the squared distance to its nearest already-chosen seed, so
seeds tend to land in different regions instead of starving one of them.
"""

from __future__ import annotations

import random
from typing import List, Sequence

from geogroup.geo.distance import haversine_miles
from geogroup.geo.types import GeoPoint


def kmeans_plus_plus(
    points: Sequence[GeoPoint],
    k: int,
    rng: random.Random,
) -> List[GeoPoint]:
    n = len(points)
    if n == 0 or k <= 0:
        return []

    seeds: List[GeoPoint] = [points[rng.randrange(n)]]

    # nearest-seed distance per point, updated incrementally
    nearest = [haversine_miles(p, seeds[0]) for p in points]

    for i in range(1, k):
        weights = [d * d for d in nearest]
        total = sum(weights)

        picked = None
        r = rng.random() * total
        for j, w in enumerate(weights):
            r -= w
            if r <= 0:
                picked = points[j]
                break

        # rounding can leave r slightly positive after the last weight
        if picked is None:
            picked = points[(i * n) // k]

        seeds.append(picked)
        for j, p in enumerate(points):
            d = haversine_miles(p, picked)
            if d < nearest[j]:
                nearest[j] = d

    return seeds
