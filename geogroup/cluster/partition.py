# geogroup/cluster/partition.py
"""
Weighted k-means over geo points.

Assignment cost is distance ** (1 + 4 * tightness) rather than the usual
squared distance:
  tightness 0 -> exponent 1 (plain nearest centroid)
  tightness 1 -> exponent 5 (far points are heavily penalised; groups come
                 out compact, possibly uneven in size)
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence

from geogroup.cluster.seeding import kmeans_plus_plus
from geogroup.geo.centroid import spherical_centroid
from geogroup.geo.distance import haversine_miles
from geogroup.geo.types import Cluster, GeoPoint


logger = logging.getLogger(__name__)

CONVERGENCE_MILES = 0.001


def distance_exponent(tightness: float) -> float:
    return 1.0 + 4.0 * float(tightness)


def singleton_clusters(points: Sequence[GeoPoint]) -> List[Cluster]:
    return [
        Cluster(centroid=GeoPoint(p.latitude, p.longitude), points=[p], id=i)
        for i, p in enumerate(points)
    ]


def partition(
    points: Sequence[GeoPoint],
    k: int,
    max_iterations: int = 50,
    tightness: float = 0.75,
    rng: Optional[random.Random] = None,
) -> List[Cluster]:
    """
    Split points into at most k clusters.

    With len(points) <= k every point becomes its own cluster and no
    iteration runs. Seeds that attract no points are dropped, so fewer than
    k clusters may come back. Hitting max_iterations without converging is
    not an error; the last state is returned.
    """
    if not points:
        return []
    k = max(1, int(k))
    if len(points) <= k:
        return singleton_clusters(points)

    if rng is None:
        rng = random.Random()

    exponent = distance_exponent(tightness)
    seeds = kmeans_plus_plus(points, k, rng)
    clusters = [Cluster(centroid=s, points=[], id=i) for i, s in enumerate(seeds)]

    iterations = 0
    converged = False
    # at least one assignment pass, otherwise every point would be dropped
    for _ in range(max(1, int(max_iterations))):
        iterations += 1

        for c in clusters:
            c.points = []

        for p in points:
            best_score = float("inf")
            best_i = 0
            for i, c in enumerate(clusters):
                score = haversine_miles(p, c.centroid) ** exponent
                if score < best_score:
                    best_score = score
                    best_i = i
            clusters[best_i].points.append(p)

        converged = True
        for c in clusters:
            if not c.points:
                continue  # keeps its previous centroid
            new_centroid = spherical_centroid(c.points)
            if haversine_miles(c.centroid, new_centroid) > CONVERGENCE_MILES:
                converged = False
            c.centroid = new_centroid

        if converged:
            break

    logger.debug(
        "partition: n=%d k=%d exponent=%.2f iterations=%d converged=%s",
        len(points), k, exponent, iterations, converged,
    )

    out = [c for c in clusters if c.points]
    for i, c in enumerate(out):
        c.id = i
    return out
