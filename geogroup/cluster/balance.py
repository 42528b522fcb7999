# geogroup/cluster/balance.py
"""
Size balancing between neighbouring clusters.

Clusters are ordered by how far their centroid is from home base, and points
only ever move forward, from a cluster to the next one in that order. A
receiving cluster accepts a point only if it lands within
RADIUS_SLACK * its own 95th-percentile radius, so balancing cannot drag a
group's boundary out indefinitely.
"""

from __future__ import annotations

import logging
from typing import List

from geogroup.cluster.cohesion import centroid_distances
from geogroup.geo.distance import haversine_miles
from geogroup.geo.types import Cluster, GeoPoint


logger = logging.getLogger(__name__)

MIN_BALANCE_WEIGHT = 0.6
RADIUS_SLACK = 1.5
RADIUS_PERCENTILE = 0.95


def percentile_radius(cluster: Cluster, q: float = RADIUS_PERCENTILE) -> float:
    """Point-to-centroid distance at sorted index floor(n * q)."""
    if not cluster.points:
        return 0.0
    dists = sorted(centroid_distances(cluster).tolist())
    idx = min(int(len(dists) * q), len(dists) - 1)
    return float(dists[idx])


def order_by_home_distance(clusters: List[Cluster], home_base: GeoPoint) -> List[Cluster]:
    return sorted(clusters, key=lambda c: haversine_miles(home_base, c.centroid))


def _nearest_index(cluster: Cluster, target: GeoPoint) -> int:
    best_i = -1
    best_d = float("inf")
    for i, p in enumerate(cluster.points):
        d = haversine_miles(p, target)
        if d < best_d:
            best_d = d
            best_i = i
    return best_i


def balance_clusters(
    clusters: List[Cluster],
    max_points_per_cluster: int,
    home_base: GeoPoint,
    balance_weight: float = 0.35,
) -> List[Cluster]:
    """
    Returns the clusters ordered by home-base distance; below
    MIN_BALANCE_WEIGHT nothing moves.
    """
    if not clusters:
        return []

    ordered = order_by_home_distance(clusters, home_base)
    if balance_weight < MIN_BALANCE_WEIGHT:
        return ordered

    avg_size = sum(c.size for c in ordered) / len(ordered)
    moved = 0

    for current, nxt in zip(ordered, ordered[1:]):
        max_radius = percentile_radius(nxt) * RADIUS_SLACK

        while (
            current.size > avg_size
            and nxt.size < max_points_per_cluster
            and current.size > nxt.size + 1
        ):
            idx = _nearest_index(current, nxt.centroid)
            if idx < 0:
                break

            candidate = current.points[idx]
            if haversine_miles(candidate, nxt.centroid) > max_radius:
                # nearest candidate already too far; others are farther
                break

            current.points.pop(idx)
            nxt.points.append(candidate)
            current.refresh()
            nxt.refresh()
            moved += 1

    if moved:
        logger.debug("balance: moved %d points across %d clusters", moved, len(ordered))

    return ordered
