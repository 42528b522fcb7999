# geogroup/cluster/merge.py
"""
Fold small neighbouring groups together so fewer visiting days are needed.

Clusters are walked nearest-to-home first.
Cluster i absorbs a later cluster j when:
  - the combined size still fits max_points_per_cluster
  - their centroids are within ADJACENCY_RATIO * the mean pairwise spacing
    inside the two clusters (always true when both are single points)
  - (optional) size * (visit + travel minutes) fits in max_hours_per_day
"""

from __future__ import annotations

import logging
from itertools import combinations
from typing import List, Optional

from geogroup.cluster.balance import order_by_home_distance
from geogroup.geo.distance import haversine_miles
from geogroup.geo.types import Cluster, GeoPoint, renumber


logger = logging.getLogger(__name__)

ADJACENCY_RATIO = 2.0


def mean_pairwise_distance(cluster: Cluster) -> float:
    if cluster.size <= 1:
        return 0.0
    dists = [haversine_miles(a, b) for a, b in combinations(cluster.points, 2)]
    return sum(dists) / len(dists)


def estimate_day_minutes(size: int, visit_minutes: float, travel_minutes: float) -> float:
    return float(size) * (float(visit_minutes) + float(travel_minutes))


def merge_adjacent_clusters(
    clusters: List[Cluster],
    max_points_per_cluster: int,
    home_base: GeoPoint,
    *,
    max_hours_per_day: Optional[float] = None,
    visit_minutes: float = 30.0,
    travel_minutes: float = 15.0,
) -> List[Cluster]:
    clusters = order_by_home_distance(clusters, home_base)
    merged: List[Cluster] = []
    used = set()

    for i, base in enumerate(clusters):
        if i in used:
            continue
        used.add(i)

        current = Cluster.from_points(base.points)
        current_spacing = mean_pairwise_distance(current)

        for j in range(i + 1, len(clusters)):
            if j in used:
                continue
            candidate = clusters[j]

            combined = current.size + candidate.size
            if combined > max_points_per_cluster:
                continue

            avg_intra = (current_spacing + mean_pairwise_distance(candidate)) / 2.0
            gap = haversine_miles(current.centroid, candidate.centroid)
            if avg_intra > 0 and gap > ADJACENCY_RATIO * avg_intra:
                continue

            if max_hours_per_day is not None:
                minutes = estimate_day_minutes(combined, visit_minutes, travel_minutes)
                if minutes > float(max_hours_per_day) * 60.0:
                    continue

            current = Cluster.from_points(current.points + candidate.points)
            current_spacing = mean_pairwise_distance(current)
            used.add(j)

        merged.append(current)

    if len(merged) < len(clusters):
        logger.info("merge: %d clusters -> %d", len(clusters), len(merged))

    return renumber(order_by_home_distance(merged, home_base))
