# geogroup/cluster/overload.py
"""
Capacity enforcement.

Any cluster holding more than max_points_per_cluster points is re-clustered
on its own with k = ceil(size / capacity), a fixed high tightness and a
shorter iteration cap, then balanced. Sub-clusters that are still too big go
round again. Everything finally goes through the cohesion pass, which only
ever splits, so capacity holds on the way out.
"""

from __future__ import annotations

import logging
import math
import random
from typing import List, Optional

from geogroup.cluster.balance import balance_clusters
from geogroup.cluster.cohesion import centroid_distances, validate_cohesion
from geogroup.cluster.partition import partition
from geogroup.errors import InvalidCapacityError
from geogroup.geo.types import Cluster, GeoPoint, renumber


logger = logging.getLogger(__name__)

SUBCLUSTER_MAX_ITERATIONS = 30
SUBCLUSTER_TIGHTNESS = 0.8


def _chunk_by_radius(cluster: Cluster, max_points_per_cluster: int) -> List[Cluster]:
    """
    Last-resort split for clusters k-means cannot separate (e.g. every
    point on one coordinate): capacity-sized slices ordered by distance
    from the centroid.
    """
    order = centroid_distances(cluster).argsort(kind="stable")
    pts = [cluster.points[i] for i in order]
    return [
        Cluster.from_points(pts[i:i + max_points_per_cluster])
        for i in range(0, len(pts), max_points_per_cluster)
    ]


def _split_one(
    cluster: Cluster,
    max_points_per_cluster: int,
    home_base: GeoPoint,
    balance_weight: float,
    rng: random.Random,
) -> List[Cluster]:
    sub_count = math.ceil(cluster.size / max_points_per_cluster)
    subs = partition(
        cluster.points,
        sub_count,
        max_iterations=SUBCLUSTER_MAX_ITERATIONS,
        tightness=SUBCLUSTER_TIGHTNESS,
        rng=rng,
    )
    subs = balance_clusters(subs, max_points_per_cluster, home_base, balance_weight)
    subs = [s for s in subs if s.points]

    if len(subs) <= 1:
        logger.debug(
            "overload: k-means could not separate %d points, chunking", cluster.size
        )
        return _chunk_by_radius(cluster, max_points_per_cluster)

    out: List[Cluster] = []
    for s in subs:
        if s.size > max_points_per_cluster:
            out.extend(_split_one(s, max_points_per_cluster, home_base, balance_weight, rng))
        else:
            out.append(s)
    return out


def split_overloaded(
    clusters: List[Cluster],
    max_points_per_cluster: int,
    home_base: GeoPoint,
    balance_weight: float = 0.35,
    rng: Optional[random.Random] = None,
) -> List[Cluster]:
    if max_points_per_cluster < 1:
        raise InvalidCapacityError(max_points_per_cluster)

    overloaded = [c for c in clusters if c.size > max_points_per_cluster]
    if not overloaded:
        # size and geographic cohesion are independent concerns
        return validate_cohesion(clusters, home_base)

    if rng is None:
        rng = random.Random()

    logger.info(
        "overload: %d of %d clusters exceed %d points",
        len(overloaded), len(clusters), max_points_per_cluster,
    )

    out: List[Cluster] = []
    for c in clusters:
        if c.size <= max_points_per_cluster:
            out.append(c)
            continue
        out.extend(_split_one(c, max_points_per_cluster, home_base, balance_weight, rng))

    return validate_cohesion(renumber(out), home_base)
