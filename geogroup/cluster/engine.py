# geogroup/cluster/engine.py
"""
Top-level grouping of facility points into size-bounded, geographically
coherent groups (one group per visiting day/team).

Pipeline:
  1) k from capacity (bumped up with tightness)
  2) weighted k-means (partition.py)
  3) split anything over capacity, balance, cohesion pass (overload.py)

Route sequencing and visit timing happen downstream; this stops at groups.
"""

from __future__ import annotations

import logging
import math
import random
from typing import List, Optional, Sequence

from geogroup.cluster.balance import order_by_home_distance as _order
from geogroup.cluster.merge import merge_adjacent_clusters
from geogroup.cluster.overload import split_overloaded
from geogroup.cluster.partition import partition
from geogroup.config import ClusteringConfig
from geogroup.errors import InvalidCapacityError
from geogroup.geo.types import Cluster, GeoPoint, renumber


logger = logging.getLogger(__name__)


def estimate_cluster_count(
    points: Sequence[GeoPoint],
    max_points_per_cluster: int,
    max_clusters: Optional[int] = None,
) -> int:
    """Fewest groups that can hold every point, optionally capped."""
    if len(points) <= max_points_per_cluster:
        return 1
    k = math.ceil(len(points) / max_points_per_cluster)
    if max_clusters and k > max_clusters:
        return int(max_clusters)
    return k


def tightness_adjusted_k(base_k: int, tightness: float) -> int:
    # tighter grouping asks for more, smaller clusters up front
    return max(base_k, int(math.floor(base_k * (0.5 + float(tightness)))))


def order_by_home_distance(clusters: List[Cluster], home_base: GeoPoint) -> List[Cluster]:
    return renumber(_order(clusters, home_base))


def cluster_points(
    points: Sequence[GeoPoint],
    max_points_per_cluster: int,
    home_base: GeoPoint,
    tightness: float = 0.5,
    balance_weight: float = 0.35,
    *,
    max_iterations: int = 50,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> List[Cluster]:
    """
    Group points into clusters of at most max_points_per_cluster.

    max_points_per_cluster < 1 raises InvalidCapacityError. Empty input gives
    an empty list; if everything fits in one group a single cluster comes
    back without any clustering work. Pass rng (or seed) for reproducible
    k-means++ seeding; rng wins if both are given.
    """
    if max_points_per_cluster < 1:
        raise InvalidCapacityError(max_points_per_cluster)

    pts = list(points)
    if not pts:
        return []
    if len(pts) <= max_points_per_cluster:
        return [Cluster.from_points(pts, id=0)]

    if rng is None:
        rng = random.Random(seed)

    base_k = estimate_cluster_count(pts, max_points_per_cluster)
    k = tightness_adjusted_k(base_k, tightness)

    clusters = partition(pts, k, max_iterations=max_iterations, tightness=tightness, rng=rng)
    clusters = split_overloaded(clusters, max_points_per_cluster, home_base, balance_weight, rng=rng)

    logger.info(
        "clustered %d points into %d groups (k=%d, cap=%d, tightness=%.2f, balance=%.2f)",
        len(pts), len(clusters), k, max_points_per_cluster, tightness, balance_weight,
    )
    return clusters


def plan_groups(
    points: Sequence[GeoPoint],
    config: ClusteringConfig,
    *,
    merge: bool = True,
    rng: Optional[random.Random] = None,
) -> List[Cluster]:
    """
    cluster_points with settings from a ClusteringConfig, optionally merging
    small neighbouring groups, ordered nearest-to-home first.
    """
    home = config.home_base
    clusters = cluster_points(
        points,
        config.max_points_per_cluster,
        home,
        config.tightness,
        config.balance_weight,
        max_iterations=config.max_iterations,
        seed=config.seed,
        rng=rng,
    )
    if merge:
        return merge_adjacent_clusters(
            clusters,
            config.max_points_per_cluster,
            home,
            max_hours_per_day=config.max_hours_per_day,
            visit_minutes=config.visit_minutes,
            travel_minutes=config.travel_minutes,
        )
    return order_by_home_distance(clusters, home)
