# geogroup/cluster/cohesion.py
"""
Geographic sanity pass over a finished set of clusters.

k-means only minimises spread; it will happily return a group with points
on both sides of the depot, which makes for a terrible one-way daily loop.
Two checks, in order, per cluster with more than one point:

  stretch: max distance to centroid > STRETCH_RATIO * mean distance
           -> split into the closer half and the farther half
  fan-out: bearings from home base span more than MAX_BEARING_SPAN degrees
           -> split by angular distance to the mid bearing of the extremes

Each cluster is split at most once per call. Split products are pending
(id None) until the final renumbering.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import numpy as np

from geogroup.geo.distance import angular_difference, haversine_miles, initial_bearing
from geogroup.geo.types import Cluster, GeoPoint, renumber


logger = logging.getLogger(__name__)

STRETCH_RATIO = 3.0
MAX_BEARING_SPAN = 100.0
NEAR_BEARING = 90.0


def centroid_distances(cluster: Cluster) -> np.ndarray:
    return np.array(
        [haversine_miles(p, cluster.centroid) for p in cluster.points],
        dtype=np.float64,
    )


def _split_stretched(cluster: Cluster, dists: np.ndarray) -> List[Cluster]:
    order = np.argsort(dists, kind="stable")
    mid = len(order) // 2
    close = [cluster.points[i] for i in order[:mid]]
    far = [cluster.points[i] for i in order[mid:]]
    return [Cluster.from_points(half) for half in (close, far) if half]


def bearing_span(bearings: Sequence[float]) -> float:
    """Angular span of sorted bearings, measured the short way round."""
    raw = bearings[-1] - bearings[0]
    return min(raw, 360.0 - raw)


def _split_fanned(points: List[GeoPoint], bearings: List[float]) -> List[Cluster]:
    mid_bearing = (bearings[0] + bearings[-1]) / 2.0

    near: List[GeoPoint] = []
    far: List[GeoPoint] = []
    for p, b in zip(points, bearings):
        if angular_difference(b, mid_bearing) < NEAR_BEARING:
            near.append(p)
        else:
            far.append(p)

    return [Cluster.from_points(bucket) for bucket in (near, far) if bucket]


def validate_cohesion(clusters: Sequence[Cluster], home_base: GeoPoint) -> List[Cluster]:
    out: List[Cluster] = []
    stretched = fanned = 0

    for cluster in clusters:
        if cluster.size <= 1:
            out.append(cluster)
            continue

        dists = centroid_distances(cluster)
        if dists.max() > STRETCH_RATIO * dists.mean():
            out.extend(_split_stretched(cluster, dists))
            stretched += 1
            continue

        with_bearing = sorted(
            ((initial_bearing(home_base, p), p) for p in cluster.points),
            key=lambda bp: bp[0],
        )
        bearings = [b for b, _ in with_bearing]
        if bearing_span(bearings) > MAX_BEARING_SPAN:
            out.extend(_split_fanned([p for _, p in with_bearing], bearings))
            fanned += 1
        else:
            out.append(cluster)

    if stretched or fanned:
        logger.info(
            "cohesion: split %d stretched and %d fanned-out clusters (%d -> %d)",
            stretched, fanned, len(clusters), len(out),
        )

    return renumber(out)
