# geogroup/geo/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, List, Optional


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float
    id: Optional[Hashable] = None


@dataclass
class Cluster:
    """
    A group of points with its spherical centroid.

    id is None while a cluster is pending renumbering (freshly split);
    clusters handed back to callers always carry dense ids 0..N-1.
    """
    centroid: GeoPoint
    points: List[GeoPoint] = field(default_factory=list)
    id: Optional[int] = None

    @property
    def size(self) -> int:
        return len(self.points)

    def refresh(self) -> None:
        # local import: centroid.py imports GeoPoint from here
        from geogroup.geo.centroid import spherical_centroid

        self.centroid = spherical_centroid(self.points)

    @classmethod
    def from_points(cls, points, id: Optional[int] = None) -> "Cluster":
        c = cls(centroid=GeoPoint(0.0, 0.0), points=list(points), id=id)
        c.refresh()
        return c


def renumber(clusters: List[Cluster]) -> List[Cluster]:
    """Assign dense ids 0..N-1 in list order, resolving any pending ids."""
    for i, c in enumerate(clusters):
        c.id = i
    return clusters
