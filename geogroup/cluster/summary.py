# geogroup/cluster/summary.py

from __future__ import annotations

from pathlib import Path
from typing import List

import numpy as np
import pandas as pd

from geogroup.cluster.cohesion import centroid_distances
from geogroup.geo.distance import haversine_miles, initial_bearing
from geogroup.geo.types import Cluster, GeoPoint


def clusters_to_frame(clusters: List[Cluster]) -> pd.DataFrame:
    """
    One row per point:
      - facility_id
      - cluster_id
      - latitude, longitude
    """
    rows = []
    for c in clusters:
        for p in c.points:
            rows.append(
                {
                    "facility_id": p.id,
                    "cluster_id": c.id,
                    "latitude": p.latitude,
                    "longitude": p.longitude,
                }
            )
    return pd.DataFrame(rows, columns=["facility_id", "cluster_id", "latitude", "longitude"])


def summarize_clusters(clusters: List[Cluster], home_base: GeoPoint) -> pd.DataFrame:
    """
    Per-cluster stats to sanity check a grouping (distances in miles).
    """
    rows = []
    for c in clusters:
        d = centroid_distances(c) if c.points else np.zeros(1)
        rows.append(
            {
                "cluster_id": c.id,
                "n_points": c.size,
                "centroid_lat": c.centroid.latitude,
                "centroid_lon": c.centroid.longitude,
                "home_dist_mi": haversine_miles(home_base, c.centroid),
                "home_bearing": initial_bearing(home_base, c.centroid),
                "mean_radius_mi": float(d.mean()),
                "max_radius_mi": float(d.max()),
            }
        )
    return pd.DataFrame(rows)


def write_clusters_csv(clusters: List[Cluster], out_csv: str | Path) -> Path:
    out_csv = Path(out_csv)
    out_csv.parent.mkdir(parents=True, exist_ok=True)

    clusters_to_frame(clusters).to_csv(out_csv, index=False)
    return out_csv
