# geogroup/viz/app/clusters.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import folium
import pandas as pd
from flask import Flask

from geogroup.cluster.engine import plan_groups
from geogroup.cluster.summary import clusters_to_frame, summarize_clusters
from geogroup.config import ClusteringConfig
from geogroup.geo.types import Cluster, GeoPoint
from geogroup.util.facilities import facilities_to_points, load_facilities_csv


# Works well visually up to ~10 clusters (cycles if k > len(colors))
CLUSTER_COLORS = [
    "red",
    "blue",
    "green",
    "purple",
    "orange",
    "darkred",
    "cadetblue",
    "darkgreen",
    "black",
    "darkblue",
]


@dataclass
class ClusterViewerResult:
    facilities_df: pd.DataFrame       # facility_id, name, latitude, longitude, cluster_id
    cluster_summary_df: pd.DataFrame  # per-group stats
    clusters: List[Cluster]
    home_base: GeoPoint


def build_facility_clusters_view(
    facilities_csv: str | Path,
    config: ClusteringConfig,
    merge: bool = True,
) -> ClusterViewerResult:
    facilities = load_facilities_csv(facilities_csv)
    points = facilities_to_points(facilities)

    clusters = plan_groups(points, config, merge=merge)

    cluster_of = {p.id: c.id for c in clusters for p in c.points}
    merged = facilities.copy()
    merged["cluster_id"] = [int(cluster_of.get(fid, -1)) for fid in merged["facility_id"]]

    summary = summarize_clusters(clusters, config.home_base)

    return ClusterViewerResult(
        facilities_df=merged,
        cluster_summary_df=summary,
        clusters=clusters,
        home_base=config.home_base,
    )


def build_clusters_map_html(
    facilities_with_clusters: pd.DataFrame,
    home_base: GeoPoint,
    title: str = "Facility Groups",
) -> str:
    """
    Returns standalone HTML string for a folium map.
    """
    if len(facilities_with_clusters):
        center = [
            float(facilities_with_clusters["latitude"].mean()),
            float(facilities_with_clusters["longitude"].mean()),
        ]
    else:
        center = [home_base.latitude, home_base.longitude]

    m = folium.Map(
        location=center,
        zoom_start=9,
        tiles="CartoDB positron",
    )

    # one layer per group so they can be toggled
    cluster_ids = sorted(facilities_with_clusters["cluster_id"].unique().tolist())
    layers: dict[int, folium.FeatureGroup] = {}

    for cid in cluster_ids:
        name = f"Group {cid}" if cid >= 0 else "Unassigned"
        layers[cid] = folium.FeatureGroup(name=name, show=True)

    for _, row in facilities_with_clusters.iterrows():
        cid = int(row["cluster_id"])
        color = CLUSTER_COLORS[cid % len(CLUSTER_COLORS)] if cid >= 0 else "gray"

        folium.CircleMarker(
            location=[float(row["latitude"]), float(row["longitude"])],
            radius=5,
            color=color,
            fill=True,
            fill_opacity=0.85,
            weight=1,
            popup=f"{row['facility_id']} - {row['name']} (group {cid})",
        ).add_to(layers[cid])

    for layer in layers.values():
        layer.add_to(m)

    folium.Marker(
        location=[home_base.latitude, home_base.longitude],
        popup="Home base",
        icon=folium.Icon(color="black", icon="home"),
    ).add_to(m)

    folium.LayerControl(collapsed=False).add_to(m)

    title_html = f"""
    <div style="
        position: fixed;
        top: 10px;
        left: 50px;
        z-index: 9999;
        background: rgba(255,255,255,0.92);
        padding: 8px 12px;
        border-radius: 8px;
        box-shadow: 0 2px 10px rgba(0,0,0,0.15);
        font-family: system-ui, -apple-system, Segoe UI, Roboto, Arial;
        font-size: 16px;
        font-weight: 700;">
        {title}
    </div>
    """
    m.get_root().html.add_child(folium.Element(title_html))

    return m.get_root().render()


def create_app(result: ClusterViewerResult, title: str) -> Flask:
    app = Flask(__name__)

    @app.get("/")
    def index():
        html_map = build_clusters_map_html(result.facilities_df, result.home_base, title=title)
        summary_html = result.cluster_summary_df.to_html(index=False, float_format=lambda x: f"{x:.3f}")

        return f"""
        <html>
          <head>
            <meta charset="utf-8"/>
            <meta name="viewport" content="width=device-width, initial-scale=1"/>
            <title>{title}</title>
          </head>
          <body style="margin:0; padding:0;">
            {html_map}
            <div style="padding: 14px 16px; font-family: system-ui, -apple-system, Segoe UI, Roboto, Arial;">
              <h2 style="margin: 8px 0;">Group Summary</h2>
              {summary_html}
            </div>
          </body>
        </html>
        """

    @app.get("/clusters.csv")
    def clusters_csv():
        body = clusters_to_frame(result.clusters).to_csv(index=False)
        return body, 200, {"Content-Type": "text/csv; charset=utf-8"}

    return app


def serve_clusters(
    facilities_csv: str | Path,
    config: Optional[ClusteringConfig] = None,
    merge: bool = True,
    host: str = "127.0.0.1",
    port: int = 8090,
    debug: bool = False,
    title: str | None = None,
):
    """
    Library entry point: start a small web server that displays the group map.
    """
    if config is None:
        config = ClusteringConfig()
    if title is None:
        title = f"Facility Groups (max {config.max_points_per_cluster} per day)"

    result = build_facility_clusters_view(facilities_csv, config, merge=merge)

    print("\nGroup summary:")
    print(result.cluster_summary_df.to_string(index=False))

    app = create_app(result, title)
    app.run(host=host, port=port, debug=debug)
