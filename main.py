# main.py
import logging

from geogroup.cluster.engine import plan_groups
from geogroup.cluster.summary import summarize_clusters, write_clusters_csv
from geogroup.config import ClusteringConfig
from geogroup.geo.types import GeoPoint
from geogroup.util.facilities import facilities_to_points, load_facilities_csv

from geogroup.viz.app.clusters import serve_clusters


FACILITIES = "facilities.csv"
HOME_BASE = GeoPoint(31.9973, -102.0779)  # Midland, TX


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    config = ClusteringConfig(
        max_points_per_cluster=12,
        tightness=0.5,
        balance_weight=0.7,
        seed=0,
        max_hours_per_day=10,
        home_latitude=HOME_BASE.latitude,
        home_longitude=HOME_BASE.longitude,
    )

    facilities = load_facilities_csv(FACILITIES)
    points = facilities_to_points(facilities)
    names = dict(zip(facilities["facility_id"], facilities["name"]))

    groups = plan_groups(points, config)

    print(f"\n{len(points)} facilities -> {len(groups)} groups:\n")
    for g in groups:
        print(f"Group {g.id:02d} ({g.size} stops)")
        for p in g.points:
            print(f"    {p.id}: {names.get(p.id, '')}")

    print("\nGroup summary:")
    print(summarize_clusters(groups, config.home_base).to_string(index=False))

    out = write_clusters_csv(groups, "groups.csv")
    print(f"\nWrote: {out}")

    # ---- UI ----
    serve_clusters(FACILITIES, config, port=8080, title="Facility Groups")


if __name__ == "__main__":
    main()
