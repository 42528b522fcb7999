import logging
import os

from geogroup.config import ClusteringConfig
from geogroup.viz.app.clusters import build_facility_clusters_view, create_app

FACILITIES = os.environ.get("FACILITIES_CSV", "facilities.csv")


def build_app():
  config = ClusteringConfig.from_env()
  result = build_facility_clusters_view(FACILITIES, config)
  title = os.environ.get("TITLE", f"Facility Groups (max {config.max_points_per_cluster} per day)")
  return create_app(result, title)


def main():
  logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

  app = build_app()
  port = int(os.environ.get("PORT", "8080"))

  app.run(
      host="0.0.0.0",  # IMPORTANT for Render
      port=port,
      debug=False,
  )


if __name__ == "__main__":
  main()
