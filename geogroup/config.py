# geogroup/config.py
"""
Clustering knobs.

Defaults match what the planning screens ship with. Every field can be
overridden from the environment (GEOGROUP_<FIELD>), which is how the hosted
viewer in app.py is configured.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from geogroup.geo.types import GeoPoint


ENV_PREFIX = "GEOGROUP_"

# geographic centre of the contiguous US; used when no home base is configured
DEFAULT_HOME_BASE = GeoPoint(39.8283, -98.5795)


@dataclass
class ClusteringConfig:
    max_points_per_cluster: int = 10
    tightness: float = 0.5
    balance_weight: float = 0.35
    max_iterations: int = 50
    seed: Optional[int] = None

    # optional day-length check used when merging small neighbouring groups
    max_hours_per_day: Optional[float] = None
    visit_minutes: float = 30.0
    travel_minutes: float = 15.0

    home_latitude: float = DEFAULT_HOME_BASE.latitude
    home_longitude: float = DEFAULT_HOME_BASE.longitude

    def __post_init__(self):
        if not (0.0 <= float(self.tightness) <= 1.0):
            raise ValueError("tightness must be within [0, 1]")
        if not (0.0 <= float(self.balance_weight) <= 1.0):
            raise ValueError("balance_weight must be within [0, 1]")
        if int(self.max_iterations) <= 0:
            raise ValueError("max_iterations must be > 0")

    @property
    def home_base(self) -> GeoPoint:
        return GeoPoint(float(self.home_latitude), float(self.home_longitude))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClusteringConfig":
        env = os.environ if environ is None else environ

        def _get(name, cast, default):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is None or raw.strip() == "":
                return default
            return cast(raw)

        defaults = cls()
        return cls(
            max_points_per_cluster=_get("max_points_per_cluster", int, defaults.max_points_per_cluster),
            tightness=_get("tightness", float, defaults.tightness),
            balance_weight=_get("balance_weight", float, defaults.balance_weight),
            max_iterations=_get("max_iterations", int, defaults.max_iterations),
            seed=_get("seed", int, defaults.seed),
            max_hours_per_day=_get("max_hours_per_day", float, defaults.max_hours_per_day),
            visit_minutes=_get("visit_minutes", float, defaults.visit_minutes),
            travel_minutes=_get("travel_minutes", float, defaults.travel_minutes),
            home_latitude=_get("home_latitude", float, defaults.home_latitude),
            home_longitude=_get("home_longitude", float, defaults.home_longitude),
        )
