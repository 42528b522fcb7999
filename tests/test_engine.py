"""End-to-end tests for cluster_points and plan_groups."""

import math
import random

import pytest

from conftest import assert_valid_result, scatter

from geogroup.cluster.engine import (
    cluster_points,
    estimate_cluster_count,
    order_by_home_distance,
    plan_groups,
    tightness_adjusted_k,
)
from geogroup.config import ClusteringConfig
from geogroup.errors import InvalidCapacityError
from geogroup.geo.distance import haversine_miles
from geogroup.geo.types import GeoPoint


HOME = GeoPoint(31.9973, -102.0779)


class TestShortCircuits:
    def test_empty(self):
        assert cluster_points([], 5, HOME) == []

    def test_single_point(self):
        p = GeoPoint(32.5, -101.5, id="only")
        out = cluster_points([p], 5, HOME)
        assert len(out) == 1
        assert out[0].id == 0
        assert out[0].points == [p]
        assert out[0].centroid.latitude == pytest.approx(p.latitude)
        assert out[0].centroid.longitude == pytest.approx(p.longitude)

    def test_everything_fits_in_one_group(self):
        pts = [GeoPoint(0, 0, id=1), GeoPoint(0, 0.001, id=2), GeoPoint(10, 10, id=3)]
        out = cluster_points(pts, 10, HOME)
        assert len(out) == 1
        assert out[0].points == pts

    @pytest.mark.parametrize("cap", [0, -3])
    def test_invalid_capacity(self, cap):
        with pytest.raises(InvalidCapacityError):
            cluster_points([GeoPoint(0, 0)], cap, HOME)
        with pytest.raises(ValueError):
            cluster_points([], cap, HOME)


class TestProperties:
    def test_antipodal_points(self):
        pts = [GeoPoint(2.5, 0.0, id=0), GeoPoint(-2.5, -180.0, id=1), GeoPoint(10.0, 10.0, id=2)]
        out = cluster_points(pts, 2, GeoPoint(0.0, 0.0), seed=0)
        assert_valid_result(out, pts, max_points_per_cluster=2)

    @pytest.mark.parametrize("cap", [1, 3, 5, 8, 20])
    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_invariants(self, cap, seed):
        pts = scatter(60, 31.0, -103.0, 2.5, seed=seed)
        out = cluster_points(pts, cap, HOME, tightness=0.5, balance_weight=0.7, seed=seed)
        assert_valid_result(out, pts, max_points_per_cluster=cap)
        for c in out:
            assert math.isfinite(c.centroid.latitude)
            assert math.isfinite(c.centroid.longitude)

    @pytest.mark.parametrize("tightness, balance", [(0.0, 0.0), (1.0, 1.0), (0.8, 0.35)])
    def test_invariants_across_knobs(self, tightness, balance):
        pts = scatter(45, 35.0, -97.0, 4.0, seed=9)
        out = cluster_points(pts, 6, GeoPoint(35.0, -97.0), tightness, balance, seed=4)
        assert_valid_result(out, pts, max_points_per_cluster=6)

    def test_deterministic_with_seed(self):
        pts = scatter(50, 31.0, -103.0, 2.0, seed=3)
        a = cluster_points(pts, 6, HOME, seed=42)
        b = cluster_points(pts, 6, HOME, seed=42)
        assert [c.points for c in a] == [c.points for c in b]

        c = cluster_points(pts, 6, HOME, rng=random.Random(42))
        assert [x.points for x in c] == [x.points for x in a]

    def test_does_not_mutate_input(self):
        pts = scatter(30, 31.0, -103.0, 2.0)
        snapshot = list(pts)
        out = cluster_points(pts, 4, HOME, balance_weight=0.9, seed=1)
        out[0].points.clear()
        assert pts == snapshot

    def test_duplicates_are_kept_apart_by_id(self):
        pts = [GeoPoint(32.0, -102.0, id=i) for i in range(9)]
        out = cluster_points(pts, 4, HOME, seed=0)
        assert_valid_result(out, pts, max_points_per_cluster=4)

    def test_grid_scenario(self):
        pts = [
            GeoPoint(32.0 + 0.3 * r, -101.0 + 0.3 * c, id=(r, c))
            for r in range(3)
            for c in range(4)
        ]
        out = cluster_points(pts, 5, HOME, tightness=0.8, seed=0)
        assert len(out) >= math.ceil(12 / 5)
        assert_valid_result(out, pts, max_points_per_cluster=5)


class TestHelpers:
    def test_estimate_cluster_count(self):
        pts = [GeoPoint(0, i) for i in range(23)]
        assert estimate_cluster_count(pts, 30) == 1
        assert estimate_cluster_count(pts, 23) == 1
        assert estimate_cluster_count(pts, 5) == 5
        assert estimate_cluster_count(pts, 5, max_clusters=3) == 3

    def test_tightness_adjusted_k(self):
        assert tightness_adjusted_k(3, 0.8) == 3
        assert tightness_adjusted_k(4, 1.0) == 6
        assert tightness_adjusted_k(4, 0.0) == 4

    def test_order_by_home_distance(self):
        pts = scatter(40, 31.0, -103.0, 3.0, seed=8)
        out = order_by_home_distance(cluster_points(pts, 5, HOME, seed=8), HOME)
        dists = [haversine_miles(HOME, c.centroid) for c in out]
        assert dists == sorted(dists)
        assert [c.id for c in out] == list(range(len(out)))


class TestPlanGroups:
    def test_plan_groups_from_config(self):
        pts = scatter(40, 31.0, -103.0, 2.0, seed=6)
        config = ClusteringConfig(
            max_points_per_cluster=8,
            balance_weight=0.7,
            seed=6,
            home_latitude=HOME.latitude,
            home_longitude=HOME.longitude,
        )
        out = plan_groups(pts, config)
        assert_valid_result(out, pts, max_points_per_cluster=8)
        dists = [haversine_miles(HOME, c.centroid) for c in out]
        assert dists == sorted(dists)

    def test_plan_groups_without_merge(self):
        pts = scatter(40, 31.0, -103.0, 2.0, seed=6)
        config = ClusteringConfig(max_points_per_cluster=8, seed=6)
        merged = plan_groups(pts, config)
        unmerged = plan_groups(pts, config, merge=False)
        assert len(unmerged) >= len(merged)
        assert_valid_result(unmerged, pts, max_points_per_cluster=8)
