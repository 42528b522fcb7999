"""Tests for capacity enforcement."""

import math

import pytest

from conftest import assert_valid_result, scatter

from geogroup.cluster.cohesion import validate_cohesion
import geogroup.cluster.overload as overload
from geogroup.cluster.overload import _split_one, split_overloaded
from geogroup.errors import InvalidCapacityError
from geogroup.geo.types import Cluster, GeoPoint


def grid_12():
    # 3 x 4 grid inside a 1 x 1 degree box
    return [
        GeoPoint(32.0 + 0.45 * r, -101.0 + 0.3 * c, id=f"{r}-{c}")
        for r in range(3)
        for c in range(4)
    ]


def three_sites_of_4():
    # three well separated 4-point sites inside a 1 x 1 degree box
    corners = [(32.0, -101.0), (32.9, -101.0), (32.45, -100.1)]
    return [
        GeoPoint(lat + dlat, lon + dlon, id=f"{s}-{i}")
        for s, (lat, lon) in enumerate(corners)
        for i, (dlat, dlon) in enumerate([(0, 0), (0.02, 0), (0, 0.02), (0.02, 0.02)])
    ]


class TestSplitOverloaded:
    def test_within_capacity_only_runs_cohesion(self):
        far_home = GeoPoint(30.0, -100.0)
        clusters = [
            Cluster.from_points(scatter(4, 31.0, -99.0, 0.05, seed=1), id=0),
            Cluster.from_points(
                [GeoPoint(p.latitude, p.longitude, id=p.id + 10) for p in scatter(3, 31.5, -99.5, 0.05, seed=2)],
                id=1,
            ),
        ]
        out = split_overloaded(clusters, 5, far_home, rng=None)
        expected = validate_cohesion(clusters, far_home)
        assert [c.points for c in out] == [c.points for c in expected]

    def test_overloaded_cluster_is_split_under_capacity(self, rng):
        pts = grid_12()
        home = GeoPoint(31.0, -102.0)
        out = split_overloaded([Cluster.from_points(pts, id=0)], 5, home, 0.35, rng=rng)
        assert len(out) >= math.ceil(12 / 5)
        assert_valid_result(out, pts, max_points_per_cluster=5)

    def test_grid_first_split_uses_ceil_n_over_capacity(self, rng, monkeypatch):
        calls = []
        real_partition = overload.partition

        def recording_partition(points, k, **kwargs):
            out = real_partition(points, k, **kwargs)
            calls.append((len(points), k, len(out)))
            return out

        monkeypatch.setattr(overload, "partition", recording_partition)
        pts = grid_12()
        split_overloaded([Cluster.from_points(pts, id=0)], 5, GeoPoint(31.0, -102.0), rng=rng)
        assert calls[0] == (12, 3, 3)

    def test_separated_sites_split_into_exactly_three(self, rng):
        pts = three_sites_of_4()
        home = GeoPoint(31.0, -102.0)

        subs = _split_one(Cluster.from_points(pts, id=0), 5, home, 0.35, rng)
        assert len(subs) == 3
        assert sorted(sorted(p.id for p in s.points) for s in subs) == [
            [f"{s}-{i}" for i in range(4)] for s in range(3)
        ]

        out = split_overloaded([Cluster.from_points(pts, id=0)], 5, home, rng=rng)
        assert [c.size for c in out] == [4, 4, 4]
        assert_valid_result(out, pts, max_points_per_cluster=5)

    def test_high_balance_weight_still_respects_capacity(self, rng):
        pts = scatter(40, 31.0, -102.0, 1.0, seed=5)
        home = GeoPoint(30.0, -103.0)
        out = split_overloaded([Cluster.from_points(pts, id=0)], 7, home, 0.9, rng=rng)
        assert_valid_result(out, pts, max_points_per_cluster=7)

    def test_identical_points_fall_back_to_chunks(self, rng, home):
        pts = [GeoPoint(10.0, 10.0, id=i) for i in range(12)]
        out = split_overloaded([Cluster.from_points(pts, id=0)], 5, home, rng=rng)
        assert [c.size for c in out] == [5, 5, 2]
        assert_valid_result(out, pts, max_points_per_cluster=5)

    def test_capacity_one(self, rng, home):
        pts = scatter(6, 5.0, 5.0, 0.5)
        out = split_overloaded([Cluster.from_points(pts, id=0)], 1, home, rng=rng)
        assert len(out) == 6
        assert_valid_result(out, pts, max_points_per_cluster=1)

    def test_invalid_capacity(self, home):
        with pytest.raises(InvalidCapacityError):
            split_overloaded([], 0, home)
