import random

import pytest

from geogroup.geo.centroid import spherical_centroid
from geogroup.geo.types import GeoPoint


def scatter(n, lat0, lon0, spread, seed=0):
    r = random.Random(seed)
    return [
        GeoPoint(lat0 + r.uniform(0, spread), lon0 + r.uniform(0, spread), id=i)
        for i in range(n)
    ]


def assert_valid_result(clusters, points, max_points_per_cluster=None):
    ids = [p.id for c in clusters for p in c.points]
    assert sorted(ids, key=repr) == sorted((p.id for p in points), key=repr)
    assert sum(c.size for c in clusters) == len(points)

    assert [c.id for c in clusters] == list(range(len(clusters)))

    for c in clusters:
        assert c.points
        if max_points_per_cluster is not None:
            assert c.size <= max_points_per_cluster
        expected = spherical_centroid(c.points)
        assert c.centroid.latitude == pytest.approx(expected.latitude, abs=1e-9)
        assert c.centroid.longitude == pytest.approx(expected.longitude, abs=1e-9)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def home():
    return GeoPoint(0.0, 0.0, id="home")
