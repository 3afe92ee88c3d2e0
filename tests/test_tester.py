from concurrent.futures import ThreadPoolExecutor

import pytest
from shapely.geometry import MultiPolygon, Polygon

from spatial_lookup.tester import ContainmentTester


@pytest.fixture
def donut():
    # 10x10 square with a 2x2 hole in the middle
    shell = [(0, 0), (10, 0), (10, 10), (0, 10)]
    hole = [(4, 4), (6, 4), (6, 6), (4, 6)]
    return ContainmentTester(Polygon(shell, [hole]))


class TestContainmentTester:
    def test_inside(self, donut):
        assert donut.intersects(1, 1) is True

    def test_outside(self, donut):
        assert donut.intersects(11, 5) is False
        assert donut.intersects(-0.001, 5) is False

    def test_hole_is_outside(self, donut):
        assert donut.intersects(5, 5) is False

    def test_edge_counts_as_inside(self, donut):
        assert donut.intersects(10, 5) is True
        assert donut.intersects(5, 0) is True

    def test_vertex_counts_as_inside(self, donut):
        assert donut.intersects(0, 0) is True
        assert donut.intersects(10, 10) is True

    def test_hole_boundary_counts_as_inside(self, donut):
        assert donut.intersects(4, 5) is True

    def test_boundary_result_is_stable(self, donut):
        assert {donut.intersects(10, 5) for _ in range(50)} == {True}

    def test_triangle_bbox_corner_is_outside(self):
        tri = ContainmentTester(Polygon([(0, 0), (4, 0), (0, 4)]))
        assert tri.intersects(1, 1) is True
        assert tri.intersects(3, 3) is False

    def test_multipolygon(self):
        mp = MultiPolygon([Polygon([(0, 0), (1, 0), (1, 1), (0, 1)]), Polygon([(5, 5), (6, 5), (6, 6), (5, 6)])])
        t = ContainmentTester(mp)
        assert t.intersects(0.5, 0.5)
        assert t.intersects(5.5, 5.5)
        assert not t.intersects(3, 3)

    def test_concurrent_readers(self, donut):
        points = [(x / 2.0, y / 2.0) for x in range(-2, 23) for y in range(-2, 23)]
        expected = [donut.intersects(x, y) for x, y in points]
        with ThreadPoolExecutor(max_workers=8) as pool:
            runs = list(pool.map(lambda _: [donut.intersects(x, y) for x, y in points], range(16)))
        assert all(r == expected for r in runs)
