import math

import pytest

from spatial_lookup.index import BoundingBoxIndex, union_bounds


def brute_force(boxes, q):
    return sorted(
        i
        for i, (a, b, c, d) in enumerate(boxes)
        if a <= q[2] and q[0] <= c and b <= q[3] and q[1] <= d
    )


@pytest.fixture
def grid_boxes():
    # 40 x 40 grid of 0.8-wide cells with 1.0 spacing, plus some big overlapping boxes
    boxes = [(i, j, i + 0.8, j + 0.8) for i in range(40) for j in range(40)]
    boxes += [(0, 0, 20, 20), (10, 10, 30, 30), (5, 35, 39, 39)]
    return boxes


class TestBoundingBoxIndex:
    def test_empty_index(self):
        idx = BoundingBoxIndex([])
        assert len(idx) == 0
        assert idx.bounds is None
        assert list(idx.query((0, 0, 1, 1))) == []
        assert list(idx.query_point(0, 0)) == []

    def test_single_entry(self):
        idx = BoundingBoxIndex([(0, 0, 1, 1)])
        assert list(idx.query_point(0.5, 0.5)) == [0]
        assert list(idx.query_point(2, 2)) == []

    def test_touching_counts_as_overlap(self):
        idx = BoundingBoxIndex([(0, 0, 1, 1)])
        assert list(idx.query_point(1, 1)) == [0]
        assert list(idx.query((1, 0.5, 3, 3))) == [0]

    def test_degenerate_boxes(self):
        idx = BoundingBoxIndex([(2, 2, 2, 2), (0, 1, 4, 1)])
        assert list(idx.query_point(2, 2)) == [0]
        assert sorted(idx.query((1, 0, 3, 3))) == [0, 1]

    def test_identical_boxes_all_reported(self):
        idx = BoundingBoxIndex([(0, 0, 1, 1)] * 25)
        assert sorted(idx.query_point(0.5, 0.5)) == list(range(25))

    def test_matches_brute_force(self, grid_boxes):
        idx = BoundingBoxIndex(grid_boxes, node_capacity=4)
        queries = [
            (0.5, 0.5, 0.5, 0.5),
            (0.9, 0.9, 0.9, 0.9),
            (12.3, 17.1, 12.3, 17.1),
            (3, 3, 7.5, 4.2),
            (25, 36, 26, 36),
            (-5, -5, -1, -1),
            (-100, -100, 100, 100),
        ]
        for q in queries:
            assert sorted(idx.query(q)) == brute_force(grid_boxes, q), q

    def test_positions_are_plain_ints(self, grid_boxes):
        idx = BoundingBoxIndex(grid_boxes)
        assert all(type(i) is int for i in idx.query_point(10.5, 10.5))

    def test_bounds_is_union(self, grid_boxes):
        idx = BoundingBoxIndex(grid_boxes)
        assert idx.bounds == union_bounds(grid_boxes)
        assert idx.bounds[:2] == (0.0, 0.0)
        assert idx.box(0) == (0.0, 0.0, 0.8, 0.8)

    def test_query_outside_bounds_is_empty(self, grid_boxes):
        idx = BoundingBoxIndex(grid_boxes)
        assert list(idx.query_point(1000, 1000)) == []

    @pytest.mark.parametrize("bad", [(1, 0, 0, 1), (0, 1, 1, 0), (0, 0, math.inf, 1), (0, math.nan, 1, 1), (0, 0, 1)])
    def test_invalid_boxes_rejected(self, bad):
        with pytest.raises(ValueError):
            BoundingBoxIndex([bad])

    def test_invalid_query_rejected(self):
        idx = BoundingBoxIndex([(0, 0, 1, 1)])
        with pytest.raises(ValueError):
            list(idx.query((1, 1, 0, 0)))

    def test_node_capacity(self):
        assert BoundingBoxIndex([], node_capacity=16).node_capacity == 16
        with pytest.raises(ValueError):
            BoundingBoxIndex([(0, 0, 1, 1)], node_capacity=1)

    def test_no_mutation_api(self):
        idx = BoundingBoxIndex([(0, 0, 1, 1)])
        assert not hasattr(idx, "insert")
        assert not hasattr(idx, "remove")
