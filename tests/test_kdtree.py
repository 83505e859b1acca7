import io

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from kdindex import (
    BuildFailure,
    IndexedPoint,
    KdTree,
    KdTreeError,
    brute_force_closest,
)


def test_empty_tree():
    tree = KdTree.create([])
    assert tree.is_empty()
    assert tree.root is None
    assert tree.dimension is None
    assert len(tree) == 0
    assert tree.height() == 0
    assert list(tree) == []
    assert tree.nearest_neighbor([0.0, 0.0]) is None
    assert repr(tree) == "KdTree(empty)"


def test_single_point_tree():
    tree = KdTree.create([[1.5, 2.5]])
    assert len(tree) == 1
    assert tree.dimension == 2
    assert tree.nearest_neighbor([100, -100]) == IndexedPoint(0, [1.5, 2.5])


def test_size_conservation(rng):
    points = rng.random((123, 3))
    tree = KdTree.create(points)
    assert len(tree) == 123
    assert sorted(p.index for p in tree) == list(range(123))
    assert repr(tree) == "KdTree(size=123, dimension=3)"


def test_rebuild_is_rejected(diagonal_points):
    tree = KdTree.create(diagonal_points)
    with pytest.raises(KdTreeError, match="already built"):
        tree.build(diagonal_points)

    tree = KdTree.create([])
    with pytest.raises(KdTreeError, match="already built"):
        tree.build(diagonal_points)


def test_failed_build_leaves_tree_empty():
    def broken_selector(parent_axis, coordinates):
        raise RuntimeError("broken")

    tree = KdTree()
    with pytest.raises(BuildFailure):
        tree.build([[0, 0], [1, 1]], broken_selector)
    assert tree.is_empty()

    # Build failed, so it can be built again.
    tree.build([[0, 0], [1, 1]])
    assert len(tree) == 2


def test_round_trip(rng):
    points = rng.normal(size=(200, 3)) * 1e3
    tree = KdTree.create(points)

    restored = KdTree.loads(tree.dumps())
    assert len(restored) == len(tree)
    for original, loaded in zip(tree.nodes(), restored.nodes()):
        assert original.axis == loaded.axis
        assert original.location == loaded.location

    queries = np.concatenate([points, rng.normal(size=(100, 3)) * 1e3])
    for query in queries:
        expected = tree.nearest_neighbor(query)
        actual = restored.nearest_neighbor(query)
        assert actual.index == expected.index
        assert_array_equal(actual.coordinates, expected.coordinates)
        assert actual.index == brute_force_closest(points, query)


def test_dump_and_load(diagonal_points):
    tree = KdTree.create(diagonal_points)

    buffer = io.StringIO()
    tree.dump(buffer)
    assert buffer.getvalue() == tree.dumps()

    buffer.seek(0)
    restored = KdTree.load(buffer)
    assert restored.nearest_neighbor([2.4, 2.4]).index == 2

    with pytest.raises(KdTreeError, match="already built"):
        restored.build(diagonal_points)


def test_empty_round_trip():
    tree = KdTree.create([])
    assert tree.dumps() == ""
    assert KdTree.loads(tree.dumps()).is_empty()


def test_indexed_point():
    point = IndexedPoint(3, [1, 2])
    assert point.dimension == 2
    assert point.coordinates.dtype == np.float64
    assert point == IndexedPoint(3, np.array([1.0, 2.0]))
    assert point != IndexedPoint(4, [1, 2])
    assert hash(point) == hash(IndexedPoint(3, [1.0, 2.0]))

    with pytest.raises(ValueError):
        point.coordinates[0] = 5.0

    unset = IndexedPoint()
    assert unset.index == -1
    assert unset.dimension == 0


def test_query_mismatch_is_kdtree_error():
    from kdindex import QueryMismatch

    assert issubclass(QueryMismatch, KdTreeError)
