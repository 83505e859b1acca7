from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from .errors import DimensionMismatch, MalformedInput
from .kdtree_node import UNSET_INDEX, IndexedPoint, KdTreeNode


def squared_distance(a: npt.NDArray, b: npt.NDArray) -> float:
    if len(a) != len(b):
        raise DimensionMismatch(len(a), len(b))
    diff = a - b
    return float(np.dot(diff, diff))


def as_query_vector(query, dimension: int) -> npt.NDArray[np.float64]:
    try:
        vector = np.asarray(query, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise MalformedInput(f"query is not numeric: {e}") from e

    if vector.ndim != 1:
        raise MalformedInput(f"query must be 1D vector, but it is {vector.ndim}D")
    if len(vector) != dimension:
        raise DimensionMismatch(dimension, len(vector), what="query")
    return vector


@dataclass
class _Best:
    point: IndexedPoint
    sqr_distance: float


def nearest_neighbor(root: KdTreeNode | None, query) -> IndexedPoint | None:
    """Find the closest point (Euclidean distance) to the query point.

    On a tie, the point with the smaller index wins, the same as brute force.

    Args:
        root: Root node of the tree.
        query: Vector which has the same dimension as the tree.

    Returns:
        The closest point with its index into the original dataset.
        If the tree is empty, None.

    Raises:
        DimensionMismatch: Dimension of query differs from the tree's one.
    """
    if root is None:
        return None

    query = as_query_vector(query, root.location.dimension)

    # Start from the origin with maximally bad distance. Squared distances of
    # huge coordinates can overflow to inf, so inf is the starting distance.
    best = _Best(
        point=IndexedPoint(UNSET_INDEX, np.zeros(len(query))),
        sqr_distance=float("inf"),
    )
    _search(root, query, best)
    return best.point


def _is_better(point: IndexedPoint, distance: float, best: _Best) -> bool:
    if distance < best.sqr_distance:
        return True
    if distance == best.sqr_distance:
        return best.point.index == UNSET_INDEX or point.index < best.point.index
    return False


def _near_and_far(node: KdTreeNode, query: npt.NDArray[np.float64]):
    axis = node.axis
    if node.left_child is not None and query[axis] <= node.location.coordinates[axis]:
        return node.left_child, node.right_child
    return node.right_child, node.left_child


# Phases of a node on the search stack.
_VISIT = 0
_CHECK_FAR_SIDE = 1


def _search(root: KdTreeNode, query: npt.NDArray[np.float64], best: _Best):
    # Explicit stack, since a decoded tree can be deeper than the recursion limit.
    stack: list[tuple[KdTreeNode, int]] = [(root, _VISIT)]
    while stack:
        node, phase = stack.pop()
        near, far = _near_and_far(node, query)

        if phase == _VISIT:
            distance = squared_distance(node.location.coordinates, query)
            if _is_better(node.location, distance, best):
                best.sqr_distance = distance
                best.point = node.location

            # The far side is checked after the whole near side is searched.
            stack.append((node, _CHECK_FAR_SIDE))
            if near is not None:
                stack.append((near, _VISIT))
            continue

        # If the splitting plane is within the radius of the best distance
        # hypersphere, the other side of the plane might have a closer point.
        axis = node.axis
        hypersphere_dist = float(query[axis] - node.location.coordinates[axis])
        if far is not None and hypersphere_dist * hypersphere_dist <= best.sqr_distance:
            stack.append((far, _VISIT))
