from __future__ import annotations

import logging

import numpy as np
import numpy.typing as npt

from .axis import ROUND_ROBIN, AxisSelector
from .errors import BuildFailure, DimensionMismatch, KdTreeError, MalformedInput
from .kdtree_node import IndexedPoint, KdTreeNode

log = logging.getLogger(__name__)


def as_point_array(points) -> npt.NDArray[np.float64]:
    """Convert point data into (n, D) float64 array.

    Args:
        points: 2D array or sequence of equal-length numeric vectors.

    Returns:
        Array of shape (n, D). For empty input, shape is (0, 0).

    Raises:
        DimensionMismatch: Vectors don't share the same length.
        MalformedInput: Values aren't finite numbers or vectors are zero-length.
    """
    if not isinstance(points, np.ndarray):
        points = list(points)
        if len(points) == 0:
            return np.empty((0, 0), dtype=np.float64)

        # Assume that the first vector decides the dimension.
        try:
            dim = len(points[0])
            for row in points[1:]:
                if len(row) != dim:
                    raise DimensionMismatch(dim, len(row))
        except TypeError as e:
            raise MalformedInput(f"point is not a sequence: {e}") from e

    try:
        array = np.asarray(points, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise MalformedInput(f"point data is not numeric: {e}") from e

    if 1 <= array.ndim <= 2 and len(array) == 0:
        return np.empty((0, 0), dtype=np.float64)
    if array.ndim != 2:
        raise MalformedInput(f"point data must be 2D, but it is {array.ndim}D")
    if array.shape[1] == 0:
        raise MalformedInput("points must have at least one coordinate")
    if not np.all(np.isfinite(array)):
        raise MalformedInput("point data contains NaN or infinity")
    return array


def build(points, axis_selector: AxisSelector = ROUND_ROBIN) -> KdTreeNode | None:
    """Build balanced kd-tree nodes from point data.

    Each point keeps its position in `points` as the index.

    Args:
        points: 2D array or sequence of equal-length numeric vectors.
        axis_selector: Decides the separating axis of each node.

    Returns:
        Root node. If `points` is empty, None.

    Raises:
        BuildFailure: Construction is aborted. Nothing is partially returned.
    """
    coordinates = as_point_array(points)
    if len(coordinates) == 0:
        return None

    log.debug(
        "Build kd-tree from %d points of dimension %d",
        coordinates.shape[0],
        coordinates.shape[1],
    )

    order = np.arange(len(coordinates))
    try:
        return _build_node(coordinates, order, -1, axis_selector)
    except KdTreeError:
        raise
    except Exception as e:
        raise BuildFailure(f"failed to build kd-tree: {e!r}") from e


def _build_node(
    coordinates: npt.NDArray[np.float64],
    order: npt.NDArray[np.intp],
    parent_axis: int,
    axis_selector: AxisSelector,
) -> KdTreeNode:
    # `order` holds the dataset indices of the sub range for this node.
    axis = int(axis_selector(parent_axis, coordinates[order]))
    if not 0 <= axis < coordinates.shape[1]:
        raise BuildFailure(f"axis selector returned invalid axis {axis}")

    if len(order) < 2:
        index = int(order[0])
        return KdTreeNode(axis=axis, location=IndexedPoint(index, coordinates[index]))

    # Find median element. Not a full sort, only partitioning around the median.
    median = len(order) // 2
    partition = np.argpartition(coordinates[order, axis], median)
    order = order[partition]

    index = int(order[median])
    node = KdTreeNode(axis=axis, location=IndexedPoint(index, coordinates[index]))

    if median > 0:
        node.left_child = _build_node(coordinates, order[:median], axis, axis_selector)
    if median + 1 < len(order):
        node.right_child = _build_node(
            coordinates, order[median + 1 :], axis, axis_selector
        )
    return node
