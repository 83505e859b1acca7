from __future__ import annotations

import matplotlib.pyplot as plt
import numpy as np
import numpy.typing as npt

from .errors import DimensionMismatch
from .kdtree import KdTree
from .kdtree_node import KdTreeNode


def partition_segments(
    tree: KdTree, lower: npt.ArrayLike, upper: npt.ArrayLike
) -> list[npt.NDArray]:
    """Compute splitting lines of 2D tree clipped by each node's region.

    Args:
        tree: 2D tree.
        lower: Lower corner of the whole region.
        upper: Upper corner of the whole region.

    Returns:
        List of (2, 2) arrays. Each one is the start and end point of a line.
    """
    if tree.is_empty():
        return []
    if tree.dimension != 2:
        raise DimensionMismatch(2, tree.dimension, what="tree")

    segments = []
    stack: list[tuple[KdTreeNode, npt.NDArray, npt.NDArray]] = [
        (tree.root, np.array(lower, dtype=float), np.array(upper, dtype=float))
    ]
    while stack:
        node, lo, hi = stack.pop()
        axis = node.axis
        value = node.location.coordinates[axis]

        start = lo.copy()
        end = hi.copy()
        start[axis] = value
        end[axis] = value
        segments.append(np.array([start, end]))

        if node.left_child is not None:
            left_hi = hi.copy()
            left_hi[axis] = value
            stack.append((node.left_child, lo, left_hi))
        if node.right_child is not None:
            right_lo = lo.copy()
            right_lo[axis] = value
            stack.append((node.right_child, right_lo, hi))

    return segments


def _region(points: npt.NDArray, margin: float = 0.1):
    lower = points.min(axis=0)
    upper = points.max(axis=0)
    pad = np.maximum((upper - lower) * margin, margin)
    return lower - pad, upper + pad


def plot_partitions(tree: KdTree, points: npt.NDArray, query=None, ax=None):
    """Draw points, splitting lines and the nearest neighbor of the query.

    Returns:
        matplotlib axes.
    """
    points = np.asarray(points, dtype=float)
    if ax is None:
        ax = plt.axes()

    lower, upper = _region(points)
    for segment in partition_segments(tree, lower, upper):
        ax.plot(segment[:, 0], segment[:, 1], color="gray", linewidth=1)

    ax.scatter(points[:, 0], points[:, 1])

    if query is not None:
        query = np.asarray(query, dtype=float)
        ax.scatter(query[0], query[1], color="red")

        best = tree.nearest_neighbor(query)
        if best is not None:
            ax.scatter(best.coordinates[0], best.coordinates[1], color="green")
            radius = float(np.linalg.norm(best.coordinates - query))
            c = plt.Circle(
                (query[0], query[1]),
                radius=radius,
                edgecolor="green",
                facecolor="none",
                linewidth=1,
            )
            ax.add_patch(c)

    ax.set_xlim(lower[0], upper[0])
    ax.set_ylim(lower[1], upper[1])
    ax.set_aspect("equal")
    return ax


def log_to_rerun(tree: KdTree, points: npt.NDArray, query=None):
    """Send points and splitting lines to rerun viewer."""
    import rerun as rr

    points = np.asarray(points, dtype=float)
    colors = np.full((len(points), 3), [0, 255, 0])

    if query is not None:
        query = np.asarray(query, dtype=float).reshape(1, 2)
        points = np.append(points, query, axis=0)
        colors = np.append(colors, np.array([255, 0, 0]).reshape(1, 3), axis=0)

    rr.init("kdindex", spawn=True)
    rr.log("points", rr.Points2D(points, colors=colors, radii=0.02))

    lower, upper = _region(points)
    segments = partition_segments(tree, lower, upper)
    rr.log("partitions", rr.LineStrips2D(segments))

    if query is not None:
        best = tree.nearest_neighbor(query[0])
        if best is not None:
            rr.log(
                "nearest",
                rr.Points2D(
                    best.coordinates.reshape(1, 2), colors=[0, 0, 255], radii=0.03
                ),
            )
