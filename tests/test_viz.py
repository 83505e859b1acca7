import numpy as np
import pytest

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from kdindex import DimensionMismatch, KdTree  # noqa: E402
from kdindex.main import main  # noqa: E402
from kdindex.viz import partition_segments, plot_partitions  # noqa: E402


def test_partition_segments(diagonal_points):
    tree = KdTree.create(diagonal_points)
    segments = partition_segments(tree, [-1, -1], [4, 4])
    assert len(segments) == len(tree)

    # Root splits the whole region vertically at x = 2.
    np.testing.assert_array_equal(segments[0], [[2, -1], [2, 4]])

    # Right child splits only the right half horizontally at y = 3.
    assert any(np.array_equal(s, [[2, 3], [4, 3]]) for s in segments)


def test_partition_segments_iv():
    assert partition_segments(KdTree.create([]), [0, 0], [1, 1]) == []
    with pytest.raises(DimensionMismatch):
        partition_segments(KdTree.create([[1, 2, 3]]), [0, 0], [1, 1])


def test_plot_partitions(rng):
    points = rng.random((20, 2))
    tree = KdTree.create(points)
    ax = plot_partitions(tree, points, query=[0.5, 0.5])
    assert len(ax.lines) == len(tree)
    assert len(ax.patches) == 1
    plt.close("all")


def test_plot_command(tmp_path, rng):
    data_path = tmp_path / "data.csv"
    data_path.write_text("\n".join(f"{x},{y}" for x, y in rng.random((10, 2))))
    image_path = tmp_path / "kdtree.png"
    args = ["plot", str(data_path), "--query", "0.5", "0.5", "--save", str(image_path)]
    assert main(args) == 0
    assert image_path.exists()
    plt.close("all")
