from __future__ import annotations

import logging
from typing import IO, Iterator

from . import builder, codec, searcher
from .axis import ROUND_ROBIN, AxisSelector
from .errors import KdTreeError
from .kdtree_node import IndexedPoint, KdTreeNode

log = logging.getLogger(__name__)


class KdTree:
    """Balanced kd-tree for exact nearest neighbor queries.

    e.g.
        tree = KdTree.create([[0, 0], [1, 1], [2, 2]])
        best = tree.nearest_neighbor([0.9, 1.2])  # IndexedPoint(index=1, ...)
    """

    def __init__(self, root: KdTreeNode | None = None):
        self._root = root
        self._built = root is not None

    @classmethod
    def create(cls, points, axis_selector: AxisSelector = ROUND_ROBIN) -> KdTree:
        tree = cls()
        tree.build(points, axis_selector)
        return tree

    def build(self, points, axis_selector: AxisSelector = ROUND_ROBIN):
        """Build the tree from point data.

        The tree can be built only once.

        Args:
            points: 2D array or sequence of equal-length numeric vectors.
            axis_selector: Decides the separating axis of each node.

        Raises:
            KdTreeError: The tree is already built.
            BuildFailure: Construction failed. The tree stays empty.
        """
        if self._built:
            raise KdTreeError("kd-tree is already built")

        # Assign only after whole construction succeeded.
        root = builder.build(points, axis_selector)
        self._root = root
        self._built = True

    @property
    def root(self) -> KdTreeNode | None:
        return self._root

    @property
    def dimension(self) -> int | None:
        if self._root is None:
            return None
        return self._root.location.dimension

    def is_empty(self) -> bool:
        return self._root is None

    def __len__(self) -> int:
        return sum(1 for _ in self.nodes())

    def __iter__(self) -> Iterator[IndexedPoint]:
        return (node.location for node in self.nodes())

    def nodes(self) -> Iterator[KdTreeNode]:
        if self._root is None:
            return iter(())
        return self._root.walk()

    def height(self) -> int:
        return 0 if self._root is None else self._root.height()

    def nearest_neighbor(self, query) -> IndexedPoint | None:
        """Returns the closest point to the query point.

        Args:
            query: Vector which has the same dimension as the tree.

        Returns:
            The closest point with its index into the original dataset.
            None, if the tree is empty.
        """
        if self._root is None:
            log.debug("No tree has been constructed")
            return None
        return searcher.nearest_neighbor(self._root, query)

    # Serialization

    def dumps(self) -> str:
        return codec.encode(self._root)

    def dump(self, fp: IO[str]):
        codec.dump(self._root, fp)

    @classmethod
    def loads(cls, text: str) -> KdTree:
        tree = cls(codec.decode(text))
        tree._built = True
        return tree

    @classmethod
    def load(cls, fp: IO[str]) -> KdTree:
        return cls.loads(fp.read())

    def __repr__(self) -> str:
        if self._root is None:
            return "KdTree(empty)"
        return f"KdTree(size={len(self)}, dimension={self.dimension})"
