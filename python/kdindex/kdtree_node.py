from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

import numpy as np
import numpy.typing as npt

# Index of a point which doesn't refer to any row of the dataset.
UNSET_INDEX = -1


def _as_coordinates(values) -> npt.NDArray[np.float64]:
    coords = np.array(values, dtype=np.float64).reshape(-1)
    coords.flags.writeable = False
    return coords


@dataclass(frozen=True, eq=False)
class IndexedPoint:
    """Coordinates paired with the row they came from in the original dataset."""

    index: int = UNSET_INDEX
    coordinates: npt.NDArray[np.float64] = field(
        default_factory=lambda: _as_coordinates([])
    )

    def __post_init__(self):
        # Frozen dataclass, so bypass __setattr__ to normalize the array.
        object.__setattr__(self, "index", int(self.index))
        object.__setattr__(self, "coordinates", _as_coordinates(self.coordinates))

    @property
    def dimension(self) -> int:
        return len(self.coordinates)

    def __eq__(self, other) -> bool:
        if not isinstance(other, IndexedPoint):
            return NotImplemented
        return self.index == other.index and np.array_equal(
            self.coordinates, other.coordinates
        )

    def __hash__(self) -> int:
        return hash((self.index, self.coordinates.tobytes()))


@dataclass
class KdTreeNode:
    axis: int = -1
    location: IndexedPoint = field(default_factory=IndexedPoint)
    left_child: KdTreeNode | None = None
    right_child: KdTreeNode | None = None

    @property
    def is_leaf(self) -> bool:
        return self.left_child is None and self.right_child is None

    def walk(self) -> Iterator[KdTreeNode]:
        """Yield this node and all of its descendants in preorder."""
        stack: list[KdTreeNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            # Right is pushed first so that left comes out first.
            if node.right_child is not None:
                stack.append(node.right_child)
            if node.left_child is not None:
                stack.append(node.left_child)

    def height(self) -> int:
        height = 0
        stack: list[tuple[KdTreeNode, int]] = [(self, 1)]
        while stack:
            node, depth = stack.pop()
            height = max(height, depth)
            for child in (node.left_child, node.right_child):
                if child is not None:
                    stack.append((child, depth + 1))
        return height
