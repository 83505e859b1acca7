from __future__ import annotations

from typing import Protocol

import numpy as np
import numpy.typing as npt


class AxisSelector(Protocol):
    def __call__(self, parent_axis: int, coordinates: npt.NDArray) -> int:
        """Decide the separating axis of a node.

        Args:
            parent_axis: Axis of the parent node. -1 for the root.
            coordinates: (n, D) coordinates of the points the node partitions.

        Returns:
            Axis index in [0, D).
        """
        ...


class RoundRobinAxis:
    """Rotate through the axes with the depth of the tree."""

    def __call__(self, parent_axis: int, coordinates: npt.NDArray) -> int:
        return (parent_axis + 1) % coordinates.shape[1]

    def __repr__(self) -> str:
        return "RoundRobinAxis()"


class WidestSpreadAxis:
    """Split along the axis where the points spread the most."""

    def __call__(self, parent_axis: int, coordinates: npt.NDArray) -> int:
        spread = np.ptp(coordinates, axis=0)
        return int(np.argmax(spread))

    def __repr__(self) -> str:
        return "WidestSpreadAxis()"


ROUND_ROBIN = RoundRobinAxis()
