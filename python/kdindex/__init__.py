from .axis import AxisSelector, RoundRobinAxis, WidestSpreadAxis
from .bruteforce import brute_force_closest
from .config import KdIndexConfig
from .errors import (
    BuildFailure,
    DimensionMismatch,
    KdTreeError,
    MalformedInput,
    ParseFailure,
    QueryMismatch,
)
from .kdtree import KdTree
from .kdtree_node import IndexedPoint, KdTreeNode

__version__ = "0.1.0"

__all__ = [
    "AxisSelector",
    "BuildFailure",
    "DimensionMismatch",
    "IndexedPoint",
    "KdIndexConfig",
    "KdTree",
    "KdTreeError",
    "KdTreeNode",
    "MalformedInput",
    "ParseFailure",
    "QueryMismatch",
    "RoundRobinAxis",
    "WidestSpreadAxis",
    "brute_force_closest",
]
