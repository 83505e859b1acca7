from __future__ import annotations


class KdTreeError(Exception):
    """Base class for every error raised by kdindex."""


class MalformedInput(KdTreeError, ValueError):
    """Point data which is empty or can't be read as numbers."""


class DimensionMismatch(KdTreeError, ValueError):
    """Vectors whose length doesn't agree with the tree's dimension."""

    def __init__(self, expected: int, actual: int, what: str = "point"):
        super().__init__(
            f"{what} has dimension {actual}, but dimension {expected} is expected"
        )
        self.expected = expected
        self.actual = actual


class BuildFailure(KdTreeError):
    """Raised when recursive construction of the tree is aborted."""


class ParseFailure(KdTreeError, ValueError):
    """Serialized tree which is malformed or truncated."""

    def __init__(self, message: str, line_no: int | None = None):
        if line_no is not None:
            message = f"line {line_no}: {message}"
        super().__init__(message)
        self.line_no = line_no


class QueryMismatch(KdTreeError):
    """kd-tree result disagrees with brute force search."""
