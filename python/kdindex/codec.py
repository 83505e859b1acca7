"""Text serialization of kd-tree nodes.

The tree is flattened in preorder. Each node takes three lines::

    <axis>
    <index>
    <x0> <x1> ... <xD-1>

followed by its left subtree and then its right subtree. A missing child is
written as a single ``-1`` line in place of its axis. Coordinates are written
with ``repr`` of float, which round-trips float64 values exactly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import IO, Iterator, Union

from .errors import ParseFailure
from .kdtree_node import IndexedPoint, KdTreeNode

log = logging.getLogger(__name__)

# We use 'axis == -1' as an indicator for a node that doesn't exist.
NULL_NODE_MARKER = -1


def _format_coordinates(node: KdTreeNode) -> str:
    return "".join(f"{float(x)!r} " for x in node.location.coordinates)


def iter_encode(root: KdTreeNode | None) -> Iterator[str]:
    """Yield serialized lines of the tree, each ends with newline."""
    if root is None:
        return

    stack: list[KdTreeNode | None] = [root]
    while stack:
        node = stack.pop()
        if node is None:
            yield f"{NULL_NODE_MARKER}\n"
            continue

        yield f"{node.axis}\n"
        yield f"{node.location.index}\n"
        yield _format_coordinates(node) + "\n"

        # Left is serialized before right, so push right first.
        stack.append(node.right_child)
        stack.append(node.left_child)


def encode(root: KdTreeNode | None) -> str:
    return "".join(iter_encode(root))


def dump(root: KdTreeNode | None, fp: IO[str]):
    for line in iter_encode(root):
        fp.write(line)


@dataclass(frozen=True)
class _Present:
    axis: int


@dataclass(frozen=True)
class _Absent:
    pass


_NodeRecord = Union[_Present, _Absent]


class _LineReader:
    def __init__(self, text: str):
        self._lines = text.splitlines()
        self._pos = 0

    @property
    def line_no(self) -> int:
        return self._pos

    def is_blank(self) -> bool:
        return all(not line.strip() for line in self._lines[self._pos :])

    def at_end(self) -> bool:
        return self._pos >= len(self._lines)

    def next_line(self, what: str) -> str:
        if self.at_end():
            raise ParseFailure(f"unexpected end of stream, {what} is expected")
        line = self._lines[self._pos]
        self._pos += 1
        return line.strip()

    def next_int(self, what: str) -> int:
        line = self.next_line(what)
        try:
            return int(line)
        except ValueError:
            raise ParseFailure(
                f"{what} must be integer, got {line!r}", self.line_no
            ) from None

    def next_record(self) -> _NodeRecord:
        axis = self.next_int("axis")
        if axis == NULL_NODE_MARKER:
            return _Absent()
        if axis < 0:
            raise ParseFailure(f"invalid axis {axis}", self.line_no)
        return _Present(axis)

    def next_coordinates(self) -> list[float]:
        line = self.next_line("coordinates")
        if not line:
            raise ParseFailure("coordinates are empty", self.line_no)
        try:
            return [float(token) for token in line.split()]
        except ValueError:
            raise ParseFailure(
                f"coordinates must be numbers, got {line!r}", self.line_no
            ) from None

    def skip_trailing_blanks(self):
        while not self.at_end():
            line = self.next_line("end of stream")
            if line:
                raise ParseFailure(
                    f"unexpected content after the tree: {line!r}", self.line_no
                )


def _read_node(reader: _LineReader, record: _Present) -> KdTreeNode:
    index = reader.next_int("index")
    coordinates = reader.next_coordinates()
    return KdTreeNode(axis=record.axis, location=IndexedPoint(index, coordinates))


def decode(text: str) -> KdTreeNode | None:
    """Rebuild nodes from the serialized text.

    The decoded tree is trusted to come from `encode`, so the axis range and the
    dimension of each point aren't validated.

    Args:
        text: Serialized tree.

    Returns:
        Root node. If the text holds no node, None.

    Raises:
        ParseFailure: Text is malformed or truncated.
    """
    reader = _LineReader(text)

    # An empty stream or a stream starting with the marker is an empty tree.
    if reader.is_blank():
        return None

    record = reader.next_record()
    if isinstance(record, _Absent):
        reader.skip_trailing_blanks()
        return None

    root = _read_node(reader, record)
    num_nodes = 1

    # Slots to be filled, popped in preorder (left before right).
    pending: list[tuple[KdTreeNode, str]] = [
        (root, "right_child"),
        (root, "left_child"),
    ]
    while pending:
        parent, slot = pending.pop()
        record = reader.next_record()
        if isinstance(record, _Absent):
            continue

        node = _read_node(reader, record)
        setattr(parent, slot, node)
        num_nodes += 1
        pending.append((node, "right_child"))
        pending.append((node, "left_child"))

    reader.skip_trailing_blanks()
    log.debug("Decoded %d kd-tree nodes", num_nodes)
    return root


def load(fp: IO[str]) -> KdTreeNode | None:
    return decode(fp.read())
