from __future__ import annotations

import logging
from os import PathLike
from typing import Iterable, Union

import numpy as np
import numpy.typing as npt

from .errors import DimensionMismatch, MalformedInput

log = logging.getLogger(__name__)

PathType = Union[str, PathLike]


def parse_points(text: str, delimiter: str | None = None) -> npt.NDArray[np.float64]:
    """Parse delimited text into (n, D) array.

    Args:
        text: One point per line.
        delimiter: Delimiter of values. None accepts commas and white spaces.

    Returns:
        Array of points. Blank lines are skipped.

    Raises:
        MalformedInput: Text is empty or has non-numeric value.
        DimensionMismatch: Lines have different number of values.
    """
    rows: list[list[float]] = []
    dimension = 0

    for line_no, line in enumerate(text.splitlines(), start=1):
        if delimiter is None:
            tokens = line.replace(",", " ").split()
        else:
            tokens = [token.strip() for token in line.split(delimiter)]
            tokens = [token for token in tokens if token]
        if not tokens:
            continue

        try:
            values = [float(token) for token in tokens]
        except ValueError:
            raise MalformedInput(
                f"line {line_no}: non-numeric value in {line!r}"
            ) from None

        # The first line decides the dimension.
        if not rows:
            dimension = len(values)
        elif len(values) != dimension:
            raise DimensionMismatch(dimension, len(values), what=f"line {line_no}")
        rows.append(values)

    if not rows:
        raise MalformedInput("point data is empty")

    points = np.array(rows, dtype=np.float64)
    if not np.all(np.isfinite(points)):
        raise MalformedInput("point data contains NaN or infinity")
    return points


def read_points(
    path: PathType, delimiter: str | None = None
) -> npt.NDArray[np.float64]:
    with open(path, "r") as f:
        text = f.read()

    try:
        points = parse_points(text, delimiter)
    except MalformedInput as e:
        raise MalformedInput(f"{path} is improperly formatted or empty: {e}") from e

    log.info("Read %d vectors of size %d", points.shape[0], points.shape[1])
    return points


def write_results(path: PathType, indices: Iterable[int]):
    with open(path, "w") as f:
        for index in indices:
            f.write(f"{index}\n")


def read_results(path: PathType) -> list[int]:
    with open(path, "r") as f:
        return [int(line) for line in f if line.strip()]
