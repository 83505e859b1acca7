from __future__ import annotations

import numpy as np

from .builder import as_point_array
from .searcher import as_query_vector


def brute_force_closest(points, query) -> int:
    """Find the closest point by linear scan, as a ground truth for testing.

    The first point wins among equidistant points.

    Returns:
        Index of the closest point. -1, if there's no point.
    """
    data = as_point_array(points)
    if len(data) == 0:
        return -1

    query = as_query_vector(query, data.shape[1])
    diff = data - query
    dist2 = np.einsum("ij,ij->i", diff, diff)

    # argmin returns the first occurrence of the minimum.
    return int(np.argmin(dist2))
