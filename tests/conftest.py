import numpy as np
import pytest


@pytest.fixture
def rng():
    return np.random.default_rng(19)


@pytest.fixture
def diagonal_points():
    return [[0, 0], [1, 1], [2, 2], [3, 3]]
