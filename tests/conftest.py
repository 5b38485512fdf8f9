import logging

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from equidepth import HistogramEstimator


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def scenario_estimator():
    """Two bins after the samples 5, 1, 10."""
    estimator = HistogramEstimator(2)
    estimator.extend([5.0, 1.0, 10.0])
    return estimator


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
