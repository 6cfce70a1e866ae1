"""Pytest configuration and fixtures."""

import numpy as np
import pytest

from adgraph.config import reset_config


@pytest.fixture
def rng():
    """Seeded generator for reproducible random values."""
    return np.random.default_rng(42)


@pytest.fixture
def fresh_config():
    """Drop cached settings before and after a test that changes them."""
    reset_config()
    yield
    reset_config()
