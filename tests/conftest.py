"""Pytest configuration for lumen tests.

This module provides shared fixtures for all test modules: a seeded random
generator and, for the preview tests, a Taichi CPU runtime initialized once
per session.
"""

import numpy as np
import pytest


@pytest.fixture
def rng():
    """A seeded generator so sampling tests are reproducible."""
    return np.random.default_rng(42)


@pytest.fixture(scope="session")
def taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. Tests requesting
    this fixture are skipped when Taichi is not installed.
    """
    ti = pytest.importorskip("taichi")
    ti.init(arch=ti.cpu, random_seed=42)
    yield ti


@pytest.fixture
def grey():
    """A mid-grey Lambertian material."""
    from lumen.core.vec3 import Vec3
    from lumen.materials import Lambertian

    return Lambertian.solid(Vec3(0.5, 0.5, 0.5))
