"""Shared pytest fixtures for solarlens tests."""

import jax
import pytest

from solarlens.physics.lens import GravitationalLens


@pytest.fixture
def prng_key():
    """Provide a reproducible JAX random key."""
    return jax.random.PRNGKey(42)


@pytest.fixture
def wavelength_nm():
    """Standard test wavelength (V-band)."""
    return 550.0


@pytest.fixture
def exposure_time_s():
    """Standard test exposure time (1 hour)."""
    return 3600.0


@pytest.fixture
def target_distance_ly():
    """Alpha Centauri."""
    return 4.37


@pytest.fixture(scope="session")
def lens():
    """Shared lens physics instance."""
    return GravitationalLens()
