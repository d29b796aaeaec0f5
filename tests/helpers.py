"""This file contains reusable helper functions for the test suite."""

import jax.numpy as jnp
import numpy as np
from scipy.stats import kstest

from solarlens import constants as const
from solarlens.core.spectrum import wavelength_to_bin


def point_source_frame(size, y, x, counts_per_s, background=0):
    """Sensor frame of unsigned counts with one bright pixel.

    Args:
        size: Edge length of the frame.
        y: Row of the source.
        x: Column of the source.
        counts_per_s: Count rate of the source pixel.
        background: Count rate of every other pixel.

    Returns:
        A (size, size) uint16 array.
    """
    frame = np.full((size, size), background, dtype=np.uint16)
    frame[y, x] = counts_per_s
    return jnp.asarray(frame)


def snr_test_image(size, peak_value, ring_value=1.0, center=None):
    """Image with a single peak and a uniform annulus for SNR tests.

    The peak pixel is the only pixel in the 5x5 aperture, and every pixel with
    Chebyshev distance 6..10 from it is ``ring_value``. The aperture SNR is
    then peak_value / ring_value.
    """
    if center is None:
        center = (size // 2, size // 2)
    cy, cx = center
    image = np.zeros((size, size), dtype=np.float32)
    image[cy - 10 : cy + 11, cx - 10 : cx + 11] = ring_value
    image[cy - 5 : cy + 6, cx - 5 : cx + 6] = 0.0
    image[cy, cx] = peak_value
    return jnp.asarray(image)


def absorption_spectrum(depths_percent, continuum=1.0):
    """Flat spectrum with absorption dips at selected wavelengths.

    Args:
        depths_percent: Mapping of line wavelength in nm to depth in percent.
        continuum: Level of the flat continuum.

    Returns:
        Spectrum on the spectrograph bin grid.
    """
    spectrum = np.full(const.SPECTRUM_BINS, continuum, dtype=np.float32)
    for wavelength_nm, depth in depths_percent.items():
        spectrum[wavelength_to_bin(wavelength_nm)] = continuum * (1.0 - depth / 100.0)
    return jnp.asarray(spectrum)


def peaked_spectrum(bin_index, peak=10.0, floor=1.0):
    """Flat spectrum with a single maximum at ``bin_index``."""
    spectrum = np.full(const.SPECTRUM_BINS, floor, dtype=np.float32)
    spectrum[bin_index] = peak
    return jnp.asarray(spectrum)


def assert_standard_normal(samples, significance_level=0.01):
    """Asserts that samples are consistent with a standard normal distribution.

    Performs a Kolmogorov-Smirnov test against N(0, 1).
    """
    samples = np.asarray(samples).ravel()
    _, p_value = kstest(samples, "norm")
    # Fail only if the normal hypothesis is rejected
    assert p_value > significance_level
