"""Spectrograph bin grid.

Spectra are 1D arrays of ``SPECTRUM_BINS`` intensities mapped linearly onto
400-2400 nm. Bin ``i`` covers the wavelength ``400 + i * 2000 / 2048`` nm.
"""

import interpax
import jax.numpy as jnp
from jaxtyping import Array

from solarlens import constants as const


def bin_to_wavelength_nm(bin_index):
    """Wavelength in nm at the start of a spectrum bin."""
    return const.SPECTRUM_MIN_NM + bin_index * const.SPECTRUM_SPAN_NM / const.SPECTRUM_BINS


def wavelength_to_bin(wavelength_nm: int) -> int:
    """Spectrum bin containing an integer wavelength in nm.

    Integer arithmetic, so the result is the floor of the exact position.
    """
    offset = int(wavelength_nm) - int(const.SPECTRUM_MIN_NM)
    return offset * const.SPECTRUM_BINS // int(const.SPECTRUM_SPAN_NM)


def wavelength_grid() -> Array:
    """Wavelength in nm of every spectrum bin."""
    return bin_to_wavelength_nm(jnp.arange(const.SPECTRUM_BINS))


def empty_spectrum() -> Array:
    """An all-zero spectrum, used when no spectrograph data accompanies a frame."""
    return jnp.zeros(const.SPECTRUM_BINS, dtype=jnp.float32)


def validate_spectrum(spectrum) -> Array:
    """Return the spectrum as a float32 array, checking its length."""
    spectrum = jnp.asarray(spectrum, dtype=jnp.float32)
    if spectrum.shape != (const.SPECTRUM_BINS,):
        raise ValueError(
            f"Spectrum must have shape ({const.SPECTRUM_BINS},), got {spectrum.shape}."
        )
    return spectrum


def resample_spectrum(wavelengths_nm: Array, intensities: Array) -> Array:
    """Resample a measured spectrum onto the spectrograph bin grid.

    Linear interpolation between samples; bins outside the sampled range are
    set to zero.

    Args:
        wavelengths_nm: Monotonically increasing sample wavelengths in nm.
        intensities: Intensity at each sample wavelength.

    Returns:
        The spectrum on the ``SPECTRUM_BINS`` grid.
    """
    interp = interpax.Interpolator1D(
        jnp.asarray(wavelengths_nm, dtype=jnp.float32),
        jnp.asarray(intensities, dtype=jnp.float32),
        method="linear",
        extrap=jnp.array([0.0, 0.0]),
    )
    return interp(wavelength_grid()).astype(jnp.float32)
