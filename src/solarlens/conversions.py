"""Unit conversion functions using centralized constants.

Note: Functions are NOT JIT-compiled to allow JAX to fuse them into larger kernels.
JIT-compile the top-level functions that use these conversions.
"""

from solarlens import constants as const


# Length conversions
def nm_to_m(length_nm):
    """Convert length from nanometers to meters."""
    return length_nm * const.nm2m


def km_to_m(length_km):
    """Convert length from kilometers to meters."""
    return length_km * const.km2m


def au_to_m(length_au):
    """Convert length from AU to meters."""
    return length_au * const.AU2m


def m_to_au(length_m):
    """Convert length from meters to AU."""
    return length_m * const.m2AU


def ly_to_m(length_ly):
    """Convert length from light years to meters."""
    return length_ly * const.ly2m


def m_to_Rearth(length_m):
    """Convert length from meters to Earth radii."""
    return length_m / const.Rearth2m


# Angular conversions
def rad_to_mas(angle_rad):
    """Convert angle from radians to milliarcseconds."""
    return angle_rad * const.rad2mas


# Velocity conversions
def doppler_to_m_per_s(doppler_shift):
    """Convert a fractional Doppler shift (dv/c) to a line-of-sight velocity in m/s."""
    return doppler_shift * const.c


# Frequency conversions
def wavelength_nm_to_hz(wavelength_nm):
    """Convert a wavelength in nanometers to a frequency in Hz."""
    return const.c / nm_to_m(wavelength_nm)


def plasma_frequency_hz(electron_density_cm3):
    """Electron plasma frequency for a density in electrons/cm^3.

    Uses the usual approximation f_p = 8.98 kHz * sqrt(n_e).
    """
    return 8.98e3 * electron_density_cm3**0.5


# Flux conversions
def insolation_W_m2(luminosity_W, distance_m):
    """Stellar flux received at a given distance from a source of luminosity L."""
    return luminosity_W / (const.four_pi * distance_m**2)
