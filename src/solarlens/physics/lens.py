"""Gravitational lens physics of the Sun.

The Sun bends light passing at impact parameter b by 4GM/(c^2 b), so rays
grazing the limb converge on a focal line starting near 550 AU. This module
provides the closed-form quantities the imaging pipeline depends on: the
focal distance, the point-lens magnification, the point spread function of the
imaging system, and a model of the solar-corona brightness that dominates the
background of every frame.
"""

from typing import final

import equinox as eqx
import jax.numpy as jnp
from jaxtyping import Array

from solarlens import constants as const
from solarlens import conversions as conv


@final
class PSFKernel(eqx.Module):
    """Point spread function kernel of the lens-plus-telescope system.

    Attributes:
        kernel: Square array of weights normalized to unit sum.
        fwhm_mas: Full width at half maximum in milliarcseconds.
    """

    kernel: Array
    fwhm_mas: Array

    @property
    def size(self) -> int:
        """Edge length of the kernel in pixels."""
        return self.kernel.shape[0]


def gaussian_kernel(size: int, sigma_px: float) -> Array:
    """Create a centered 2D Gaussian kernel normalized to unit sum.

    The kernel is centered on pixel (size // 2, size // 2), so even-sized
    kernels are not mirror symmetric about the array midpoint.

    Args:
        size: Edge length of the kernel in pixels.
        sigma_px: Standard deviation of the Gaussian in pixels.

    Returns:
        The (size, size) kernel.
    """
    center = size // 2
    idx = jnp.arange(size)
    yy, xx = jnp.meshgrid(idx, idx, indexing="ij")
    r2 = (yy - center) ** 2 + (xx - center) ** 2
    kernel = jnp.exp(-r2 / (2.0 * sigma_px**2))
    return kernel / jnp.sum(kernel)


@final
class GravitationalLens(eqx.Module):
    """Physics of the solar gravitational lens.

    Instantiated once and shared read-only by every pipeline run.
    """

    schwarzschild_radius_m: float
    einstein_radius_1au_m: float

    def __init__(self):
        """Pre-compute the solar Schwarzschild radius and 1 AU Einstein radius."""
        gm = const.G_kg_m_s * const.Msun2kg
        self.schwarzschild_radius_m = 2.0 * gm / const.c**2
        self.einstein_radius_1au_m = (4.0 * gm * const.AU2m / const.c**2) ** 0.5

    def focal_distance_au(self, wavelength_nm):
        """Distance of the lens focus from the Sun for a given wavelength.

        The achromatic focal distance R_sun^2 / (4 r_s) is scaled by the
        refractive index of the coronal plasma, sqrt(1 - f_p^2 / f^2).

        Args:
            wavelength_nm: Observation wavelength in nm.

        Returns:
            Focal distance in AU.
        """
        f_base = const.Rsun2m**2 / (4.0 * self.schwarzschild_radius_m)

        plasma_freq = conv.plasma_frequency_hz(const.CORONA_ELECTRON_DENSITY_CM3)
        light_freq = conv.wavelength_nm_to_hz(wavelength_nm)
        dispersion_factor = 1.0 - (plasma_freq / light_freq) ** 2

        f_chromatic = f_base * jnp.sqrt(dispersion_factor)
        return conv.m_to_au(f_chromatic)

    def einstein_radius_m(self, source_distance_ly, observer_distance_au):
        """Physical Einstein ring radius at the observer.

        Args:
            source_distance_ly: Distance to the source in light years.
            observer_distance_au: Distance of the observer behind the Sun in AU.

        Returns:
            Einstein radius in meters.
        """
        d_s = conv.ly_to_m(source_distance_ly)
        d_l = conv.au_to_m(observer_distance_au)
        # Lens equation with the Sun as the deflector
        theta_e = jnp.sqrt(2.0 * self.schwarzschild_radius_m * (d_s - d_l) / (d_l * d_s))
        return theta_e * d_l

    def magnification(
        self, source_distance_ly, observer_distance_au, impact_parameter_km
    ):
        """Point-lens magnification of a source seen through the Sun.

        Args:
            source_distance_ly: Distance to the source in light years.
            observer_distance_au: Distance of the observer behind the Sun in AU.
            impact_parameter_km: Offset of the observer from the optical axis in km.

        Returns:
            Dimensionless magnification, or ``MAGNIFICATION_SENTINEL`` when the
            normalized impact parameter is below ``ALIGNMENT_LIMIT``.
        """
        r_e = self.einstein_radius_m(source_distance_ly, observer_distance_au)
        u = conv.km_to_m(impact_parameter_km) / r_e

        # Both branches are evaluated; the sentinel masks the singular one
        mu = (u**2 + 2.0) / (u * jnp.sqrt(u**2 + 4.0))
        mu = mu * jnp.exp(-const.CORONA_ATTENUATION)
        return jnp.where(u < const.ALIGNMENT_LIMIT, const.MAGNIFICATION_SENTINEL, mu)

    def psf(self, wavelength_nm, observer_distance_au) -> PSFKernel:
        """Point spread function for a wavelength and observer distance.

        The width follows the Rayleigh criterion 1.22 lambda / D with the
        observer distance acting as the baseline. The kernel itself is a
        Gaussian with sigma = PSF_SIZE / 6 pixels.

        Args:
            wavelength_nm: Observation wavelength in nm.
            observer_distance_au: Distance of the observer behind the Sun in AU.

        Returns:
            The PSF kernel.
        """
        baseline_m = conv.au_to_m(observer_distance_au)
        theta_resolution = 1.22 * conv.nm_to_m(wavelength_nm) / baseline_m
        fwhm_mas = jnp.asarray(conv.rad_to_mas(theta_resolution))
        kernel = gaussian_kernel(const.PSF_SIZE, const.PSF_SIZE / 6.0)
        return PSFKernel(kernel=kernel, fwhm_mas=fwhm_mas)

    def corona_brightness(self, angular_distance_solar_radii, wavelength_nm):
        """Brightness of the solar corona at a projected distance from Sun center.

        Sum of the K-corona (Thomson scattering, r^-2.5) and the F-corona
        (dust, r^-2.2), scaled by (lambda / 550 nm)^-1.2. Inside the solar disk
        the brightness saturates at ``CORONA_SATURATION``. Evaluated
        elementwise, so arrays of distances are accepted.

        Args:
            angular_distance_solar_radii: Projected distance in solar radii.
            wavelength_nm: Wavelength in nm.

        Returns:
            Corona brightness in detector counts.
        """
        r = jnp.asarray(angular_distance_solar_radii)
        # Keep the power laws finite on the disk, where they are masked anyway
        r_safe = jnp.maximum(r, 1.0)
        k_corona = 1e6 * r_safe**-2.5
        f_corona = 1e5 * r_safe**-2.2
        lambda_factor = (wavelength_nm / const.CORONA_REFERENCE_NM) ** -1.2
        return jnp.where(
            r < 1.0, const.CORONA_SATURATION, (k_corona + f_corona) * lambda_factor
        )
