"""Physical parameter estimates for a detected planet."""

from typing import final

import equinox as eqx
import jax.numpy as jnp
from jaxtyping import Array

from solarlens import constants as const
from solarlens import conversions as conv
from solarlens.core.spectrum import bin_to_wavelength_nm


@final
class ParameterEstimator(eqx.Module):
    """Infers radius, temperature, albedo and orbit from a detection.

    The host star is assumed Sun-like, the planet albedo fixed for the radius
    inversion, and the system at a fixed distance.
    """

    assumed_albedo: float
    stellar_luminosity_W: float
    system_distance_ly: float
    luminosity_solar: float

    def __init__(
        self,
        assumed_albedo: float = 0.3,
        stellar_luminosity_W: float = const.Lsun_W,
        system_distance_ly: float = 10.0,
        luminosity_solar: float = 1.0,
    ):
        """Initialize the estimator assumptions."""
        self.assumed_albedo = assumed_albedo
        self.stellar_luminosity_W = stellar_luminosity_W
        self.system_distance_ly = system_distance_ly
        self.luminosity_solar = luminosity_solar

    def radius_from_flux(self, flux) -> Array:
        """Planet radius from its reflected flux.

        Inverts flux = (R_p / d)^2 * albedo * L_star / (4 pi), i.e.
        R_p = d * sqrt(4 pi * flux / (albedo * L_star)).

        Args:
            flux: Planet flux from the detection aperture.

        Returns:
            Radius in Earth radii.
        """
        distance_m = conv.ly_to_m(self.system_distance_ly)
        ratio = const.four_pi * flux / (self.assumed_albedo * self.stellar_luminosity_W)
        radius_m = distance_m * jnp.sqrt(ratio)
        return conv.m_to_Rearth(radius_m)

    def temperature(self, spectrum: Array) -> Array:
        """Blackbody temperature from the spectrum peak via Wien's law.

        The first bin of maximal intensity is the peak. A spectrum with no
        positive bin peaks at bin 0.

        Args:
            spectrum: Spectrum on the spectrograph bin grid.

        Returns:
            Temperature in K.
        """
        spectrum = jnp.asarray(spectrum)
        peak_bin = jnp.where(jnp.max(spectrum) > 0, jnp.argmax(spectrum), 0)
        wavelength_m = conv.nm_to_m(bin_to_wavelength_nm(peak_bin))
        return const.wien_b / wavelength_m

    def albedo(self, flux, temperature) -> Array:
        """Bond albedo from the emitted-to-incident power ratio at 1 AU.

        Args:
            flux: Planet flux. Not used by this model.
            temperature: Planet temperature in K.

        Returns:
            1 - sigma T^4 / S, with S the insolation at 1 AU.
        """
        del flux
        emitted_power = const.sigma_SB * jnp.asarray(temperature) ** 4
        incident_power = conv.insolation_W_m2(self.stellar_luminosity_W, const.AU2m)
        return 1.0 - emitted_power / incident_power

    def orbit_from_doppler(self, doppler_shift) -> Array:
        """Orbital radius of a circular, edge-on orbit from its Doppler shift.

        Kepler's third law v = sqrt(GM / r) solved for r.

        Args:
            doppler_shift: Fractional Doppler shift (v / c).

        Returns:
            Orbital radius in AU.
        """
        velocity = conv.doppler_to_m_per_s(jnp.asarray(doppler_shift, dtype=jnp.float32))
        gm = const.G_kg_m_s * const.Msun2kg
        return conv.m_to_au(gm / (velocity**2 + const.eps))

    def in_habitable_zone(self, orbital_radius_au) -> Array:
        """Whether an orbit lies strictly inside the liquid-water zone.

        The zone spans 0.95 sqrt(L) to 1.37 sqrt(L) AU, both bounds excluded.
        """
        root_l = self.luminosity_solar**0.5
        r = jnp.asarray(orbital_radius_au, dtype=jnp.float32)
        return (r > 0.95 * root_l) & (r < 1.37 * root_l)
