"""Atmospheric composition from molecular absorption lines."""

import enum
from dataclasses import replace
from typing import final

import equinox as eqx
import jax.numpy as jnp
from jaxtyping import Array

from solarlens import constants as const
from solarlens.core.records import Atmosphere
from solarlens.core.spectrum import validate_spectrum, wavelength_to_bin


class Gas(enum.Enum):
    """Molecules with a tabulated absorption line."""

    OXYGEN = "O2"
    METHANE = "CH4"
    WATER = "H2O"
    CO2 = "CO2"
    NITROGEN = "N2"


# (wavelength in nm, molecule)
ABSORPTION_LINES = (
    (760, Gas.OXYGEN),  # O2 A-band
    (1640, Gas.METHANE),
    (940, Gas.WATER),
    (2013, Gas.CO2),
    (2300, Gas.NITROGEN),
)

# Bins on either side of a line used for the continuum
CONTINUUM_OFFSET = 10


def atmosphere_field(gas: Gas) -> str:
    """Name of the ``Atmosphere`` field holding a gas's absorption depth."""
    match gas:
        case Gas.OXYGEN:
            return "oxygen"
        case Gas.METHANE:
            return "methane"
        case Gas.WATER:
            return "water"
        case Gas.CO2:
            return "co2"
        case Gas.NITROGEN:
            return "nitrogen"
    raise ValueError(f"No atmosphere field for {gas!r}.")


def absorption_depth_percent(spectrum: Array, bin_index: int) -> float | None:
    """Depth of an absorption line relative to the local continuum, in percent.

    The continuum is the mean of the bins ``CONTINUUM_OFFSET`` to either side.

    Returns:
        The depth, or None when the continuum bins fall outside the spectrum.
    """
    lo = bin_index - CONTINUUM_OFFSET
    hi = bin_index + CONTINUUM_OFFSET
    if lo < 0 or hi >= spectrum.shape[0]:
        return None
    continuum = (spectrum[lo] + spectrum[hi]) / 2.0
    depth = (continuum - spectrum[bin_index]) / (continuum + const.eps)
    return float(depth * 100.0)


def biosignature_score(oxygen: float, methane: float, water: float) -> float:
    """Categorical biosignature score from co-occurring gases.

    Oxygen with methane (chemical disequilibrium) scores highest, then oxygen
    with water, then water alone.
    """
    oxygen_present = oxygen > 1.0
    methane_present = methane > 0.01
    water_present = water > 0.1

    if oxygen_present and methane_present:
        return 0.9
    if oxygen_present and water_present:
        return 0.6
    if water_present:
        return 0.3
    return 0.0


@final
class AtmosphereAnalyzer(eqx.Module):
    """Measures absorption depths of the tabulated lines and scores them."""

    lines: tuple[tuple[int, Gas], ...]

    def __init__(self, lines: tuple[tuple[int, Gas], ...] = ABSORPTION_LINES):
        """Initialize the analyzer with a line table."""
        self.lines = lines

    def analyze(self, spectrum: Array) -> Atmosphere:
        """Analyze a spectrum.

        Lines whose continuum window leaves the spectrum are skipped and their
        gas stays at zero.

        Args:
            spectrum: Spectrum on the spectrograph bin grid.

        Returns:
            The atmosphere record.
        """
        spectrum = validate_spectrum(spectrum)
        depths = {}
        for wavelength_nm, gas in self.lines:
            bin_index = wavelength_to_bin(wavelength_nm)
            depth = absorption_depth_percent(spectrum, bin_index)
            if depth is not None:
                depths[atmosphere_field(gas)] = depth

        atmosphere = replace(Atmosphere(), **depths)
        score = biosignature_score(
            atmosphere.oxygen, atmosphere.methane, atmosphere.water
        )
        return replace(atmosphere, biosignature_score=score)
