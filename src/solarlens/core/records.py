"""Records passed between the detection stages and returned to callers.

``Detection`` is a transient JAX-side record consumed once by the estimation
stages. ``Atmosphere`` and ``PlanetData`` are the immutable terminal output;
they hold plain Python numbers so that two runs with identical inputs compare
equal with ``==``.
"""

from dataclasses import asdict, dataclass, field

import equinox as eqx
from jaxtyping import Array


class Detection(eqx.Module):
    """Outcome of the point-source search on a restored image."""

    found: bool
    flux: Array  # Aperture sum at the peak
    snr: Array
    doppler_shift: float  # Fractional line-of-sight velocity (dv/c)
    spectrum: Array  # SPECTRUM_BINS intensities
    peak_y: int
    peak_x: int


@dataclass(frozen=True)
class Atmosphere:
    """Absorption depths in percent and the biosignature score."""

    oxygen: float = 0.0  # O2
    methane: float = 0.0  # CH4
    water: float = 0.0  # H2O
    co2: float = 0.0  # CO2
    nitrogen: float = 0.0  # N2
    biosignature_score: float = 0.0  # One of 0.0, 0.3, 0.6, 0.9


@dataclass(frozen=True)
class PlanetData:
    """Physical and atmospheric characterization of a detected planet."""

    detected: bool = False
    radius_earth: float = 0.0
    orbital_radius_au: float = 0.0
    temperature_kelvin: float = 0.0
    albedo: float = 0.0
    in_habitable_zone: bool = False
    confidence: float = 0.0
    atmosphere: Atmosphere = field(default_factory=Atmosphere)

    @classmethod
    def empty(cls):
        """The record returned when no point source clears the threshold."""
        return cls()

    def to_dict(self):
        """Return the record as nested plain dictionaries."""
        return asdict(self)
