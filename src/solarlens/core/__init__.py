"""Core records and the spectrograph bin grid."""

from solarlens.core.records import Atmosphere, Detection, PlanetData
from solarlens.core.spectrum import (
    bin_to_wavelength_nm,
    resample_spectrum,
    wavelength_to_bin,
)

__all__ = [
    "Atmosphere",
    "Detection",
    "PlanetData",
    "bin_to_wavelength_nm",
    "resample_spectrum",
    "wavelength_to_bin",
]
