"""Solar gravitational lens exoplanet imaging with JAX."""

from solarlens import constants, conversions
from solarlens.analysis import AtmosphereAnalyzer, Gas, ParameterEstimator
from solarlens.core import Atmosphere, Detection, PlanetData, resample_spectrum
from solarlens.imaging import (
    CoronaSubtractor,
    Deconvolver,
    ImageAccumulator,
    PointSourceDetector,
)
from solarlens.physics import GravitationalLens, PSFKernel
from solarlens.pipeline import ExoplanetDetector, PipelineRun, detect_exoplanet
from solarlens.report import format_planet_report
from solarlens.settings import Settings

__all__ = [
    "constants",
    "conversions",
    "Atmosphere",
    "AtmosphereAnalyzer",
    "CoronaSubtractor",
    "Deconvolver",
    "Detection",
    "ExoplanetDetector",
    "Gas",
    "GravitationalLens",
    "ImageAccumulator",
    "ParameterEstimator",
    "PipelineRun",
    "PlanetData",
    "PointSourceDetector",
    "PSFKernel",
    "Settings",
    "detect_exoplanet",
    "format_planet_report",
    "resample_spectrum",
]
