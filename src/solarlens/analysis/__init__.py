"""Physical and atmospheric inference for detected planets."""

from solarlens.analysis.atmosphere import AtmosphereAnalyzer, Gas
from solarlens.analysis.parameters import ParameterEstimator

__all__ = ["AtmosphereAnalyzer", "Gas", "ParameterEstimator"]
