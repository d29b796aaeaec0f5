"""Image-plane stages of the detection pipeline."""

from solarlens.imaging.accumulator import ImageAccumulator
from solarlens.imaging.corona import CoronaSubtractor
from solarlens.imaging.deconvolution import Deconvolver
from solarlens.imaging.detection import PointSourceDetector

__all__ = [
    "ImageAccumulator",
    "CoronaSubtractor",
    "Deconvolver",
    "PointSourceDetector",
]
