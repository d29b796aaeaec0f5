"""Image transformation utilities."""

from solarlens.transforms.image_transforms import (
    centered_odd_kernel,
    convolve_same,
    radial_distance,
    uniform_kernel,
)

__all__ = [
    "centered_odd_kernel",
    "convolve_same",
    "radial_distance",
    "uniform_kernel",
]
