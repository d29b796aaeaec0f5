"""Model-based removal of the solar corona from a raw frame."""

from typing import final

import equinox as eqx
from jaxtyping import Array

from solarlens.physics.lens import GravitationalLens
from solarlens.transforms.image_transforms import radial_distance


@final
class CoronaSubtractor(eqx.Module):
    """Subtracts the modelled corona brightness from every pixel.

    The Sun sits at the center of the frame; each pixel's distance from it is
    converted to solar radii with a fixed pixel scale and the lens corona
    model is evaluated there.
    """

    lens: GravitationalLens
    pixels_per_solar_radius: float
    wavelength_nm: float

    def __init__(
        self,
        lens: GravitationalLens,
        pixels_per_solar_radius: float = 100.0,
        wavelength_nm: float = 550.0,
    ):
        """Initialize the subtractor."""
        self.lens = lens
        self.pixels_per_solar_radius = pixels_per_solar_radius
        self.wavelength_nm = wavelength_nm

    def corona_model(self, shape: tuple[int, int]) -> Array:
        """Corona brightness on a frame of the given shape."""
        r_solar_radii = radial_distance(shape) / self.pixels_per_solar_radius
        return self.lens.corona_brightness(r_solar_radii, self.wavelength_nm)

    def subtract(self, raw_image: Array, target_distance_ly: float) -> Array:
        """Remove the corona from a raw image.

        Args:
            raw_image: Accumulated image, centered on the Sun.
            target_distance_ly: Distance of the target system. Accepted for a
                distance-dependent corona model; the current model ignores it.

        Returns:
            The background-subtracted image. Values may be negative.
        """
        del target_distance_ly
        return raw_image - self.corona_model(raw_image.shape)
