"""Point-source search and aperture significance test."""

import functools
from typing import final

import equinox as eqx
import jax
import jax.numpy as jnp
from jaxtyping import Array

from solarlens import constants as const
from solarlens.core.records import Detection
from solarlens.core.spectrum import empty_spectrum, validate_spectrum


@functools.partial(jax.jit, static_argnames=["margin"])
def find_peak(image: Array, margin: int) -> tuple[Array, Array]:
    """Location of the brightest pixel away from the image edges.

    Args:
        image: 2D image.
        margin: Number of edge rows and columns excluded from the search.

    Returns:
        (y, x) of the first brightest pixel in row-major order.
    """
    interior = image[margin:-margin, margin:-margin]
    flat_index = jnp.argmax(interior)
    y, x = jnp.unravel_index(flat_index, interior.shape)
    return y + margin, x + margin


@functools.partial(
    jax.jit, static_argnames=["aperture_half_width", "inner_half_width", "outer_half_width"]
)
def aperture_snr(
    image: Array,
    y: Array,
    x: Array,
    aperture_half_width: int = 2,
    inner_half_width: int = 5,
    outer_half_width: int = 10,
) -> tuple[Array, Array, Array]:
    """Aperture signal and annulus noise around a pixel.

    The signal is the sum over the square aperture. The noise is the RMS of
    the pixels in the square annulus whose Chebyshev distance from the center
    lies in (inner_half_width, outer_half_width].

    Args:
        image: 2D image.
        y: Row of the aperture center.
        x: Column of the aperture center.
        aperture_half_width: Half width of the signal aperture.
        inner_half_width: Half width of the square excluded from the annulus.
        outer_half_width: Half width of the outer edge of the annulus.

    Returns:
        (signal, noise, snr)
    """
    box_size = 2 * outer_half_width + 1
    box = jax.lax.dynamic_slice(
        image, (y - outer_half_width, x - outer_half_width), (box_size, box_size)
    )

    offsets = jnp.arange(box_size) - outer_half_width
    dy, dx = jnp.meshgrid(offsets, offsets, indexing="ij")
    chebyshev = jnp.maximum(jnp.abs(dy), jnp.abs(dx))

    in_aperture = chebyshev <= aperture_half_width
    in_annulus = chebyshev > inner_half_width
    n_annulus = box_size**2 - (2 * inner_half_width + 1) ** 2

    signal = jnp.sum(jnp.where(in_aperture, box, 0.0))
    noise = jnp.sqrt(jnp.sum(jnp.where(in_annulus, box**2, 0.0)) / n_annulus)
    snr = signal / (noise + const.eps)
    return signal, noise, snr


@final
class PointSourceDetector(eqx.Module):
    """Finds the brightest point source and tests its significance.

    A source is declared when the aperture SNR exceeds
    ``DETECTION_SNR_THRESHOLD`` (5 sigma).
    """

    margin: int
    aperture_half_width: int
    inner_half_width: int
    outer_half_width: int

    def __init__(
        self,
        margin: int = 10,
        aperture_half_width: int = 2,
        inner_half_width: int = 5,
        outer_half_width: int = 10,
    ):
        """Initialize the detector geometry."""
        if margin < outer_half_width:
            raise ValueError("margin must be at least the annulus outer half width.")
        self.margin = margin
        self.aperture_half_width = aperture_half_width
        self.inner_half_width = inner_half_width
        self.outer_half_width = outer_half_width

    def detect(
        self,
        processed_image: Array,
        spectrum: Array | None = None,
        doppler_shift: float = 0.0,
    ) -> Detection:
        """Search a restored image for a point source.

        Args:
            processed_image: Restored image.
            spectrum: Spectrum of the target, carried into the detection.
                Defaults to an empty spectrum.
            doppler_shift: Measured fractional Doppler shift of the target.

        Returns:
            The detection record.
        """
        image = jnp.asarray(processed_image, dtype=jnp.float32)
        if min(image.shape) <= 2 * self.margin:
            raise ValueError(
                f"Image of shape {image.shape} is too small for a {self.margin} pixel margin."
            )
        spectrum = empty_spectrum() if spectrum is None else validate_spectrum(spectrum)

        y, x = find_peak(image, self.margin)
        signal, _, snr = aperture_snr(
            image,
            y,
            x,
            aperture_half_width=self.aperture_half_width,
            inner_half_width=self.inner_half_width,
            outer_half_width=self.outer_half_width,
        )
        return Detection(
            found=bool(snr > const.DETECTION_SNR_THRESHOLD),
            flux=signal,
            snr=snr,
            doppler_shift=float(doppler_shift),
            spectrum=spectrum,
            peak_y=int(y),
            peak_x=int(x),
        )
