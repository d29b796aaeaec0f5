"""Image transformation utilities."""

import functools

import jax
import jax.numpy as jnp
from jax.scipy.signal import convolve2d, fftconvolve
from jaxtyping import Array


def uniform_kernel(size: int = 5) -> Array:
    """Return a (size, size) box kernel with equal weights summing to one."""
    return jnp.full((size, size), 1.0 / size**2, dtype=jnp.float32)


def centered_odd_kernel(kernel: Array) -> Array:
    """Trim an even-sized kernel so its peak sits on the central pixel.

    Kernels built around pixel (N // 2, N // 2) on an even grid lose their
    first row and column, which puts that pixel at the exact center of an
    odd grid. The result is renormalized to unit sum. Odd kernels are returned
    unchanged.
    """
    ny, nx = kernel.shape
    trimmed = kernel[1 - ny % 2 :, 1 - nx % 2 :]
    if trimmed.shape == kernel.shape:
        return kernel
    return trimmed / jnp.sum(trimmed)


@functools.partial(jax.jit, static_argnames=["method"])
def convolve_same(image: Array, kernel: Array, method: str = "direct") -> Array:
    """Convolve an image with a kernel, keeping the image shape.

    Pixels beyond the image border contribute zero (implicit zero padding).

    Args:
        image: 2D image of shape (ny, nx).
        kernel: 2D kernel with odd edge lengths.
        method: "direct" for a spatial sum (small kernels) or "fft" for
            FFT-based convolution (large kernels).

    Returns:
        The convolved image, shape (ny, nx).
    """
    if method == "fft":
        return fftconvolve(image, kernel, mode="same")
    return convolve2d(image, kernel, mode="same", boundary="fill", fillvalue=0.0)


def radial_distance(shape: tuple[int, int], center: tuple[float, float] | None = None):
    """Distance of every pixel from a center point, in pixels.

    Args:
        shape: Image shape (ny, nx).
        center: (cy, cx) of the center. Defaults to (ny / 2, nx / 2), the
            optical axis of the sensor.

    Returns:
        Array of shape (ny, nx) with the Euclidean distance of each pixel.
    """
    ny, nx = shape
    if center is None:
        center = (ny / 2.0, nx / 2.0)
    cy, cx = center
    y_coords = jnp.arange(ny)
    x_coords = jnp.arange(nx)
    yy, xx = jnp.meshgrid(y_coords, x_coords, indexing="ij")
    return jnp.sqrt((xx - cx) ** 2 + (yy - cy) ** 2)
