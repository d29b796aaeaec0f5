"""Photon accumulation with shot noise."""

from typing import final

import equinox as eqx
import jax
import jax.numpy as jnp
from jaxtyping import Array


# Pure functions for noise simulation
@jax.jit
def accumulate_signal(raw_counts: Array, integration_time_s: float) -> Array:
    """Integrate a count-rate frame over the exposure.

    Args:
        raw_counts: Photon counts per pixel per second.
        integration_time_s: Integration time in seconds.

    Returns:
        The accumulated signal in photo-electrons.
    """
    return raw_counts.astype(jnp.float32) * integration_time_s


@jax.jit
def shot_noise_sigma(
    signal: Array, dark_current_rate: float, integration_time_s: float
) -> Array:
    """Poisson shot-noise amplitude of a signal plus dark current.

    Args:
        signal: Accumulated signal in electrons.
        dark_current_rate: Dark current rate in electrons/s/pixel.
        integration_time_s: Integration time in seconds.

    Returns:
        Standard deviation of the counts in electrons.
    """
    return jnp.sqrt(signal + dark_current_rate * integration_time_s)


@final
class ImageAccumulator(eqx.Module):
    """Turns one raw sensor frame into a noisy flux image.

    Every pixel is processed independently of its neighbours.
    """

    # electrons/s/pixel
    dark_current_rate: float

    def __init__(self, dark_current_rate: float = 0.01):
        """Initialize the accumulator."""
        self.dark_current_rate = dark_current_rate

    def accumulate(
        self,
        raw_counts: Array,
        integration_time_s: float,
        prng_key: Array | None = None,
    ) -> Array:
        """Accumulate photons over the integration time and add shot noise.

        Without a key the noise term is its deterministic amplitude
        sqrt(signal + dark_current * t), so identical inputs always give
        identical images. With a key the noise is a seeded Gaussian
        realization of the same amplitude.

        Args:
            raw_counts: Sensor frame of photon counts per second.
            integration_time_s: Integration time in seconds.
            prng_key: Optional PRNG key for a random noise realization.

        Returns:
            The raw image, signal plus noise, as float32.
        """
        if integration_time_s < 0:
            raise ValueError("integration_time_s must be non-negative.")
        signal = accumulate_signal(jnp.asarray(raw_counts), integration_time_s)
        sigma = shot_noise_sigma(signal, self.dark_current_rate, integration_time_s)
        if prng_key is None:
            noise = sigma
        else:
            noise = sigma * jax.random.normal(prng_key, shape=signal.shape)
        return (signal + noise).astype(jnp.float32)
