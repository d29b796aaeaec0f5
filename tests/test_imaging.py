"""Tests for the image-plane stages in solarlens.imaging."""

import jax
import jax.numpy as jnp
import pytest
from helpers import assert_standard_normal, snr_test_image

from solarlens import constants as const
from solarlens.imaging.accumulator import (
    ImageAccumulator,
    accumulate_signal,
    shot_noise_sigma,
)
from solarlens.imaging.corona import CoronaSubtractor
from solarlens.imaging.deconvolution import Deconvolver, richardson_lucy
from solarlens.imaging.detection import PointSourceDetector, aperture_snr, find_peak
from solarlens.physics.lens import PSFKernel, gaussian_kernel
from solarlens.transforms.image_transforms import convolve_same, uniform_kernel


class TestImageAccumulator:
    """Tests for photon accumulation with shot noise."""

    def test_deterministic_noise(self, exposure_time_s):
        """Without a key the output is signal + sqrt(signal + dark * t)."""
        counts = jnp.array([[0, 1], [10, 100]], dtype=jnp.uint16)
        image = ImageAccumulator(0.01).accumulate(counts, exposure_time_s)

        signal = counts.astype(jnp.float32) * exposure_time_s
        expected = signal + jnp.sqrt(signal + 0.01 * exposure_time_s)
        assert image.dtype == jnp.float32
        assert jnp.allclose(image, expected, rtol=1e-6)

    def test_zero_counts_leave_dark_noise(self, exposure_time_s):
        """An empty frame still carries dark-current shot noise."""
        image = ImageAccumulator(0.01).accumulate(
            jnp.zeros((8, 8), dtype=jnp.uint16), exposure_time_s
        )
        assert jnp.allclose(image, jnp.sqrt(0.01 * exposure_time_s))

    def test_elementwise(self):
        """A pixel's value does not depend on its neighbours."""
        accumulator = ImageAccumulator()
        single = accumulator.accumulate(jnp.array([[50]], dtype=jnp.uint16), 10.0)
        frame = jnp.array([[50, 0], [7, 9000]], dtype=jnp.uint16)
        full = accumulator.accumulate(frame, 10.0)
        assert full[0, 0] == single[0, 0]

    def test_seeded_noise_reproducible(self, prng_key):
        """The same key gives the same noise realization."""
        counts = jnp.full((32, 32), 20, dtype=jnp.uint16)
        accumulator = ImageAccumulator()
        first = accumulator.accumulate(counts, 100.0, prng_key)
        second = accumulator.accumulate(counts, 100.0, prng_key)
        assert jnp.array_equal(first, second)

    def test_seeded_noise_differs_between_keys(self, prng_key):
        """Different keys give different realizations."""
        counts = jnp.full((32, 32), 20, dtype=jnp.uint16)
        key1, key2 = jax.random.split(prng_key)
        accumulator = ImageAccumulator()
        assert not jnp.array_equal(
            accumulator.accumulate(counts, 100.0, key1),
            accumulator.accumulate(counts, 100.0, key2),
        )

    def test_seeded_noise_statistics(self, prng_key):
        """Seeded noise is Gaussian with the shot-noise amplitude."""
        counts = jnp.full((100, 100), 25, dtype=jnp.uint16)
        t = 4.0
        image = ImageAccumulator(0.0).accumulate(counts, t, prng_key)
        signal = accumulate_signal(counts, t)
        sigma = shot_noise_sigma(signal, 0.0, t)
        assert_standard_normal((image - signal) / sigma)

    def test_negative_integration_time(self):
        """Negative integration times are rejected."""
        with pytest.raises(ValueError):
            ImageAccumulator().accumulate(jnp.zeros((4, 4), dtype=jnp.uint16), -1.0)


class TestCoronaSubtractor:
    """Tests for model-based corona removal."""

    def test_center_saturated(self, lens):
        """The Sun itself is removed at the saturation level."""
        raw = jnp.full((64, 64), 2e10, dtype=jnp.float32)
        processed = CoronaSubtractor(lens).subtract(raw, 4.37)
        assert jnp.isclose(processed[32, 32], 2e10 - const.CORONA_SATURATION)

    def test_matches_model(self, lens):
        """Subtraction removes exactly the model evaluated at each radius."""
        subtractor = CoronaSubtractor(lens, pixels_per_solar_radius=10.0)
        raw = jnp.zeros((64, 64), dtype=jnp.float32)
        processed = subtractor.subtract(raw, 4.37)
        # Pixel (32, 62) is 30 px = 3 solar radii from the center
        expected = -lens.corona_brightness(3.0, 550.0)
        assert jnp.isclose(processed[32, 62], expected, rtol=1e-5)

    def test_target_distance_ignored(self, lens):
        """The target distance has no effect on the current model."""
        subtractor = CoronaSubtractor(lens, pixels_per_solar_radius=10.0)
        raw = jnp.ones((32, 32), dtype=jnp.float32) * 1e6
        assert jnp.array_equal(subtractor.subtract(raw, 4.37), subtractor.subtract(raw, 1000.0))

    def test_shape_preserved(self, lens):
        """Output keeps the input shape."""
        raw = jnp.zeros((48, 48), dtype=jnp.float32)
        assert CoronaSubtractor(lens).subtract(raw, 10.0).shape == (48, 48)


class TestDeconvolver:
    """Tests for Richardson-Lucy restoration."""

    @pytest.fixture
    def blurred_point(self):
        """A point source blurred by the uniform kernel."""
        image = jnp.zeros((64, 64), dtype=jnp.float32).at[32, 32].set(1000.0)
        return convolve_same(image, uniform_kernel(5))

    def test_zero_iterations_identity(self, blurred_point):
        """Zero iterations return the input unchanged."""
        restored = Deconvolver("uniform").restore(blurred_point, iterations=0)
        assert jnp.array_equal(restored, blurred_point)

    def test_non_negative(self, blurred_point):
        """Restoring a non-negative image never produces negative values."""
        restored = Deconvolver("uniform", iterations=50).restore(blurred_point)
        assert jnp.all(restored >= 0)
        assert jnp.all(jnp.isfinite(restored))

    def test_sharpens_point_source(self, blurred_point):
        """Restoration concentrates the blurred flux back on the source."""
        restored = Deconvolver("uniform", iterations=50).restore(blurred_point)
        assert restored[32, 32] > 2 * blurred_point[32, 32]
        assert jnp.argmax(restored) == jnp.argmax(blurred_point)

    def test_conserves_interior_flux(self, blurred_point):
        """Away from the borders the total flux is preserved."""
        restored = Deconvolver("uniform", iterations=20).restore(blurred_point)
        assert jnp.isclose(jnp.sum(restored), jnp.sum(blurred_point), rtol=1e-3)

    def test_shape_preserved(self):
        """Output has the same shape as the input."""
        image = jnp.ones((40, 40), dtype=jnp.float32)
        assert Deconvolver().restore(image, iterations=3).shape == (40, 40)

    def test_psf_kernel(self):
        """The PSF kernel path restores a PSF-blurred source."""
        psf = PSFKernel(kernel=gaussian_kernel(16, 1.5), fwhm_mas=jnp.asarray(1.0))
        deconvolver = Deconvolver("psf", iterations=30)
        kernel = deconvolver.blur_kernel(psf)
        assert kernel.shape == (15, 15)

        image = jnp.zeros((64, 64), dtype=jnp.float32).at[30, 34].set(500.0)
        blurred = convolve_same(image, kernel)
        restored = deconvolver.restore(blurred, psf)
        assert jnp.all(restored >= 0)
        assert restored[30, 34] > blurred[30, 34]
        assert int(jnp.argmax(restored)) == 30 * 64 + 34

    def test_psf_kernel_required(self):
        """The PSF path needs a kernel."""
        with pytest.raises(ValueError):
            Deconvolver("psf").restore(jnp.ones((32, 32)))

    def test_unknown_kernel(self):
        """Only the two documented kernels are accepted."""
        with pytest.raises(ValueError):
            Deconvolver("airy")

    def test_negative_iterations(self):
        """Negative iteration counts are rejected."""
        with pytest.raises(ValueError):
            Deconvolver("uniform", iterations=-1)

    def test_function_matches_class(self, blurred_point):
        """The class is a thin wrapper around ``richardson_lucy``."""
        direct = richardson_lucy(blurred_point, uniform_kernel(5), 7)
        wrapped = Deconvolver("uniform", iterations=7).restore(blurred_point)
        assert jnp.array_equal(direct, wrapped)


class TestPointSourceDetector:
    """Tests for peak finding and the significance test."""

    def test_finds_peak(self):
        """The brightest interior pixel is located."""
        image = jnp.zeros((64, 64)).at[40, 22].set(3.0)
        y, x = find_peak(image, 10)
        assert (int(y), int(x)) == (40, 22)

    def test_ignores_margin(self):
        """Pixels within the margin are never chosen."""
        image = jnp.zeros((64, 64)).at[3, 3].set(100.0).at[30, 30].set(1.0)
        y, x = find_peak(image, 10)
        assert (int(y), int(x)) == (30, 30)

    def test_annulus_rms(self):
        """The noise is the RMS over the 320 annulus pixels."""
        image = snr_test_image(64, peak_value=20.0, ring_value=2.0)
        signal, noise, snr = aperture_snr(image, 32, 32)
        assert jnp.isclose(signal, 20.0)
        assert jnp.isclose(noise, 2.0)
        assert jnp.isclose(snr, 10.0, rtol=1e-6)

    def test_just_above_threshold(self):
        """SNR slightly above 5 is a detection."""
        image = snr_test_image(64, peak_value=5.01)
        detection = PointSourceDetector().detect(image)
        assert detection.found
        assert jnp.isclose(detection.flux, 5.01)

    def test_just_below_threshold(self):
        """SNR slightly below 5 is not a detection."""
        image = snr_test_image(64, peak_value=4.99)
        assert not PointSourceDetector().detect(image).found

    def test_empty_image(self):
        """An all-zero image has no detection and finite statistics."""
        detection = PointSourceDetector().detect(jnp.zeros((64, 64)))
        assert not detection.found
        assert jnp.isfinite(detection.snr)

    def test_carries_spectrum_and_doppler(self):
        """Spectrum and Doppler shift pass through unchanged."""
        spectrum = jnp.linspace(0.0, 1.0, const.SPECTRUM_BINS)
        detection = PointSourceDetector().detect(
            snr_test_image(64, peak_value=50.0), spectrum, doppler_shift=1e-4
        )
        assert jnp.array_equal(detection.spectrum, spectrum.astype(jnp.float32))
        assert detection.doppler_shift == 1e-4
        assert (detection.peak_y, detection.peak_x) == (32, 32)

    def test_default_spectrum_empty(self):
        """Without spectrograph data the spectrum is all zero."""
        detection = PointSourceDetector().detect(snr_test_image(64, peak_value=50.0))
        assert detection.spectrum.shape == (const.SPECTRUM_BINS,)
        assert jnp.all(detection.spectrum == 0)

    def test_rejects_small_image(self):
        """Images too small for the margin are rejected."""
        with pytest.raises(ValueError):
            PointSourceDetector().detect(jnp.zeros((20, 20)))
