"""Exoplanet detection and imaging pipeline.

One call turns a raw sensor frame into a ``PlanetData`` record by running, in
order: photon accumulation, corona subtraction, Richardson-Lucy restoration,
point-source detection, and (only when a source is found) parameter and
atmosphere estimation. Each run owns its images; the lens model and settings
are shared read-only.
"""

import equinox as eqx
import jax.numpy as jnp
from jaxtyping import Array

from solarlens.analysis.atmosphere import AtmosphereAnalyzer
from solarlens.analysis.parameters import ParameterEstimator
from solarlens.core.records import Detection, PlanetData
from solarlens.imaging.accumulator import ImageAccumulator
from solarlens.imaging.corona import CoronaSubtractor
from solarlens.imaging.deconvolution import Deconvolver
from solarlens.imaging.detection import PointSourceDetector
from solarlens.logger import logger, set_log_level
from solarlens.physics.lens import GravitationalLens
from solarlens.settings import Settings


class PipelineRun(eqx.Module):
    """Everything produced by one pipeline invocation."""

    raw_image: Array
    processed_image: Array
    detection: Detection
    planet: PlanetData


def _unit_interval(value, clamp: bool) -> float:
    value = float(value)
    return min(max(value, 0.0), 1.0) if clamp else value


class ExoplanetDetector(eqx.Module):
    """Runs the detection stages in sequence on one frame at a time."""

    settings: Settings
    lens: GravitationalLens
    accumulator: ImageAccumulator
    corona: CoronaSubtractor
    deconvolver: Deconvolver
    point_sources: PointSourceDetector
    estimator: ParameterEstimator
    atmosphere: AtmosphereAnalyzer

    def __init__(
        self,
        settings: Settings | None = None,
        lens: GravitationalLens | None = None,
    ):
        """Build the stages from the settings.

        Args:
            settings: Pipeline settings. Defaults to ``Settings()``.
            lens: Lens physics shared with other pipelines. Defaults to a new
                ``GravitationalLens``.
        """
        self.settings = Settings() if settings is None else settings
        self.lens = GravitationalLens() if lens is None else lens
        set_log_level(self.settings.log_level)
        self.accumulator = ImageAccumulator(self.settings.dark_current_rate)
        self.corona = CoronaSubtractor(
            self.lens,
            pixels_per_solar_radius=self.settings.pixels_per_solar_radius,
            wavelength_nm=self.settings.corona_wavelength_nm,
        )
        self.deconvolver = Deconvolver(
            self.settings.restoration_kernel, self.settings.restoration_iterations
        )
        self.point_sources = PointSourceDetector()
        self.estimator = ParameterEstimator()
        self.atmosphere = AtmosphereAnalyzer()

    def _validate_frame(self, sensor_data) -> Array:
        frame = jnp.asarray(sensor_data)
        expected = (self.settings.image_size, self.settings.image_size)
        if frame.shape != expected:
            raise ValueError(f"Sensor frame must have shape {expected}, got {frame.shape}.")
        return frame

    def characterize(self, detection: Detection) -> PlanetData:
        """Estimate the planet record for a detection.

        Returns ``PlanetData.empty()`` when the detection did not clear the
        threshold, without running any estimator on the noise.
        """
        if not detection.found:
            return PlanetData.empty()

        clamp = self.settings.clamp_unit_interval
        # SNR of 10 maps to full confidence
        confidence = _unit_interval(detection.snr / 10.0, clamp)

        radius = float(self.estimator.radius_from_flux(detection.flux))
        temperature = float(self.estimator.temperature(detection.spectrum))
        albedo = _unit_interval(self.estimator.albedo(detection.flux, temperature), clamp)
        orbital_radius = float(self.estimator.orbit_from_doppler(detection.doppler_shift))
        in_hz = bool(self.estimator.in_habitable_zone(orbital_radius))
        atmosphere = self.atmosphere.analyze(detection.spectrum)

        return PlanetData(
            detected=True,
            radius_earth=radius,
            orbital_radius_au=orbital_radius,
            temperature_kelvin=temperature,
            albedo=albedo,
            in_habitable_zone=in_hz,
            confidence=confidence,
            atmosphere=atmosphere,
        )

    def process(
        self,
        sensor_data,
        integration_time_s: float,
        target_distance_ly: float,
        wavelength_nm: float,
        spectrum: Array | None = None,
        doppler_shift: float = 0.0,
        prng_key: Array | None = None,
    ) -> PipelineRun:
        """Run every stage and keep the intermediate images.

        Args:
            sensor_data: Square frame of unsigned photon counts.
            integration_time_s: Integration time in seconds.
            target_distance_ly: Distance of the target system in light years.
            wavelength_nm: Observation wavelength in nm.
            spectrum: Spectrum of the target from the spectrograph channel.
            doppler_shift: Measured fractional Doppler shift of the target.
            prng_key: Seeds a random shot-noise realization when given.

        Returns:
            The run record with raw image, processed image, detection and
            planet data.
        """
        frame = self._validate_frame(sensor_data)

        logger.info("Accumulating photons")
        raw_image = self.accumulator.accumulate(frame, integration_time_s, prng_key)

        logger.info("Subtracting corona model")
        processed_image = self.corona.subtract(raw_image, target_distance_ly)
        if self.settings.clip_negative:
            processed_image = jnp.clip(processed_image, 0.0, None)

        logger.info(
            f"Restoring image ({self.deconvolver.kernel_name} kernel, "
            f"{self.deconvolver.iterations} iterations)"
        )
        psf = self.lens.psf(wavelength_nm, self.settings.observer_distance_au)
        processed_image = self.deconvolver.restore(processed_image, psf)

        logger.info("Searching for point sources")
        detection = self.point_sources.detect(processed_image, spectrum, doppler_shift)
        if detection.found:
            logger.info(
                f"Point source at ({detection.peak_y}, {detection.peak_x}) "
                f"with SNR {float(detection.snr):.2f}"
            )
        else:
            logger.info(f"No point source above threshold (SNR {float(detection.snr):.2f})")

        planet = self.characterize(detection)
        return PipelineRun(
            raw_image=raw_image,
            processed_image=processed_image,
            detection=detection,
            planet=planet,
        )

    def detect_exoplanet(
        self,
        sensor_data,
        integration_time_s: float,
        target_distance_ly: float,
        wavelength_nm: float,
        spectrum: Array | None = None,
        doppler_shift: float = 0.0,
        prng_key: Array | None = None,
    ) -> PlanetData:
        """Detect and characterize a planet in one sensor frame.

        See ``process`` for the arguments.
        """
        return self.process(
            sensor_data,
            integration_time_s,
            target_distance_ly,
            wavelength_nm,
            spectrum=spectrum,
            doppler_shift=doppler_shift,
            prng_key=prng_key,
        ).planet


def detect_exoplanet(
    sensor_data,
    integration_time_s: float,
    target_distance_ly: float,
    wavelength_nm: float,
    spectrum: Array | None = None,
    doppler_shift: float = 0.0,
    prng_key: Array | None = None,
    settings: Settings | None = None,
) -> PlanetData:
    """Run the pipeline once with a freshly built ``ExoplanetDetector``."""
    detector = ExoplanetDetector(settings)
    return detector.detect_exoplanet(
        sensor_data,
        integration_time_s,
        target_distance_ly,
        wavelength_nm,
        spectrum=spectrum,
        doppler_shift=doppler_shift,
        prng_key=prng_key,
    )
