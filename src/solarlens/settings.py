"""Configuration management for the exoplanet imaging pipeline.

This module provides the Settings class for managing the tunable parameters of
the detection pipeline. It handles loading settings from TOML files and
provides validation for the parameters.

The Settings class controls:
- Photon accumulation (detector dark current)
- Corona subtraction (pixel scale of the corona model)
- Image restoration (kernel choice, iteration count, negative-flux clipping,
  observer distance used to evaluate the PSF)
- Output policy (unit-interval clamping, expected image size, log level)

The 5-sigma detection threshold is deliberately not a setting; it lives in
``solarlens.constants``.
"""

import tomllib

from solarlens.logger import logger

RESTORATION_KERNELS = ("uniform", "psf")


class Settings:
    """Configuration manager for the exoplanet imaging pipeline.

    Attributes:
        dark_current_rate (float):
            Dark current in electrons/pixel/s used by the photon accumulator.
        pixels_per_solar_radius (float):
            Image-plane pixels spanning one solar radius in the corona model.
        corona_wavelength_nm (float):
            Wavelength at which the corona model is evaluated for subtraction.
        restoration_kernel (str):
            Blur kernel used by Richardson-Lucy restoration, either "uniform"
            (fixed 5x5 box) or "psf" (the lens PSF kernel).
        restoration_iterations (int):
            Number of Richardson-Lucy iterations.
        clip_negative (bool):
            Whether to clip the background-subtracted image at zero before
            restoration.
        observer_distance_au (float):
            Distance from the Sun at which the PSF is evaluated.
        clamp_unit_interval (bool):
            Whether confidence and albedo are clamped to [0, 1].
        image_size (int):
            Expected edge length of the raw sensor frame.
        log_level (str):
            Level applied to the solarlens logger by the pipeline.
    """

    def __init__(self, toml_file=None, custom_settings=None):
        """Initialize Settings with default values and optional configuration.

        Args:
            toml_file (str or pathlib.Path, optional):
                Path to TOML configuration file. If provided, settings will
                be loaded from this file after applying defaults.
            custom_settings (dict, optional):
                Dictionary of custom setting overrides. Keys must correspond
                to valid Settings attributes. Applied after TOML file loading.

        Raises:
            AttributeError:
                If custom_settings contains keys that don't correspond to
                valid Settings attributes.
            ValueError:
                If the resulting restoration settings are invalid.
        """
        # Default settings
        self.dark_current_rate = 0.01
        self.pixels_per_solar_radius = 100.0
        self.corona_wavelength_nm = 550.0
        self.restoration_kernel = "uniform"
        self.restoration_iterations = 50
        self.clip_negative = True
        self.observer_distance_au = 650.0
        self.clamp_unit_interval = True
        self.image_size = 1024
        self.log_level = "INFO"

        if toml_file:
            self.load_settings(toml_file)

        if custom_settings:
            for key, value in custom_settings.items():
                if hasattr(self, key):
                    setattr(self, key, value)
                else:
                    raise AttributeError(f"{key} is not a valid setting.")

        self.validate()

    def __repr__(self):
        """Return a string representation of the Settings object."""
        attrs = vars(self)
        parts = ["Settings:"]
        for key, value in attrs.items():
            parts.append(f"  {key}: {value}")
        return "\n".join(parts)

    def validate(self):
        """Check the settings that the pipeline cannot recover from."""
        if self.restoration_kernel not in RESTORATION_KERNELS:
            raise ValueError(
                f"restoration_kernel must be one of {RESTORATION_KERNELS}, "
                f"got {self.restoration_kernel!r}."
            )
        if self.restoration_iterations < 0:
            raise ValueError("restoration_iterations must be non-negative.")
        if self.image_size < 21:
            raise ValueError("image_size must leave room for the detection annulus.")

    def load_settings(self, toml_file):
        """Load configuration settings from a TOML file.

        Only settings present in the TOML file are updated. Settings not
        specified in the file retain their current values.

        Args:
            toml_file (str or pathlib.Path):
                Path to the TOML configuration file to load.

        Example TOML structure:
            [accumulation]
            dark_current_rate = 0.01

            [corona]
            pixels_per_solar_radius = 100.0
            reference_wavelength_nm = 550.0

            [restoration]
            kernel = "psf"
            iterations = 30
            clip_negative = true
            observer_distance_au = 650.0

            [output]
            clamp_unit_interval = true
            image_size = 1024
            log_level = "DEBUG"
        """
        with open(toml_file, "rb") as file:
            config = tomllib.load(file)
        logger.debug(f"Loaded settings file {toml_file}")

        if "accumulation" in config:
            accumulation = config["accumulation"]
            if (dark := accumulation.get("dark_current_rate")) is not None:
                self.dark_current_rate = dark

        if "corona" in config:
            corona = config["corona"]
            if (scale := corona.get("pixels_per_solar_radius")) is not None:
                self.pixels_per_solar_radius = scale
            if (wavelength := corona.get("reference_wavelength_nm")) is not None:
                self.corona_wavelength_nm = wavelength

        if "restoration" in config:
            restoration = config["restoration"]
            if (kernel := restoration.get("kernel")) is not None:
                self.restoration_kernel = kernel
            if (iterations := restoration.get("iterations")) is not None:
                self.restoration_iterations = iterations
            if (clip := restoration.get("clip_negative")) is not None:
                self.clip_negative = clip
            if (distance := restoration.get("observer_distance_au")) is not None:
                self.observer_distance_au = distance

        if "output" in config:
            output = config["output"]
            if (clamp := output.get("clamp_unit_interval")) is not None:
                self.clamp_unit_interval = clamp
            if (size := output.get("image_size")) is not None:
                self.image_size = size
            if (level := output.get("log_level")) is not None:
                self.log_level = level
