"""Tests for pipeline settings and logging configuration."""

import logging

import pytest

from solarlens.logger import logger, set_log_level
from solarlens.settings import Settings


class TestSettings:
    """Tests for the Settings class."""

    def test_defaults(self):
        """Default settings match the documented pipeline configuration."""
        settings = Settings()
        assert settings.dark_current_rate == 0.01
        assert settings.pixels_per_solar_radius == 100.0
        assert settings.restoration_kernel == "uniform"
        assert settings.restoration_iterations == 50
        assert settings.clip_negative is True
        assert settings.observer_distance_au == 650.0
        assert settings.clamp_unit_interval is True
        assert settings.image_size == 1024

    def test_custom_settings(self):
        """Custom settings override the defaults."""
        settings = Settings(
            custom_settings={"restoration_kernel": "psf", "restoration_iterations": 5}
        )
        assert settings.restoration_kernel == "psf"
        assert settings.restoration_iterations == 5

    def test_unknown_setting(self):
        """Unknown keys are rejected."""
        with pytest.raises(AttributeError):
            Settings(custom_settings={"detection_threshold": 3.0})

    def test_toml_file(self, tmp_path):
        """Settings are read from TOML sections."""
        config = tmp_path / "pipeline.toml"
        config.write_text(
            "[accumulation]\n"
            "dark_current_rate = 0.5\n"
            "\n"
            "[corona]\n"
            "pixels_per_solar_radius = 20.0\n"
            "\n"
            "[restoration]\n"
            'kernel = "psf"\n'
            "iterations = 12\n"
            "clip_negative = false\n"
            "\n"
            "[output]\n"
            "image_size = 256\n"
            'log_level = "WARNING"\n'
        )
        settings = Settings(toml_file=config)
        assert settings.dark_current_rate == 0.5
        assert settings.pixels_per_solar_radius == 20.0
        assert settings.restoration_kernel == "psf"
        assert settings.restoration_iterations == 12
        assert settings.clip_negative is False
        assert settings.image_size == 256
        assert settings.log_level == "WARNING"
        # Absent keys keep their defaults
        assert settings.observer_distance_au == 650.0

    def test_custom_overrides_toml(self, tmp_path):
        """Custom settings are applied after the file."""
        config = tmp_path / "pipeline.toml"
        config.write_text("[restoration]\niterations = 12\n")
        settings = Settings(toml_file=config, custom_settings={"restoration_iterations": 3})
        assert settings.restoration_iterations == 3

    @pytest.mark.parametrize(
        "overrides",
        [
            {"restoration_kernel": "airy"},
            {"restoration_iterations": -1},
            {"image_size": 16},
        ],
    )
    def test_invalid(self, overrides):
        """Settings the pipeline cannot run with raise ValueError."""
        with pytest.raises(ValueError):
            Settings(custom_settings=overrides)

    def test_repr(self):
        """The representation lists every setting."""
        text = repr(Settings())
        assert text.startswith("Settings:")
        assert "restoration_kernel: uniform" in text


class TestLogLevel:
    """Tests for the logger level helper."""

    def test_by_name(self):
        """Level names are case insensitive."""
        set_log_level("debug")
        assert logger.level == logging.DEBUG
        set_log_level(logging.INFO)
        assert logger.level == logging.INFO

    def test_invalid_name(self):
        """Unknown level names raise ValueError."""
        with pytest.raises(ValueError):
            set_log_level("LOUD")
