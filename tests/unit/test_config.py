"""
Unit tests for autofill settings loading.

Tests YAML merging over defaults, environment overrides and validation.
"""

from pathlib import Path

import pytest

from anken.utils.config import ConfigurationError, load_settings

REPO_CONFIG = Path(__file__).parents[2] / "config" / "autofill.yaml"


@pytest.fixture(autouse=True)
def no_endpoint_env(monkeypatch):
    """Keep a developer's .env from leaking into the tests."""
    monkeypatch.delenv("AI_NORMALIZE_URL", raising=False)


def write_config(tmp_path: Path, content: str) -> Path:
    config_path = tmp_path / "autofill.yaml"
    config_path.write_text(content, encoding="utf-8")
    return config_path


class TestLoadSettings:
    """Tests for load_settings."""

    def test_missing_file_gives_defaults(self, tmp_path):
        """A missing settings file yields the built-in defaults."""
        settings = load_settings(tmp_path / "missing.yaml")

        assert settings.confidence_threshold == 0.6
        assert settings.endpoint_url is None
        assert settings.endpoint_timeout_s == 20.0
        assert settings.max_retries == 3
        assert settings.quality["fatal_weird_ratio"] == 0.8

    def test_repository_config_loads(self):
        """The shipped config/autofill.yaml is valid."""
        settings = load_settings(REPO_CONFIG)

        assert settings.confidence_threshold == 0.6
        assert settings.quality["warning_min_length"] == 50

    def test_file_values_merged_over_defaults(self, tmp_path):
        """File values replace defaults; unset keys keep them."""
        config_path = write_config(
            tmp_path,
            "merge:\n  confidence_threshold: 0.75\n"
            "endpoint:\n  url: http://localhost:8080/normalize\n",
        )

        settings = load_settings(config_path)

        assert settings.confidence_threshold == 0.75
        assert settings.endpoint_url == "http://localhost:8080/normalize"
        # Untouched sections keep their defaults
        assert settings.max_retries == 3

    def test_environment_overrides_url(self, tmp_path, monkeypatch):
        """AI_NORMALIZE_URL wins over the file."""
        config_path = write_config(tmp_path, "endpoint:\n  url: http://from-file\n")
        monkeypatch.setenv("AI_NORMALIZE_URL", "http://from-env")

        assert load_settings(config_path).endpoint_url == "http://from-env"

    def test_partial_quality_override(self, tmp_path):
        """One quality key can be set alone."""
        config_path = write_config(tmp_path, "quality:\n  warning_readable_ratio: 0.4\n")

        quality = load_settings(config_path).quality

        assert quality["warning_readable_ratio"] == 0.4
        assert quality["fatal_readable_ratio"] == 0.1


class TestValidation:
    """Tests for invalid settings."""

    def test_threshold_out_of_range(self, tmp_path):
        """A threshold above 1 names the key and the file."""
        config_path = write_config(tmp_path, "merge:\n  confidence_threshold: 1.5\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_settings(config_path)

        assert exc_info.value.key == "merge.confidence_threshold"
        assert exc_info.value.config_path == config_path

    def test_non_numeric_threshold(self, tmp_path):
        """A threshold that is not a number is rejected."""
        config_path = write_config(tmp_path, "merge:\n  confidence_threshold: high\n")

        with pytest.raises(ConfigurationError, match="Invalid settings value"):
            load_settings(config_path)

    def test_zero_retries(self, tmp_path):
        """At least one attempt is required."""
        config_path = write_config(tmp_path, "endpoint:\n  max_retries: 0\n")

        with pytest.raises(ConfigurationError, match="max_retries"):
            load_settings(config_path)

    def test_unknown_quality_key(self, tmp_path):
        """Unknown quality keys are reported by name."""
        config_path = write_config(tmp_path, "quality:\n  shiny: 1\n")

        with pytest.raises(ConfigurationError, match="shiny"):
            load_settings(config_path)

    def test_malformed_yaml(self, tmp_path):
        """Broken YAML becomes ConfigurationError."""
        config_path = write_config(tmp_path, "merge: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid settings file"):
            load_settings(config_path)
