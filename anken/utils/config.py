"""
Autofill configuration loading.

Settings come from a YAML file (ANKEN_CONFIG_PATH, default
config/autofill.yaml) merged over built-in defaults with OmegaConf. The AI
endpoint URL is normally injected from the environment (.env supported).

Example:
    >>> settings = load_settings()
    >>> settings.confidence_threshold
    0.6
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

load_dotenv()
ANKEN_CONFIG_PATH = Path(os.getenv("ANKEN_CONFIG_PATH", "config/autofill.yaml"))

DEFAULTS = {
    "merge": {"confidence_threshold": 0.6},
    "endpoint": {"url": None, "timeout_s": 20.0, "max_retries": 3},
    "quality": {
        "fatal_weird_ratio": 0.8,
        "fatal_readable_ratio": 0.1,
        "fatal_min_length": 20,
        "warning_weird_ratio": 0.3,
        "warning_max_length": 100,
        "warning_readable_ratio": 0.5,
        "warning_min_length": 50,
    },
}


class ConfigurationError(Exception):
    """
    Exception raised when the settings file holds unusable values.

    Attributes:
        message: Error description
        key: Dotted key of the offending value
        config_path: File the value came from
    """

    def __init__(self, message: str, key: Optional[str] = None, config_path: Optional[Path] = None):
        self.message = message
        self.key = key
        self.config_path = config_path

        parts = [message]
        if key:
            parts.append(f"Key: {key}")
        if config_path:
            parts.append(f"Config file: {config_path}")

        super().__init__("\n".join(parts))


@dataclass(frozen=True)
class AutofillSettings:
    """Resolved settings for extraction, merging and the AI endpoint."""

    confidence_threshold: float = 0.6
    endpoint_url: Optional[str] = None
    endpoint_timeout_s: float = 20.0
    max_retries: int = 3
    quality: dict = field(default_factory=lambda: dict(DEFAULTS["quality"]))


def _validate(settings: AutofillSettings, config_path: Optional[Path]) -> None:
    if not 0.0 <= settings.confidence_threshold <= 1.0:
        raise ConfigurationError(
            f"Confidence threshold must be within [0, 1], got {settings.confidence_threshold}",
            key="merge.confidence_threshold",
            config_path=config_path,
        )
    if settings.endpoint_timeout_s <= 0:
        raise ConfigurationError(
            f"Endpoint timeout must be positive, got {settings.endpoint_timeout_s}",
            key="endpoint.timeout_s",
            config_path=config_path,
        )
    if settings.max_retries < 1:
        raise ConfigurationError(
            f"max_retries must be at least 1, got {settings.max_retries}",
            key="endpoint.max_retries",
            config_path=config_path,
        )
    unknown = set(settings.quality) - set(DEFAULTS["quality"])
    if unknown:
        raise ConfigurationError(
            f"Unknown quality thresholds: {', '.join(sorted(unknown))}",
            key="quality",
            config_path=config_path,
        )


def load_settings(config_path: Path = None) -> AutofillSettings:
    """
    Load autofill settings.

    A missing file means built-in defaults. AI_NORMALIZE_URL in the
    environment overrides the endpoint URL from the file.

    Args:
        config_path: Optional path to the YAML file (defaults to ANKEN_CONFIG_PATH)

    Returns:
        Frozen AutofillSettings

    Raises:
        ConfigurationError: If the file cannot be read or holds invalid values
    """
    if config_path is None:
        config_path = ANKEN_CONFIG_PATH
    config_path = Path(config_path)

    conf = OmegaConf.create(DEFAULTS)
    if config_path.exists():
        try:
            conf = OmegaConf.merge(conf, OmegaConf.load(config_path))
            resolved = OmegaConf.to_container(conf, resolve=True)
        except (OmegaConfBaseException, yaml.YAMLError) as e:
            raise ConfigurationError(f"Invalid settings file: {e}", config_path=config_path) from e
    else:
        resolved = OmegaConf.to_container(conf, resolve=True)

    endpoint = resolved["endpoint"]
    try:
        settings = AutofillSettings(
            confidence_threshold=float(resolved["merge"]["confidence_threshold"]),
            endpoint_url=os.getenv("AI_NORMALIZE_URL") or endpoint.get("url") or None,
            endpoint_timeout_s=float(endpoint["timeout_s"]),
            max_retries=int(endpoint["max_retries"]),
            quality=dict(resolved["quality"]),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid settings value: {e}", config_path=config_path) from e

    _validate(settings, config_path if config_path.exists() else None)
    return settings
