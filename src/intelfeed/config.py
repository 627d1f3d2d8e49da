"""Configuration loaded from .intelfeed.toml and env vars.

Loading order: defaults → TOML file → env vars.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".intelfeed.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]


class NormalizerSectionConfig(BaseModel):
    """[normalizer] section."""

    summary_max_length: int = Field(default=500, ge=10)
    ellipsis: str = "..."


class ClassifierSectionConfig(BaseModel):
    """[classifier] section."""

    enabled_rules: list[str] = Field(
        default_factory=lambda: [
            "cve",
            "extreme-weather",
            "major-quake-critical",
            "major-quake-high",
            "viral-social",
            "breaking",
        ]
    )
    seismic_high: float = 6.0
    seismic_critical: float = 7.0
    social_viral_score: int = 1000


class IntelFeedConfig(BaseModel):
    """Top-level configuration model."""

    normalizer: NormalizerSectionConfig = Field(default_factory=NormalizerSectionConfig)
    classifier: ClassifierSectionConfig = Field(default_factory=ClassifierSectionConfig)


DEFAULT_CONFIG = IntelFeedConfig()


def load_config(path: str | Path | None = None) -> IntelFeedConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .intelfeed.toml in CWD
    3. ~/.config/intelfeed/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged IntelFeedConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        global_config = Path.home() / ".config" / "intelfeed" / "config.toml"
        if not data and global_config.exists():
            data = _load_toml(global_config)
            logger.info("Loaded config from %s", global_config)

    config = IntelFeedConfig()
    if data:
        try:
            config = IntelFeedConfig.model_validate(data)
        except ValidationError as exc:
            logger.warning("Ignoring invalid config: %s", exc)

    return _apply_env_vars(config)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: IntelFeedConfig) -> IntelFeedConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "INTELFEED_SUMMARY_MAX_LENGTH": ("normalizer", "summary_max_length"),
        "INTELFEED_ELLIPSIS": ("normalizer", "ellipsis"),
        "INTELFEED_SEISMIC_HIGH": ("classifier", "seismic_high"),
        "INTELFEED_SEISMIC_CRITICAL": ("classifier", "seismic_critical"),
        "INTELFEED_SOCIAL_VIRAL_SCORE": ("classifier", "social_viral_score"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    try:
        return IntelFeedConfig.model_validate(data)
    except ValidationError as exc:
        logger.warning("Ignoring invalid environment overrides: %s", exc)
        return config
