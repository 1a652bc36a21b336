"""
breathpulse Configuration

Settings for the host around the breathing core: haptics on/off, cue click
counts, display locale and logging. Supports environment variables, a YAML
config file, and runtime overrides.

The breathing schedule itself (phase durations, pulse intervals, decay rate)
is fixed and deliberately absent here.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

SUPPORTED_LOCALES = ("en", "ja")


class ConfigError(ValueError):
    """Invalid configuration value or file."""


@dataclass
class HapticsConfig:
    """Haptic output configuration."""
    enabled: bool = True
    phase_change_clicks: int = 1     # events per phase-change cue
    cycle_complete_clicks: int = 1   # events per cycle-complete cue


@dataclass
class DisplayConfig:
    """Console presentation configuration."""
    locale: str = "en"
    show_intensity: bool = True


@dataclass
class BreathConfig:
    """Top-level breathpulse configuration."""
    haptics: HapticsConfig = field(default_factory=HapticsConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    # Runtime
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "BreathConfig":
        """Load configuration from environment variables."""
        config = cls()

        if locale := os.getenv("BREATHPULSE_LOCALE"):
            config.display.locale = locale

        if haptics := os.getenv("BREATHPULSE_HAPTICS"):
            config.haptics.enabled = _parse_bool(haptics)

        config.debug = _parse_bool(os.getenv("BREATHPULSE_DEBUG", ""))
        config.log_level = os.getenv("BREATHPULSE_LOG_LEVEL", "INFO").upper()

        config.validate()
        return config

    @classmethod
    def from_file(cls, path: Path) -> "BreathConfig":
        """Load configuration from a YAML file. Missing file gives defaults."""
        config = cls()

        if not path.exists():
            return config

        with open(path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Malformed config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        if "haptics" in data:
            _apply_section(config.haptics, data["haptics"], "haptics")

        if "display" in data:
            _apply_section(config.display, data["display"], "display")

        config.debug = data.get("debug", False)
        config.log_level = str(data.get("log_level", "INFO")).upper()

        config.validate()
        return config

    def validate(self) -> None:
        """Raise ConfigError if any value is out of range or of the wrong type."""
        if self.display.locale not in SUPPORTED_LOCALES:
            raise ConfigError(
                f"Unsupported locale '{self.display.locale}' "
                f"(expected one of {', '.join(SUPPORTED_LOCALES)})"
            )

        for name, value in (
            ("haptics.enabled", self.haptics.enabled),
            ("display.show_intensity", self.display.show_intensity),
            ("debug", self.debug),
        ):
            if not isinstance(value, bool):
                raise ConfigError(f"{name} must be true or false, got {value!r}")

        for name in ("phase_change_clicks", "cycle_complete_clicks"):
            value = getattr(self.haptics, name)
            # bool is an int subclass
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"haptics.{name} must be an integer >= 1, got {value!r}")

        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigError(f"Unknown log level '{self.log_level}'")

    @property
    def effective_log_level(self) -> int:
        """Numeric log level; debug mode forces DEBUG."""
        if self.debug:
            return logging.DEBUG
        return logging.getLevelName(self.log_level)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "haptics": {
                "enabled": self.haptics.enabled,
                "phase_change_clicks": self.haptics.phase_change_clicks,
                "cycle_complete_clicks": self.haptics.cycle_complete_clicks,
            },
            "display": {
                "locale": self.display.locale,
                "show_intensity": self.display.show_intensity,
            },
            "debug": self.debug,
            "log_level": self.log_level,
        }


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _apply_section(target: Any, values: Any, section: str) -> None:
    if not isinstance(values, dict):
        raise ConfigError(f"'{section}' section must be a mapping")
    for k, v in values.items():
        if not hasattr(target, k):
            raise ConfigError(f"Unknown setting '{section}.{k}'")
        setattr(target, k, v)


# Global config instance
_config: Optional[BreathConfig] = None


def get_config() -> BreathConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = BreathConfig.from_env()
    return _config


def set_config(config: BreathConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
