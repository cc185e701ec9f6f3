"""
Configuration schema for the IEXTP decoder.

Supports:
- YAML file loading
- Environment variable substitution (${VAR_NAME})
- Validation with error messages

Example config (iextp.yml):
    version: 1

    decoder:
      feed: deep
      framing: length_prefixed
      strict: false

    logging:
      level: ${IEXTP_LOG_LEVEL}
"""

import logging
import os
import re
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Optional, List, Any

import yaml

from ..errors import ConfigError


FEEDS = ('auto', 'tops', 'deep')
FRAMINGS = ('implied', 'length_prefixed')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def _substitute_env_vars(value: Any) -> Any:
    """
    Substitute ${VAR_NAME} with environment variable values.

    Example:
        ${IEXTP_LOG_LEVEL} → os.environ.get('IEXTP_LOG_LEVEL')
    """
    if isinstance(value, str):
        pattern = r'\$\{([^}]+)\}'

        def replace(match):
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                return match.group(0)  # Keep original if not found
            return env_value

        return re.sub(pattern, replace, value)

    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]

    return value


@dataclass
class DecoderSettings:
    """Decoding behaviour."""
    feed: str = 'auto'
    framing: str = 'implied'
    strict: bool = True
    legacy_short_sale_status: bool = False

    def __post_init__(self):
        self.feed = str(self.feed).lower()
        self.framing = str(self.framing).lower()


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = 'WARNING'

    @property
    def level_value(self) -> int:
        return getattr(logging, str(self.level).upper(), logging.WARNING)


@dataclass
class DecoderConfig:
    """Root configuration."""

    version: int = 1
    decoder: DecoderSettings = field(default_factory=DecoderSettings)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path) -> 'DecoderConfig':
        """Load from YAML file with env var substitution."""
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Config not found: {path}")

        with open(path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"{path}: {e}") from e

        data = _substitute_env_vars(data)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'DecoderConfig':
        """Create from dictionary."""
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping at top level, got {type(data).__name__}")

        sections = {}
        for key in ('decoder', 'logging'):
            section = data.get(key) or {}
            if not isinstance(section, dict):
                raise ConfigError(f"'{key}' must be a mapping, got {type(section).__name__}")
            sections[key] = section

        try:
            return cls(
                version=data.get('version', 1),
                decoder=DecoderSettings(**sections['decoder']),
                logging=LoggingConfig(**sections['logging']),
            )
        except TypeError as e:
            raise ConfigError(str(e)) from e

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    def to_yaml(self) -> str:
        """Convert to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def validate(self) -> List[str]:
        """Validate config. Returns list of errors (empty if valid)."""
        errors = []

        if self.version != 1:
            errors.append(f"Unsupported config version: {self.version}")

        if self.decoder.feed not in FEEDS:
            errors.append(f"Invalid feed: {self.decoder.feed} (expected one of {', '.join(FEEDS)})")

        if self.decoder.framing not in FRAMINGS:
            errors.append(
                f"Invalid framing: {self.decoder.framing} (expected one of {', '.join(FRAMINGS)})"
            )

        if not isinstance(self.decoder.strict, bool):
            errors.append(f"strict must be a boolean, got {self.decoder.strict!r}")

        if not isinstance(self.decoder.legacy_short_sale_status, bool):
            errors.append(
                f"legacy_short_sale_status must be a boolean, "
                f"got {self.decoder.legacy_short_sale_status!r}"
            )

        if not isinstance(self.logging.level, str) or self.logging.level.upper() not in LOG_LEVELS:
            errors.append(f"Invalid log level: {self.logging.level}")

        return errors


def load_config(path: Optional[Path] = None) -> DecoderConfig:
    """Load config from file or return defaults."""
    if path and Path(path).exists():
        return DecoderConfig.load(path)

    search_paths = [
        Path('./iextp.yml'),
        Path('./iextp.yaml'),
        Path.home() / '.iextp' / 'config.yml',
    ]

    for p in search_paths:
        if p.exists():
            return DecoderConfig.load(p)

    return DecoderConfig()


def generate_default_config() -> str:
    """Generate default config as YAML."""
    return """# IEXTP decoder configuration
version: 1

decoder:
  # auto detects the feed from each segment's message protocol id
  feed: auto
  # implied: block length from the message type; length_prefixed: 2-byte prefix
  framing: implied
  strict: true
  legacy_short_sale_status: false

logging:
  level: WARNING
"""
