"""Configuration management for the IEXTP decoder."""

from .schema import (
    DecoderConfig,
    DecoderSettings,
    LoggingConfig,
    load_config,
    generate_default_config,
)

__all__ = [
    'DecoderConfig',
    'DecoderSettings',
    'LoggingConfig',
    'load_config',
    'generate_default_config',
]
