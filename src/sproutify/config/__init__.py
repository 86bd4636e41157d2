"""Configuration module for the sproutify player.

This module provides a two-tier configuration system:
- constants: Pure constants that never change (queue seed size, volume range, etc.)
- settings: Runtime settings loaded from environment variables
"""

# Re-export all constants
from sproutify.config.constants import (
    CATALOG_ENCODING,
    CATALOG_FIELD_SEPARATOR,
    CATALOG_ID_COLUMN,
    CATALOG_MIN_FIELDS,
    COMPLETION_TOLERANCE_MS,
    DEFAULT_VOLUME,
    FFPLAY_BINARY,
    MAX_VOLUME,
    MIN_VOLUME,
    QUEUE_SEED_SIZE,
)

# Re-export settings class
from sproutify.config.settings import SproutifySettings

__all__ = [
    # Constants
    "CATALOG_ENCODING",
    "CATALOG_FIELD_SEPARATOR",
    "CATALOG_ID_COLUMN",
    "CATALOG_MIN_FIELDS",
    "COMPLETION_TOLERANCE_MS",
    "DEFAULT_VOLUME",
    "FFPLAY_BINARY",
    "MAX_VOLUME",
    "MIN_VOLUME",
    "QUEUE_SEED_SIZE",
    # Settings class
    "SproutifySettings",
]
