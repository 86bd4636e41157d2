"""Runtime settings for the sproutify player.

Settings loaded from environment variables and provided to components via dependency injection.
"""

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from sproutify.config import constants


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class SproutifySettings:
    """Runtime settings for the sproutify player."""

    # Catalog
    catalog_file: Path

    # Queue and playback
    queue_seed_size: int
    default_volume: int
    shuffle: bool

    # Audio backend
    ffplay_path: str

    # Logging
    log_level: int

    @staticmethod
    def from_environment() -> "SproutifySettings":
        """Load settings from environment variables.

        Returns:
            SproutifySettings instance with values from environment variables.
        """
        # getLevelName maps known names to their numeric level and anything else to a string
        log_level = logging.getLevelName(
            os.environ.get("SPROUTIFY_LOG_LEVEL", "INFO").upper()
        )
        if not isinstance(log_level, int):
            log_level = logging.INFO

        return SproutifySettings(
            catalog_file=Path(os.environ.get("SPROUTIFY_CATALOG_FILE", "lyrics.csv")),
            queue_seed_size=int(
                os.environ.get(
                    "SPROUTIFY_QUEUE_SEED_SIZE", str(constants.QUEUE_SEED_SIZE)
                )
            ),
            default_volume=int(
                os.environ.get("SPROUTIFY_VOLUME", str(constants.DEFAULT_VOLUME))
            ),
            shuffle=_env_flag("SPROUTIFY_SHUFFLE"),
            ffplay_path=os.environ.get("SPROUTIFY_FFPLAY_PATH", constants.FFPLAY_BINARY),
            log_level=log_level,
        )

    def validate(self, logger: logging.Logger) -> None:
        """Log warnings for missing or unusual configuration.

        Args:
            logger: Logger instance to use for warnings.
        """
        if not self.catalog_file.is_file():
            logger.warning(
                f"{self.catalog_file} is not a valid file, the catalog will be empty"
            )

        if shutil.which(self.ffplay_path) is None:
            logger.warning(
                f"{self.ffplay_path} was not found on PATH, audio playback will fail"
            )

        if not constants.MIN_VOLUME <= self.default_volume <= constants.MAX_VOLUME:
            logger.warning(
                f"SPROUTIFY_VOLUME={self.default_volume} is outside "
                f"{constants.MIN_VOLUME}-{constants.MAX_VOLUME} and will be clamped"
            )

        if self.queue_seed_size < 1:
            logger.warning(
                "SPROUTIFY_QUEUE_SEED_SIZE is below 1, the queue will start empty"
            )
