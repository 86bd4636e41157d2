"""Constants for the sproutify player.

These are true constants that never change - queue sizing, volume range, catalog format, etc.
"""

from typing import Final

# Queue
# Number of catalog tracks copied into a freshly seeded queue
QUEUE_SEED_SIZE: Final = 10

# Volume, as a percentage
DEFAULT_VOLUME: Final = 50
MIN_VOLUME: Final = 0
MAX_VOLUME: Final = 100

# Positions within this many milliseconds of the end of a track count as finished
# for display purposes. The backend's completion event stays authoritative.
COMPLETION_TOLERANCE_MS: Final = 100

# Catalog file format
CATALOG_FIELD_SEPARATOR: Final = "#"
CATALOG_MIN_FIELDS: Final = 8
# Header name marking an optional leading id column
CATALOG_ID_COLUMN: Final = "id"
CATALOG_ENCODING: Final = "utf-8"

# ffplay backend
FFPLAY_BINARY: Final = "ffplay"
