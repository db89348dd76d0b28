"""
Project-wide Path Constants.

Single source of truth for the default filesystem layout and the shared
logger identity.

Module Attributes:
    LOGGER_NAME: Global logger identity used by all modules for log synchronization.
    DEFAULT_DATA_ROOT: Default base directory for dataset caches, relative to the
        working directory. Resolved once, when a configuration is built.
"""

from pathlib import Path
from typing import Final

# Global logger identity used by all modules to ensure log synchronization
LOGGER_NAME: Final[str] = "IdxKit"

# Input: where dataset caches live unless a recipe says otherwise
DEFAULT_DATA_ROOT: Final[Path] = Path("dataset")

