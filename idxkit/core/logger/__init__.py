"""
Logging Package.

- Logger: stream and rotating-file logging initialization.
- LogStyle: unified logging style constants.
"""

from .logger import ColorFormatter, Logger
from .styles import LogStyle

__all__ = [
    "ColorFormatter",
    "Logger",
    "LogStyle",
]
