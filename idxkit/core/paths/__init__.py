"""
Filesystem Constants Package.

Centralizes the static names shared across IdxKit: the logger identity and
the default data root. Cache directories themselves are never derived from
process-global state; they are passed explicitly to ``LocalCache``.
"""

from .constants import DEFAULT_DATA_ROOT, LOGGER_NAME

__all__ = [
    "DEFAULT_DATA_ROOT",
    "LOGGER_NAME",
]
