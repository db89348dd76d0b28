"""
IdxKit Exception Hierarchy.

IdxkitError (base, Exception)
├── IdxkitConfigError(IdxkitError, ValueError)          ← config / registry validation
├── CacheNotFoundError(IdxkitError, FileNotFoundError)  ← missing cache file or directory
├── CacheIOError(IdxkitError, OSError)                  ← local filesystem failures
├── IntegrityError(IdxkitError)                         ← SHA-256 mismatch on download
├── FormatError(IdxkitError, ValueError)                ← unreadable IDX archive
├── BatchSizeError(IdxkitError, ValueError)             ← invalid batch partitioning
└── TransportError(IdxkitError)                         ← network retrieval failures

The multi-inheriting errors keep working with existing ``except ValueError``
and ``except OSError`` blocks.
"""


class IdxkitError(Exception):
    """Base exception for all IdxKit errors."""


class IdxkitConfigError(IdxkitError, ValueError):
    """Configuration or registry validation error."""


class CacheNotFoundError(IdxkitError, FileNotFoundError):
    """An expected cache file or directory does not exist."""


class CacheIOError(IdxkitError, OSError):
    """Local filesystem failure (permissions, disk full, ...)."""


class IntegrityError(IdxkitError):
    """Retrieved payload does not match the expected content hash."""

    def __init__(self, name: str, expected: str, actual: str) -> None:
        super().__init__(f"SHA-256 mismatch for '{name}': expected {expected}, got {actual}")
        self.name = name
        self.expected = expected
        self.actual = actual


class FormatError(IdxkitError, ValueError):
    """Unrecognized magic number or inconsistent IDX dimensions."""


class BatchSizeError(IdxkitError, ValueError):
    """Batch size is zero, does not divide the record count, or datasets disagree."""


class TransportError(IdxkitError):
    """Network retrieval failed (connection, timeout, non-success status)."""
