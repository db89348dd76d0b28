"""
Local Cache Manager.

Owns one cache directory on disk. Every existence check goes to the filesystem (no
memoized existence flags), writes are staged in a hidden ``.part`` sibling
and moved into place with ``os.replace`` so a committed name never refers to
a half-written file.
"""

from __future__ import annotations

import enum
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from ..core import LOGGER_NAME, FileDescriptor, LogStyle, digests_match, sha256_checksum
from ..exceptions import CacheIOError, CacheNotFoundError

logger = logging.getLogger(LOGGER_NAME)

_STAGING_SUFFIX = ".part"


class CacheStatus(enum.Enum):
    """Per-file cache state used by the completeness check."""

    MISSING = "missing"
    CACHED_RAW = "cached_raw"
    CACHED_DECODED = "cached_decoded"


@dataclass(frozen=True)
class CacheEntry:
    """Snapshot of one descriptor's cache state, computed on demand."""

    descriptor: FileDescriptor
    local_path: Path
    status: CacheStatus

    @property
    def present(self) -> bool:
        return self.status is not CacheStatus.MISSING


class LocalCache:
    """
    Filesystem-backed store for downloaded archives.

    Args:
        directory: Cache directory. Passed in explicitly; nothing is derived
            from the process working directory here.
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def __repr__(self) -> str:
        return f"LocalCache({str(self._directory)!r})"

    # EXISTENCE CHECKS
    def directory_exists(self) -> bool:
        """True if the cache directory exists."""
        return self._directory.is_dir()

    def file_exists(self, name: str) -> bool:
        """True if a committed file called ``name`` exists in the cache directory."""
        return self.resolve_path(name).is_file()

    def resolve_path(self, name: str) -> Path:
        """Joins the cache directory and a file name. Does not touch the filesystem."""
        return self._directory / name

    def list_files(self) -> list[str]:
        """Sorted names of committed files; staging files are excluded."""
        if not self.directory_exists():
            return []
        return sorted(
            p.name for p in self._directory.iterdir() if p.is_file() and not p.name.startswith(".")
        )

    def status(self, descriptor: FileDescriptor, verify: bool = False) -> CacheEntry:
        """
        Classifies a descriptor as missing, cached raw, or cached decoded.

        Args:
            descriptor: File to look up.
            verify: Re-hash a raw cached file; a digest mismatch reports MISSING
                so the next fetch overwrites it.

        Raises:
            CacheIOError: If ``verify`` is set and the file cannot be read.
        """
        raw_path = self.resolve_path(descriptor.name)
        if raw_path.is_file():
            if verify and not digests_match(descriptor.content_hash, self._checksum(raw_path)):
                logger.warning(
                    f"{LogStyle.WARNING} Cached file failed SHA-256 check, treating as missing: "
                    f"{raw_path}"
                )
                return CacheEntry(descriptor, raw_path, CacheStatus.MISSING)
            return CacheEntry(descriptor, raw_path, CacheStatus.CACHED_RAW)

        decoded_path = self.resolve_path(descriptor.stem)
        if decoded_path.is_file():
            return CacheEntry(descriptor, decoded_path, CacheStatus.CACHED_DECODED)

        return CacheEntry(descriptor, raw_path, CacheStatus.MISSING)

    def _checksum(self, path: Path) -> str:
        try:
            return sha256_checksum(path)
        except OSError as e:
            raise CacheIOError(f"Cannot read {path} for verification: {e}") from e

    # MUTATIONS
    def ensure_directory(self) -> None:
        """
        Creates the cache directory if absent.

        Concurrent callers racing on creation all succeed.

        Raises:
            CacheIOError: If the directory cannot be created.
        """
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheIOError(f"Cannot create cache directory {self._directory}: {e}") from e

    def write_file(self, name: str, payload: bytes) -> Path:
        """
        Atomically creates or replaces ``name`` with exactly ``payload``.

        Raises:
            CacheIOError: On any filesystem failure; the staging file is removed.
        """
        target = self.resolve_path(name)
        staging = self.resolve_path(f".{name}{_STAGING_SUFFIX}")
        try:
            with open(staging, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(staging, target)
        except OSError as e:
            staging.unlink(missing_ok=True)
            raise CacheIOError(f"Cannot write {target}: {e}") from e

        logger.debug(f"Cached {len(payload)} bytes → {target.name}")
        return target

    def read_file(self, name: str) -> bytes:
        """
        Reads a committed cache file.

        Raises:
            CacheNotFoundError: If the file does not exist.
            CacheIOError: If it exists but cannot be read.
        """
        path = self.resolve_path(name)
        if not path.is_file():
            raise CacheNotFoundError(f"File not cached: {path}")
        try:
            return path.read_bytes()
        except OSError as e:
            raise CacheIOError(f"Cannot read {path}: {e}") from e

    def remove_file(self, name: str) -> None:
        """
        Deletes a cached file.

        Raises:
            CacheNotFoundError: If the directory or the file does not exist.
            CacheIOError: If deletion fails for another reason.
        """
        if not self.directory_exists():
            raise CacheNotFoundError(f"Cache directory does not exist: {self._directory}")
        path = self.resolve_path(name)
        if not path.is_file():
            raise CacheNotFoundError(f"File not cached: {path}")
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise CacheNotFoundError(f"File not cached: {path}") from e
        except OSError as e:
            raise CacheIOError(f"Cannot remove {path}: {e}") from e

    def remove_directory(self) -> None:
        """
        Deletes the cache directory and everything in it.

        Raises:
            CacheNotFoundError: If the directory does not exist.
            CacheIOError: If deletion fails.
        """
        if not self.directory_exists():
            raise CacheNotFoundError(f"Cache directory does not exist: {self._directory}")
        try:
            shutil.rmtree(self._directory)
        except OSError as e:
            raise CacheIOError(f"Cannot remove {self._directory}: {e}") from e
