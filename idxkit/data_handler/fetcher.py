"""
Fetch Orchestrator.

Guarantees that every descriptor of a registry is present in the local
cache, either as the downloaded archive or as its decompressed form. Missing
archives are retrieved concurrently on a bounded thread pool; each payload
is SHA-256 verified before it is committed, so unverified bytes never reach
the cache. Nothing is retried: any transport, integrity or filesystem error
aborts the whole call and propagates to the caller.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Protocol, Sequence

import requests

from ..core import LOGGER_NAME, FileDescriptor, LogStyle, digests_match, sha256_digest
from ..exceptions import IntegrityError, TransportError
from .cache import CacheEntry, LocalCache

logger = logging.getLogger(LOGGER_NAME)


# TRANSPORT
class Transport(Protocol):
    """Anything able to GET a URL and return the full response body."""

    def get(self, url: str) -> bytes: ...  # pragma: no cover


class HttpTransport:
    """
    Plain HTTP(S) transport built on ``requests``.

    Args:
        timeout: Per-request timeout in seconds.
        chunk_size: Streaming read size.
    """

    _HEADERS = {
        "User-Agent": "Wget/1.0",
        "Accept": "application/octet-stream",
        "Accept-Encoding": "identity",
    }

    def __init__(self, timeout: float = 60.0, chunk_size: int = 65536) -> None:
        self.timeout = timeout
        self.chunk_size = chunk_size

    def get(self, url: str) -> bytes:
        """
        Downloads ``url`` fully into memory.

        Raises:
            TransportError: On connection errors, timeouts, non-2xx statuses,
                or when the server answers with an HTML page.
        """
        try:
            with requests.get(
                url, headers=self._HEADERS, timeout=self.timeout, stream=True, allow_redirects=True
            ) as r:
                r.raise_for_status()

                content_type = r.headers.get("Content-Type", "")
                if "text/html" in content_type:
                    raise TransportError(f"GET {url} returned an HTML page, not an archive")

                return b"".join(chunk for chunk in r.iter_content(self.chunk_size) if chunk)
        except requests.RequestException as e:
            raise TransportError(f"GET {url} failed: {e}") from e


# ORCHESTRATION
@dataclass(frozen=True)
class FetchReport:
    """Outcome of one ``ensure_cached`` call."""

    fetched: tuple[str, ...]
    skipped: tuple[str, ...]

    @property
    def satisfied(self) -> bool:
        """True when the cache was already complete and nothing was downloaded."""
        return not self.fetched


class FetchOrchestrator:
    """
    Fetch-or-skip driver for an ordered sequence of descriptors.

    Args:
        descriptors: Files that must end up cached.
        cache: Destination cache.
        transport: Network backend (defaults to ``HttpTransport``).
        max_workers: Upper bound on concurrent retrievals.
        verify_cached: Re-hash cached archives; mismatches are re-downloaded.
    """

    def __init__(
        self,
        descriptors: Sequence[FileDescriptor],
        cache: LocalCache,
        transport: Transport | None = None,
        max_workers: int = 4,
        verify_cached: bool = True,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {max_workers}")
        self.descriptors = tuple(descriptors)
        self.cache = cache
        self.transport = transport if transport is not None else HttpTransport()
        self.max_workers = max_workers
        self.verify_cached = verify_cached

    def plan(self) -> list[CacheEntry]:
        """Current cache status of every descriptor, in registry order."""
        return [self.cache.status(d, verify=self.verify_cached) for d in self.descriptors]

    def is_satisfied(self) -> bool:
        """True if the cache directory exists and every descriptor is cached."""
        return self.cache.directory_exists() and all(e.present for e in self.plan())

    def ensure_cached(self, force: bool = False) -> FetchReport:
        """
        Downloads and verifies whatever is missing from the cache.

        Args:
            force: Re-download every descriptor, even those already cached.

        Returns:
            FetchReport listing fetched and skipped file names.

        Raises:
            TransportError: A retrieval failed.
            IntegrityError: A payload did not match its expected SHA-256.
            CacheIOError: The cache directory or a file could not be written.
        """
        entries = self.plan()

        if not force and self.cache.directory_exists() and all(e.present for e in entries):
            logger.debug(LogStyle.status_line("Cache", f"complete at {self.cache.directory}"))
            return FetchReport(fetched=(), skipped=tuple(d.name for d in self.descriptors))

        self.cache.ensure_directory()

        pending = [e.descriptor for e in entries if force or not e.present]
        skipped = tuple(e.descriptor.name for e in entries if not force and e.present)
        for name in skipped:
            logger.debug(LogStyle.status_line("Cached", name))

        self._fetch_all(pending)
        return FetchReport(fetched=tuple(d.name for d in pending), skipped=skipped)

    def _fetch_all(self, descriptors: Sequence[FileDescriptor]) -> None:
        """Runs one retrieval per descriptor; the first failure cancels queued work."""
        if not descriptors:
            return

        workers = min(self.max_workers, len(descriptors))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="idxkit-fetch") as pool:
            futures = {pool.submit(self._fetch_one, d): d for d in descriptors}
            try:
                for future in as_completed(futures):
                    future.result()
            except BaseException:
                for future in futures:
                    future.cancel()
                raise

    def _fetch_one(self, descriptor: FileDescriptor) -> None:
        """Download → verify → persist for a single descriptor."""
        logger.info(LogStyle.status_line("Downloading", descriptor.name))
        payload = self.transport.get(descriptor.url)

        actual = sha256_digest(payload)
        if not digests_match(descriptor.content_hash, actual):
            logger.error(
                f"SHA-256 mismatch for {descriptor.name}: "
                f"expected {descriptor.content_hash}, got {actual}"
            )
            raise IntegrityError(descriptor.name, descriptor.content_hash, actual)

        self.cache.write_file(descriptor.name, payload)
        logger.info(LogStyle.status_line("Verified", descriptor.name, symbol=LogStyle.SUCCESS))
