"""
IDX Binary Decoder.

Turns a cached archive into a ``DecodedDataset``. The archive is gunzipped
in memory, then parsed as IDX: a 4-byte big-endian magic number (2049 for
label files, 2051 for image files), one big-endian uint32 per dimension,
and the raw unsigned-byte payload.
"""

from __future__ import annotations

import gzip
import logging
import math
import struct
import zlib
from dataclasses import dataclass
from typing import Final, Iterator

import numpy as np

from ..core import LOGGER_NAME, FileDescriptor, LogStyle
from ..exceptions import CacheNotFoundError, FormatError
from .cache import CacheStatus, LocalCache

logger = logging.getLogger(LOGGER_NAME)

MAGIC_LABELS: Final[int] = 2049
MAGIC_IMAGES: Final[int] = 2051

# magic number → number of dimension fields
_RANKS: Final[dict[int, int]] = {MAGIC_LABELS: 1, MAGIC_IMAGES: 3}

_PIXEL_MAX: Final[float] = 255.0


@dataclass(frozen=True)
class DecodedDataset:
    """
    Parsed IDX content.

    Attributes:
        dimensions: ``(count,)`` for labels, ``(count, rows, columns)`` for images.
        payload: Raw unsigned bytes, exactly ``prod(dimensions)`` long.
    """

    dimensions: tuple[int, ...]
    payload: bytes

    def __post_init__(self) -> None:
        if len(self.dimensions) not in (1, 3):
            raise FormatError(f"Unsupported IDX rank {len(self.dimensions)}: {self.dimensions}")
        expected = math.prod(self.dimensions)
        if len(self.payload) != expected:
            raise FormatError(
                f"Payload holds {len(self.payload)} bytes but dimensions "
                f"{list(self.dimensions)} declare {expected}"
            )

    @property
    def kind(self) -> str:
        """``'images'`` or ``'labels'``."""
        return "images" if len(self.dimensions) == 3 else "labels"

    @property
    def record_count(self) -> int:
        return self.dimensions[0]

    @property
    def feature_length(self) -> int:
        """Values per record: ``rows * columns`` for images, 1 for labels."""
        if self.kind == "images":
            return self.dimensions[1] * self.dimensions[2]
        return 1

    def to_array(self) -> np.ndarray:
        """Read-only ``uint8`` view of the payload shaped as ``dimensions``."""
        return np.frombuffer(self.payload, dtype=np.uint8).reshape(self.dimensions)

    def iter_features(self, normalize: bool = True) -> Iterator[np.ndarray]:
        """
        Yields one flat float64 feature vector per image record.

        Scaling is applied per record, so the full payload is never
        duplicated as floats.

        Raises:
            FormatError: If this is a label dataset.
        """
        if self.kind != "images":
            raise FormatError("Feature vectors are only defined for image datasets")
        flat = self.to_array().reshape(self.record_count, self.feature_length)
        for row in flat:
            yield scale_features(row, normalize)

    def __repr__(self) -> str:
        return f"<DecodedDataset: {self.kind} {list(self.dimensions)}>"


def scale_features(raw: np.ndarray, normalize: bool) -> np.ndarray:
    """Maps raw bytes to float64, divided by 255 when ``normalize`` is set."""
    values = raw.astype(np.float64)
    if normalize:
        values /= _PIXEL_MAX
    return values


def decompress(archive: bytes) -> bytes:
    """
    Gunzips an archive fully into memory.

    Raises:
        FormatError: If the bytes are not a valid gzip stream.
    """
    try:
        return gzip.decompress(archive)
    except (gzip.BadGzipFile, EOFError, zlib.error) as e:
        raise FormatError(f"Archive is not a valid gzip stream: {e}") from e


def parse_idx(data: bytes) -> DecodedDataset:
    """
    Parses a decompressed IDX stream.

    Raises:
        FormatError: Unknown magic number, truncated header, or a payload
            whose length disagrees with the declared dimensions.
    """
    if len(data) < 4:
        raise FormatError(f"IDX stream too short for a magic number ({len(data)} bytes)")

    (magic,) = struct.unpack_from(">I", data, 0)
    rank = _RANKS.get(magic)
    if rank is None:
        raise FormatError(f"Unrecognized IDX magic number: {magic}")

    header_len = 4 + 4 * rank
    if len(data) < header_len:
        raise FormatError(f"Truncated IDX header: expected {header_len} bytes, got {len(data)}")

    dimensions = struct.unpack_from(f">{rank}I", data, 4)
    return DecodedDataset(dimensions=tuple(dimensions), payload=bytes(data[header_len:]))


def read_archive(
    cache: LocalCache, descriptor: FileDescriptor, keep_decompressed: bool = False
) -> bytes:
    """
    Returns the decompressed IDX bytes for a descriptor.

    Prefers the cached archive; falls back to the decompressed file stored
    under the descriptor's stem.

    Args:
        cache: Cache holding the file.
        descriptor: File to read.
        keep_decompressed: Also persist the decompressed bytes under the stem name.

    Raises:
        CacheNotFoundError: Neither form is cached.
        FormatError: The archive is not valid gzip.
    """
    entry = cache.status(descriptor)

    if entry.status is CacheStatus.CACHED_RAW:
        data = decompress(cache.read_file(descriptor.name))
        if keep_decompressed and descriptor.stem != descriptor.name:
            cache.write_file(descriptor.stem, data)
        return data

    if entry.status is CacheStatus.CACHED_DECODED:
        return cache.read_file(descriptor.stem)

    raise CacheNotFoundError(f"'{descriptor.name}' is not cached in {cache.directory}")


def decode_file(
    cache: LocalCache, descriptor: FileDescriptor, keep_decompressed: bool = False
) -> DecodedDataset:
    """Reads and parses one cached IDX file."""
    dataset = parse_idx(read_archive(cache, descriptor, keep_decompressed=keep_decompressed))
    logger.debug(LogStyle.status_line("Decoded", f"{descriptor.name} {list(dataset.dimensions)}"))
    return dataset
