"""
Semantic Type Definitions & Validation Primitives.

Annotated pydantic types shared by the registry and recipe schemas, so that
invalid values (zero batch sizes, malformed digests, relative paths) are
rejected when a model is built rather than deep inside the pipeline.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Annotated, Literal

from pydantic import AfterValidator, Field, PlainSerializer

_SHA256_RE = re.compile(r"^[0-9a-f]{64}$")


# VALIDATORS
def _sanitize_path(v: str | Path) -> Path:
    """
    Resolve path to absolute form without disk side-effects.

    Args:
        v: Path object or string to sanitize

    Returns:
        Absolute Path with home directory expanded
    """
    return Path(v).expanduser().resolve()


def _validate_sha256(v: str) -> str:
    """Normalizes a hex digest to lowercase and checks it is 64 hex characters."""
    digest = v.strip().lower()
    if not _SHA256_RE.match(digest):
        raise ValueError(f"Expected a 64-character SHA-256 hex digest, got: '{v}'")
    return digest


def _validate_file_name(v: str) -> str:
    """File names are joined onto the cache directory, so no separators allowed."""
    if not v or "/" in v or "\\" in v or v in (".", ".."):
        raise ValueError(f"Invalid file name: '{v}'")
    return v


# GENERIC PRIMITIVES
PositiveInt = Annotated[int, Field(gt=0)]
PositiveFloat = Annotated[float, Field(gt=0.0)]

# FILESYSTEM
ValidatedPath = Annotated[
    Path,
    AfterValidator(_sanitize_path),
    PlainSerializer(lambda v: str(v), when_used="json", return_type=str),
]
FileName = Annotated[str, AfterValidator(_validate_file_name)]

# INTEGRITY
Sha256Hex = Annotated[str, AfterValidator(_validate_sha256)]

# PIPELINE
BatchSize = Annotated[int, Field(ge=1)]
WorkerCount = Annotated[int, Field(ge=1, le=16)]
SplitName = Literal["train", "test"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
