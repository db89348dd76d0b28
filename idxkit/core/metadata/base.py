"""
Remote File Descriptor Definitions.

Defines the immutable description of one remotely hosted archive: where it
lives, what it is called, and the SHA-256 digest its bytes must match.
"""

from __future__ import annotations

from pathlib import PurePath

from pydantic import BaseModel, ConfigDict, Field

from ..config.types import FileName, Sha256Hex


class FileDescriptor(BaseModel):
    """
    Immutable metadata for one expected remote artifact.

    Identity key is ``name``: it doubles as the cache file name.

    Attributes:
        location: URI prefix the file name is appended to (usually ends with ``/``).
        name: Remote (and cached) file name, e.g. ``train-images-idx3-ubyte.gz``.
        content_hash: Expected SHA-256 of the remote bytes (lowercase hex).
        query: Optional query string appended after ``?``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    location: str = Field(..., description="URI prefix, e.g. 'https://host/path/'")
    name: FileName = Field(..., description="Remote file name")
    content_hash: Sha256Hex = Field(..., description="SHA-256 of the remote payload")
    query: str = Field(default="", description="Query string without the leading '?'")

    @property
    def url(self) -> str:
        """Full retrieval URL: ``location + name [+ '?' + query]``."""
        base = f"{self.location}{self.name}"
        return f"{base}?{self.query}" if self.query else base

    @property
    def stem(self) -> str:
        """File name with its final extension stripped (the decompressed form)."""
        return PurePath(self.name).stem

    def __str__(self) -> str:
        return f"{self.name} <{self.url}> sha256={self.content_hash}"


class DatasetSplit(BaseModel):
    """Pairs the image and label descriptors making up one split."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    images: str = Field(..., description="Name of the image archive descriptor")
    labels: str = Field(..., description="Name of the label archive descriptor")
