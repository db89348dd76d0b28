"""
Batch Assembler.

Pairs image records with labels by position and partitions them into
contiguous, equal-size batches. A record count that the batch size does not
divide is rejected up front; a short trailing batch is never produced.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np

from ..exceptions import BatchSizeError, FormatError
from .decoder import DecodedDataset


@dataclass(frozen=True)
class Record:
    """One decoded sample: a flat feature vector and its label."""

    features: np.ndarray
    label: int


@dataclass(frozen=True)
class Batch:
    """
    A stack of records.

    Attributes:
        features: ``(batch_size, feature_length)`` float64 matrix; row *i*
            belongs to ``labels[i]``.
        labels: ``(batch_size,)`` int64 vector.
    """

    features: np.ndarray
    labels: np.ndarray

    def __post_init__(self) -> None:
        if self.features.ndim != 2 or self.features.shape[0] != len(self.labels):
            raise BatchSizeError(
                f"Feature matrix {self.features.shape} does not match {len(self.labels)} labels"
            )

    def __len__(self) -> int:
        return len(self.labels)


def pair_records(
    images: DecodedDataset, labels: DecodedDataset, normalize: bool = True
) -> list[Record]:
    """
    Zips an image dataset with its label dataset, record *i* with label *i*.

    Raises:
        FormatError: If the datasets are not an image/label pair.
        BatchSizeError: If their record counts differ.
    """
    if images.kind != "images" or labels.kind != "labels":
        raise FormatError(
            f"Expected an image and a label dataset, got {images.kind} and {labels.kind}"
        )
    if images.record_count != labels.record_count:
        raise BatchSizeError(
            f"Record count mismatch: {images.record_count} images vs "
            f"{labels.record_count} labels"
        )

    return [
        Record(features=features, label=int(label))
        for features, label in zip(images.iter_features(normalize), labels.payload)
    ]


def check_partition(record_count: int, batch_size: int) -> int:
    """
    Validates that ``batch_size`` evenly partitions ``record_count``.

    Returns:
        The number of batches.

    Raises:
        BatchSizeError: If ``batch_size`` is not positive or leaves a remainder.
    """
    if batch_size <= 0:
        raise BatchSizeError(f"Batch size must be positive, got {batch_size}")
    if record_count % batch_size:
        raise BatchSizeError(
            f"Batch size {batch_size} does not divide record count {record_count} "
            f"(remainder {record_count % batch_size})"
        )
    return record_count // batch_size


def iter_batches(records: Sequence[Record], batch_size: int) -> Iterator[Batch]:
    """
    Lazily yields batches; the partition is validated before the first yield.

    Raises:
        BatchSizeError: Immediately, on an invalid partition.
    """
    num_batches = check_partition(len(records), batch_size)
    lengths = {r.features.shape[0] for r in records}
    if len(lengths) > 1:
        raise BatchSizeError(f"Records have differing feature lengths: {sorted(lengths)}")
    return _generate(records, batch_size, num_batches)


def _generate(records: Sequence[Record], batch_size: int, num_batches: int) -> Iterator[Batch]:
    for k in range(num_batches):
        chunk = records[k * batch_size : (k + 1) * batch_size]
        yield Batch(
            features=np.stack([r.features for r in chunk]),
            labels=np.fromiter((r.label for r in chunk), dtype=np.int64, count=len(chunk)),
        )


def assemble_batches(records: Sequence[Record], batch_size: int) -> list[Batch]:
    """Partitions ``records`` into contiguous, order-preserving batches."""
    return list(iter_batches(records, batch_size))
