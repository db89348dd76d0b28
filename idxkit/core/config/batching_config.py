"""
Batching Configuration.

Controls which split is decoded, how pixel values are scaled and how the
records are partitioned.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .types import BatchSize, SplitName


class BatchingConfig(BaseModel):
    """
    Validated manifest for the decode → batch stage.

    Attributes:
        split: Registry split to decode (``train`` or ``test``).
        batch_size: Records per batch; must divide the split's record count.
        normalize: Scale pixels to [0, 1] (``byte / 255``) instead of raw values.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    split: SplitName = "test"
    batch_size: BatchSize = 100
    normalize: bool = True
