"""
Data types passed between the pipeline stages and returned to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

import numpy as np


@dataclass(frozen=True)
class SplitOptions:
    """
    Tunable parameters of the splitting pipeline.

    Attributes:
        threshold: Mean RGB value below which a pixel counts as foreground (0-255)
        padding: Transparent border added around each extracted sprite, in pixels
        min_area: Components with a true pixel area at or below this are noise
        gap_fill: Radius of the box dilation that merges nearby fragments
    """
    threshold: int = 245
    padding: int = 2
    min_area: int = 50
    gap_fill: int = 10

    def with_overrides(self, **overrides: int | None) -> SplitOptions:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


@dataclass(frozen=True)
class Region:
    """A retained connected component: bounding box (inclusive) and true area."""
    label: int
    min_x: int
    max_x: int
    min_y: int
    max_y: int
    area: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    @property
    def bbox_area(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class ProcessedAsset:
    """
    One extracted sprite, ready to be written out.

    Attributes:
        data: Encoded image bytes (PNG with the default codec)
        width: Width of the encoded image, padding included
        height: Height of the encoded image, padding included
        original_x: Left edge in the source image, padding already subtracted
        original_y: Top edge in the source image, padding already subtracted
        file_name: Suggested file name, "asset_<n>.png" with n counted from 1
        label: Component label the asset was cut from
    """
    data: bytes
    width: int
    height: int
    original_x: int
    original_y: int
    file_name: str
    label: int


@dataclass
class Segmentation:
    """Every intermediate array of one pipeline run, plus the retained regions."""
    foreground: np.ndarray
    light_closed: np.ndarray
    solid: np.ndarray
    detection: np.ndarray
    labels: np.ndarray
    regions: dict[int, Region] = field(default_factory=dict)

    @property
    def width(self) -> int:
        return int(self.solid.shape[1])

    @property
    def height(self) -> int:
        return int(self.solid.shape[0])
