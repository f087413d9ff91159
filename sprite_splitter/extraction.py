"""
Cutting padded, alpha-masked sprite images out of the source image.
"""

from __future__ import annotations

import numpy as np

from sprite_splitter.models import Region


def extract_region(
    region: Region,
    padding: int,
    pixels: np.ndarray,
    solid: np.ndarray
) -> np.ndarray | None:
    """
    Crop one region with padding and make everything outside the solid mask transparent.

    Destination pixel (x, y) shows source pixel (x - padding + min_x, y - padding + min_y).
    Solid source pixels are copied with alpha 255; the rest become (0, 0, 0, 0).
    Destination pixels whose source falls outside the image are left transparent.

    Args:
        region: Region to extract
        padding: Transparent margin on every side, in pixels
        pixels: Source image (RGBA, uint8)
        solid: Solid object mask (uint8, 0/1)

    Returns:
        RGBA image of (width + 2*padding) x (height + 2*padding), or None if that is empty
    """
    out_w = region.width + 2 * padding
    out_h = region.height + 2 * padding
    if out_w <= 0 or out_h <= 0:
        return None

    src_h, src_w = solid.shape
    origin_x = region.min_x - padding
    origin_y = region.min_y - padding

    sprite = np.zeros((out_h, out_w, 4), dtype=np.uint8)

    # Intersection of the destination rectangle with the source image
    x1, x2 = max(origin_x, 0), min(origin_x + out_w, src_w)
    y1, y2 = max(origin_y, 0), min(origin_y + out_h, src_h)
    if x2 <= x1 or y2 <= y1:
        return sprite

    opaque = solid[y1:y2, x1:x2] == 1
    target = sprite[y1 - origin_y:y2 - origin_y, x1 - origin_x:x2 - origin_x]
    target[opaque, :3] = pixels[y1:y2, x1:x2, :3][opaque]
    target[opaque, 3] = 255

    return sprite
