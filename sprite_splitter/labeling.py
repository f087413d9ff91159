"""
Connected-component labeling of the detection mask.
"""

from __future__ import annotations

import numpy as np

from sprite_splitter.flood_fill import FloodFill
from sprite_splitter.models import Region


def label_components(
    detection: np.ndarray,
    solid: np.ndarray,
    min_area: int
) -> tuple[np.ndarray, dict[int, Region]]:
    """
    Label 4-connected blobs of the detection mask and keep those large enough.

    Connectivity comes from the (dilated) detection mask, but the area used for
    noise rejection counts only cells that are set in the solid mask. A speck
    that dilation blew up to hundreds of cells still has its true, tiny area.

    Args:
        detection: Dilated mask used for connectivity (uint8, 0/1)
        solid: Undilated solid object mask used for area (uint8, 0/1)
        min_area: A component is kept only if its true area is greater than this

    Returns:
        Tuple of (label map, regions). Labels start at 1 and are consumed by rejected
        components too. Regions map label to Region in discovery (raster) order.
    """
    if detection.shape != solid.shape:
        raise ValueError(f"mask shapes differ: {detection.shape} vs {solid.shape}")

    height, width = detection.shape
    labels = np.zeros((height, width), dtype=np.int32)
    regions: dict[int, Region] = {}
    filler = FloodFill(width, height)

    solid_cells = solid.reshape(-1)
    label_cells = memoryview(labels.reshape(-1))

    next_label = 1
    for seed in np.flatnonzero(detection).tolist():
        if label_cells[seed] != 0:
            continue
        y, x = divmod(seed, width)
        count = filler.fill(x, y, labels, 0, next_label, detection)

        visited = filler.filled[:count]
        ys, xs = np.divmod(visited, width)
        area = int(solid_cells[visited].sum())

        if area > min_area:
            regions[next_label] = Region(
                label=next_label,
                min_x=int(xs.min()),
                max_x=int(xs.max()),
                min_y=int(ys.min()),
                max_y=int(ys.max()),
                area=area,
            )
        next_label += 1

    return labels, regions
