"""
Shared fixtures: synthetic sprite sheets on a white background.
"""

import numpy as np
import pytest


@pytest.fixture
def make_sheet():
    """
    Factory for RGBA test images.

    Call with the canvas size and a list of (x1, y1, x2, y2) rectangles
    (inclusive) that are painted black on a white background.
    """
    def _make(width: int, height: int, rects=(), color=(0, 0, 0)) -> np.ndarray:
        img = np.full((height, width, 4), 255, dtype=np.uint8)
        for x1, y1, x2, y2 in rects:
            img[y1:y2 + 1, x1:x2 + 1, :3] = color
        return img
    return _make
