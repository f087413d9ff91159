"""
Functions for separating sprite pixels from a light background.
"""

import numpy as np


def threshold_foreground(pixels: np.ndarray, threshold: int) -> np.ndarray:
    """
    Mark pixels darker than the background threshold as foreground.

    Args:
        pixels: RGBA (or RGB) image, uint8, shape (height, width, channels)
        threshold: A pixel is foreground if the mean of its R, G and B is below this (0-255)

    Returns:
        Binary mask (uint8, 0/1) with the same height and width as the image
    """
    # Integer sums avoid rounding the mean; alpha is ignored
    rgb_sum = pixels[:, :, :3].astype(np.int32).sum(axis=2)
    return (rgb_sum < 3 * int(threshold)).astype(np.uint8)
