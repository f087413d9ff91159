#!/usr/bin/env python3
"""
Public API for the sprite splitter.

This module wires the pipeline stages together: thresholding, gap closing,
background fill, fragment merging, labeling and extraction. Input is a decoded
RGBA array or raw image bytes; output is one ProcessedAsset per sprite.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Generator

import numpy as np

from sprite_splitter.codec import ImageCodec, OpenCVCodec
from sprite_splitter.errors import EncodeFailure
from sprite_splitter.extraction import extract_region
from sprite_splitter.flood_fill import fill_background
from sprite_splitter.labeling import label_components
from sprite_splitter.models import ProcessedAsset, Region, Segmentation, SplitOptions
from sprite_splitter.morphology import box_dilate, close_gaps
from sprite_splitter.thresholding import threshold_foreground

logger = logging.getLogger(__name__)


def _validate_image(image: np.ndarray | None) -> np.ndarray:
    """Check the input array and return it as RGBA."""
    if image is None:
        raise ValueError("image cannot be None")

    if not isinstance(image, np.ndarray):
        raise ValueError(f"image must be a numpy array, got {type(image)}")

    if image.ndim != 3:
        raise ValueError(f"image must be 3D array (height, width, channels), got shape {image.shape}")

    if image.shape[2] not in (3, 4):
        raise ValueError(f"image must have 3 (RGB) or 4 (RGBA) channels, got {image.shape[2]}")

    if image.dtype != np.uint8:
        raise ValueError(f"image must be uint8, got {image.dtype}")

    if image.shape[0] == 0 or image.shape[1] == 0:
        raise ValueError(f"image must not be empty, got shape {image.shape}")

    if image.shape[2] == 3:
        alpha = np.full(image.shape[:2] + (1,), 255, dtype=np.uint8)
        return np.concatenate((image, alpha), axis=2)
    return image


def _resolve_options(options: SplitOptions | None, overrides: dict[str, int | None]) -> SplitOptions:
    return (options or SplitOptions()).with_overrides(**overrides)


def segment_image(image: np.ndarray, options: SplitOptions | None = None) -> Segmentation:
    """
    Run the detection stages of the pipeline and return every intermediate mask.

    Args:
        image: Input image as RGB or RGBA numpy array (uint8)
        options: Pipeline parameters; defaults are used if omitted

    Returns:
        Segmentation with the foreground, light-closed, solid and detection masks,
        the label map and the retained regions in discovery order

    Raises:
        ValueError: If image is None or has invalid shape/dtype.
    """
    options = options or SplitOptions()
    pixels = _validate_image(image)
    height, width = pixels.shape[:2]
    started = time.perf_counter()

    foreground = threshold_foreground(pixels, options.threshold)
    light_closed = close_gaps(foreground)
    solid = fill_background(light_closed, foreground)
    detection = box_dilate(solid, options.gap_fill)
    labels, regions = label_components(detection, solid, options.min_area)

    logger.debug(
        "Segmented %dx%d image in %.3fs: %d foreground px, %d solid px, %d labels, %d regions kept",
        width, height, time.perf_counter() - started,
        int(foreground.sum()), int(solid.sum()), int(labels.max()), len(regions)
    )

    return Segmentation(
        foreground=foreground,
        light_closed=light_closed,
        solid=solid,
        detection=detection,
        labels=labels,
        regions=regions,
    )


def iter_assets(
    image: np.ndarray,
    options: SplitOptions | None = None,
    codec: ImageCodec | None = None,
    max_workers: int | None = None
) -> Generator[ProcessedAsset, None, None]:
    """
    Split an image into sprites and yield them as they're encoded.

    Assets come out in label discovery order, i.e. raster order of the first
    pixel of each merged component. A region that fails to encode is skipped
    with a warning; file names are numbered by output position, so they stay
    consecutive even when a region is skipped.

    Args:
        image: Input image as RGB or RGBA numpy array (uint8)
        options: Pipeline parameters; defaults are used if omitted
        codec: Encoder for the extracted sprites; PNG through OpenCV by default
        max_workers: If greater than 1, extract and encode regions on a thread pool

    Yields:
        ProcessedAsset objects

    Raises:
        ValueError: If image is None or has invalid shape/dtype.
    """
    options = options or SplitOptions()
    codec = codec or OpenCVCodec()
    pixels = _validate_image(image)
    segmentation = segment_image(pixels, options)
    padding = options.padding

    def render(region: Region) -> tuple[Region, np.ndarray | None, bytes | None]:
        sprite = extract_region(region, padding, pixels, segmentation.solid)
        if sprite is None:
            return region, None, None
        try:
            return region, sprite, codec.encode(sprite)
        except EncodeFailure as e:
            logger.warning("Skipping region %d: %s", region.label, e)
            return region, sprite, None

    regions = list(segmentation.regions.values())
    if max_workers is not None and max_workers > 1 and len(regions) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            rendered = list(pool.map(render, regions))
    else:
        rendered = (render(region) for region in regions)

    position = 0
    for region, sprite, data in rendered:
        if sprite is None or data is None:
            continue
        position += 1
        yield ProcessedAsset(
            data=data,
            width=int(sprite.shape[1]),
            height=int(sprite.shape[0]),
            original_x=region.min_x - padding,
            original_y=region.min_y - padding,
            file_name=f"asset_{position}.png",
            label=region.label,
        )


def split_sprites(
    image: np.ndarray,
    options: SplitOptions | None = None,
    *,
    codec: ImageCodec | None = None,
    max_workers: int | None = None,
    threshold: int | None = None,
    padding: int | None = None,
    min_area: int | None = None,
    gap_fill: int | None = None
) -> list[ProcessedAsset]:
    """
    Split a decoded image into sprites.

    Keyword parameters override the matching fields of options.

    Example:
        >>> import cv2
        >>> from sprite_splitter import split_sprites
        >>>
        >>> img = cv2.cvtColor(cv2.imread("sheet.png"), cv2.COLOR_BGR2RGB)
        >>> for asset in split_sprites(img, gap_fill=5):
        >>>     with open(asset.file_name, "wb") as f:
        >>>         f.write(asset.data)
    """
    options = _resolve_options(options, dict(
        threshold=threshold, padding=padding, min_area=min_area, gap_fill=gap_fill))
    return list(iter_assets(image, options, codec=codec, max_workers=max_workers))


def split_sprite_sheet(
    data: bytes,
    options: SplitOptions | None = None,
    *,
    codec: ImageCodec | None = None,
    max_workers: int | None = None,
    threshold: int | None = None,
    padding: int | None = None,
    min_area: int | None = None,
    gap_fill: int | None = None
) -> list[ProcessedAsset]:
    """
    Decode encoded image bytes (PNG, JPEG, WEBP) and split them into sprites.

    Raises:
        DecodeFailure: If the bytes cannot be decoded. Nothing is processed.
        RenderSurfaceUnavailable: If the decoded image cannot be turned into RGBA.
    """
    codec = codec or OpenCVCodec()
    pixels = codec.decode(data)
    logger.debug("Decoded %d bytes into %dx%d image", len(data), pixels.shape[1], pixels.shape[0])
    return split_sprites(
        pixels, options, codec=codec, max_workers=max_workers,
        threshold=threshold, padding=padding, min_area=min_area, gap_fill=gap_fill
    )
