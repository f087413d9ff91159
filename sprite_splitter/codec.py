"""
Image decoding and encoding at the boundary of the pipeline.

The segmentation code only sees RGBA numpy arrays. Anything that turns bytes
into such an array, and back, can be plugged in through the ImageCodec protocol.
"""

from __future__ import annotations

from typing import Protocol

import cv2
import numpy as np

from sprite_splitter.errors import DecodeFailure, EncodeFailure, RenderSurfaceUnavailable


class ImageCodec(Protocol):
    """Converts between encoded image bytes and RGBA pixel buffers."""

    def decode(self, data: bytes) -> np.ndarray:
        ...

    def encode(self, pixels: np.ndarray) -> bytes:
        ...


class OpenCVCodec:
    """
    Codec backed by OpenCV: reads PNG, JPEG and WEBP, writes PNG.
    """

    def __init__(self, extension: str = ".png"):
        self.extension = extension

    def decode(self, data: bytes) -> np.ndarray:
        """
        Decode image bytes into an RGBA uint8 array of shape (height, width, 4).

        Raises:
            DecodeFailure: If the bytes are not a readable image.
            RenderSurfaceUnavailable: If the decoded layout cannot be converted to RGBA.
        """
        if not data:
            raise DecodeFailure("no image data")

        img = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
        if img is None:
            raise DecodeFailure("could not decode image data")

        # 16-bit PNGs: keep the high byte
        if img.dtype == np.uint16:
            img = (img >> 8).astype(np.uint8)
        elif img.dtype != np.uint8:
            raise RenderSurfaceUnavailable(f"unsupported sample type {img.dtype}")

        channels = 1 if img.ndim == 2 else img.shape[2]
        conversions = {
            1: cv2.COLOR_GRAY2RGBA,
            3: cv2.COLOR_BGR2RGBA,
            4: cv2.COLOR_BGRA2RGBA,
        }
        if channels not in conversions:
            raise RenderSurfaceUnavailable(f"unsupported channel count {channels}")
        if img.ndim == 3 and channels == 1:
            img = img[:, :, 0]

        try:
            return cv2.cvtColor(img, conversions[channels])
        except cv2.error as e:
            raise RenderSurfaceUnavailable(f"could not build RGBA surface: {e}") from e

    def encode(self, pixels: np.ndarray) -> bytes:
        """
        Encode an RGBA array to bytes.

        Raises:
            EncodeFailure: If OpenCV refuses to encode the image.
        """
        try:
            ok, buffer = cv2.imencode(self.extension, cv2.cvtColor(pixels, cv2.COLOR_RGBA2BGRA))
        except cv2.error as e:
            raise EncodeFailure(str(e)) from e
        if not ok:
            raise EncodeFailure(f"cv2.imencode({self.extension!r}) failed")
        return buffer.tobytes()
