"""
Tests for the OpenCV-backed image codec.
"""

import cv2
import numpy as np
import pytest

from sprite_splitter import DecodeFailure, OpenCVCodec


def _png(img: np.ndarray) -> bytes:
    ok, buffer = cv2.imencode(".png", img)
    assert ok
    return buffer.tobytes()


def test_decode_bgr_png_to_rgba():
    bgr = np.zeros((4, 5, 3), dtype=np.uint8)
    bgr[..., 0] = 10   # blue
    bgr[..., 2] = 200  # red

    pixels = OpenCVCodec().decode(_png(bgr))

    assert pixels.shape == (4, 5, 4)
    assert pixels.dtype == np.uint8
    assert pixels[0, 0].tolist() == [200, 0, 10, 255]


def test_decode_keeps_alpha():
    bgra = np.zeros((3, 3, 4), dtype=np.uint8)
    bgra[..., 1] = 50
    bgra[..., 3] = 128

    pixels = OpenCVCodec().decode(_png(bgra))

    assert pixels[1, 1].tolist() == [0, 50, 0, 128]


def test_decode_grayscale_and_16_bit():
    gray16 = np.full((6, 7), 65535, dtype=np.uint16)

    pixels = OpenCVCodec().decode(_png(gray16))

    assert pixels.shape == (6, 7, 4)
    assert (pixels == 255).all()


def test_decode_jpeg():
    ok, buffer = cv2.imencode(".jpg", np.full((16, 16, 3), 255, dtype=np.uint8))
    assert ok

    pixels = OpenCVCodec().decode(buffer.tobytes())

    assert pixels.shape == (16, 16, 4)


@pytest.mark.parametrize("data", [b"", b"not an image at all"])
def test_decode_failure(data):
    with pytest.raises(DecodeFailure):
        OpenCVCodec().decode(data)


def test_encode_round_trip():
    rng = np.random.default_rng(3)
    rgba = rng.integers(0, 256, size=(9, 11, 4), dtype=np.uint8)
    codec = OpenCVCodec()

    data = codec.encode(rgba)

    assert data.startswith(b"\x89PNG")
    assert np.array_equal(codec.decode(data), rgba)
