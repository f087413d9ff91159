"""
Exceptions raised by the sprite splitting pipeline.
"""


class SpriteSplitError(Exception):
    """Base class for all sprite splitter errors."""


class DecodeFailure(SpriteSplitError):
    """The input bytes could not be decoded into a pixel buffer."""


class RenderSurfaceUnavailable(SpriteSplitError):
    """A decoded image could not be turned into an RGBA surface."""


class EncodeFailure(SpriteSplitError):
    """A single extracted region could not be encoded."""
