"""
Sprite Splitter

Cuts individual sprites out of a sprite sheet drawn on a light background,
merging nearby fragments of one sprite and dropping noise specks.

Public API:
    - split_sprites: Split a decoded RGB/RGBA image into ProcessedAsset objects
    - split_sprite_sheet: Decode image bytes and split them
    - iter_assets: Generator form of split_sprites
    - segment_image: Run detection only and return all intermediate masks
    - SplitOptions: Pipeline parameters
    - ProcessedAsset, Region, Segmentation: Result types
"""

from sprite_splitter.api import iter_assets, segment_image, split_sprite_sheet, split_sprites
from sprite_splitter.codec import ImageCodec, OpenCVCodec
from sprite_splitter.errors import (
    DecodeFailure,
    EncodeFailure,
    RenderSurfaceUnavailable,
    SpriteSplitError,
)
from sprite_splitter.models import ProcessedAsset, Region, Segmentation, SplitOptions

__version__ = "0.1.0"
__all__ = [
    "split_sprites", "split_sprite_sheet", "iter_assets", "segment_image",
    "SplitOptions", "ProcessedAsset", "Region", "Segmentation",
    "ImageCodec", "OpenCVCodec",
    "SpriteSplitError", "DecodeFailure", "RenderSurfaceUnavailable", "EncodeFailure",
    "__version__",
]
