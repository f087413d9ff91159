#!/usr/bin/env python3
"""
Sprite Splitter - Command Line Interface

Splits a sprite sheet drawn on a light, near-uniform background into one
transparent PNG per sprite.

Dark pixels are separated from the background with a luminance threshold,
hairline gaps are sealed, enclosed holes are filled, and fragments lying close
together are merged into one sprite before everything is labeled. Tiny specks
are dropped by their true pixel area.
"""

import logging
from pathlib import Path

import click
import cv2

from sprite_splitter.api import iter_assets, segment_image
from sprite_splitter.codec import OpenCVCodec
from sprite_splitter.errors import SpriteSplitError
from sprite_splitter.models import SplitOptions
from sprite_splitter.sprite_save import save_assets, write_archive, write_metadata


def _save_debug_images(pixels, options: SplitOptions, debug_dir: Path) -> int:
    """Write every intermediate mask and a region overlay to debug_dir."""
    segmentation = segment_image(pixels, options)
    masks = {
        "01_foreground": segmentation.foreground,
        "02_light_closed": segmentation.light_closed,
        "03_solid": segmentation.solid,
        "04_detection": segmentation.detection,
    }
    for name, mask in masks.items():
        cv2.imwrite(str(debug_dir / f"{name}.png"), mask * 255)

    overlay = cv2.cvtColor(pixels, cv2.COLOR_RGBA2BGR)
    for region in segmentation.regions.values():
        cv2.rectangle(overlay, (region.min_x, region.min_y), (region.max_x, region.max_y),
                      (0, 255, 0), 1)
    cv2.imwrite(str(debug_dir / "05_regions.png"), overlay)
    return len(masks) + 1


@click.command(context_settings=dict(show_default=True))
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False))
@click.argument('output_dir', type=click.Path(file_okay=False))
@click.option('--threshold', '-t', type=click.IntRange(0, 255), default=245,
              help='Mean RGB value below which a pixel is part of a sprite')
@click.option('--padding', '-p', type=click.IntRange(0, 20), default=2,
              help='Transparent border around each sprite, in pixels')
@click.option('--min-area', '-m', type=click.IntRange(10, 500), default=50,
              help='Minimum true pixel area of a sprite; smaller blobs are noise')
@click.option('--gap-fill', '-g', type=click.IntRange(0, 30), default=10,
              help='Dilation radius for merging fragments of one sprite')
@click.option('--zip', '-z', 'make_zip', is_flag=True,
              help='Bundle the sprites into split_sprites.zip instead of separate files')
@click.option('--metadata', is_flag=True, help='Also write sprites.json with sprite positions')
@click.option('--workers', '-j', type=click.IntRange(1, None), default=1,
              help='Threads used to extract and encode sprites')
@click.option('--debug', '-d', is_flag=True, help='Save intermediate masks for debugging')
@click.option('--verbose', '-v', is_flag=True, help='Log pipeline details')
def main(input_path: str, output_dir: str, threshold: int, padding: int, min_area: int,
         gap_fill: int, make_zip: bool, metadata: bool, workers: int, debug: bool,
         verbose: bool) -> None:
    """Split a sprite sheet into individual transparent sprites.

    INPUT_PATH is the sprite sheet (PNG, JPEG or WEBP) on a light background.

    OUTPUT_DIR is the directory where asset_<n>.png files are written.

    If one sprite comes out in several pieces, raise --gap-fill. If separate
    sprites are merged, lower it. If pale parts of a sprite disappear, raise
    --threshold.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    options = SplitOptions(threshold=threshold, padding=padding, min_area=min_area,
                           gap_fill=gap_fill)
    codec = OpenCVCodec()

    # Load the image
    try:
        pixels = codec.decode(Path(input_path).read_bytes())
    except SpriteSplitError as e:
        click.echo(f"Error: Could not load image from {input_path}: {e}", err=True)
        raise SystemExit(1)
    click.echo(f"Loaded image with shape {pixels.shape}")

    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    if debug:
        debug_dir = Path("debug")
        debug_dir.mkdir(exist_ok=True)
        num_debug_images = _save_debug_images(pixels, options, debug_dir)
        click.echo(f"Saved {num_debug_images} debug image(s) to {debug_dir}")

    try:
        assets = list(iter_assets(pixels, options, codec=codec, max_workers=workers))
    except (ValueError, SpriteSplitError) as e:
        click.echo(f"Error processing image: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"Detected {len(assets)} sprite(s)")

    if make_zip:
        archive = write_archive(assets, out_dir / "split_sprites.zip")
        click.echo(f"Sprites archived to {archive}")
    else:
        save_assets(assets, out_dir)
        click.echo(f"Sprites saved to {out_dir}")

    if metadata:
        click.echo(f"Metadata written to {write_metadata(assets, out_dir / 'sprites.json')}")


if __name__ == "__main__":
    main()
