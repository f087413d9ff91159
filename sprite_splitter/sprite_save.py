#!/usr/bin/env python3
"""
Functions for saving extracted sprites as individual files, a zip archive,
or a JSON metadata listing.
"""

import json
import zipfile
from pathlib import Path

from sprite_splitter.models import ProcessedAsset


def save_assets(assets: list[ProcessedAsset], output_dir: str | Path) -> list[Path]:
    """
    Save each asset as an individual file.

    Args:
        assets: Assets to write
        output_dir: Directory for the files; created if missing

    Returns:
        Paths of the written files
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for asset in assets:
        path = output_dir / asset.file_name
        path.write_bytes(asset.data)
        paths.append(path)
    return paths


def write_archive(
    assets: list[ProcessedAsset],
    archive_path: str | Path,
    folder: str = "sprites"
) -> Path:
    """
    Bundle all assets into a single zip archive.

    Args:
        assets: Assets to bundle
        archive_path: Path of the zip file to create
        folder: Folder inside the archive that holds the images

    Returns:
        Path of the archive
    """
    archive_path = Path(archive_path)
    archive_path.parent.mkdir(parents=True, exist_ok=True)

    with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for asset in assets:
            zf.writestr(f"{folder}/{asset.file_name}", asset.data)
    return archive_path


def write_metadata(assets: list[ProcessedAsset], path: str | Path) -> Path:
    """Write the position and size of every asset as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    records = [
        {
            "file_name": asset.file_name,
            "width": asset.width,
            "height": asset.height,
            "original_x": asset.original_x,
            "original_y": asset.original_y,
            "label": asset.label,
        }
        for asset in assets
    ]
    path.write_text(json.dumps(records, indent=2), encoding="utf-8")
    return path
