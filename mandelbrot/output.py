"""Persist rendered buffers as grayscale images."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import PIL.Image


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def image_format_for(path: Path, image_format: Optional[str] = None) -> str:
    """Pick the file format from ``image_format`` or the suffix of ``path``."""

    ext = (image_format or path.suffix or "png").lower().lstrip(".")
    return _pil_format_name(ext or "png")


def to_image(pixels: np.ndarray, bounds: tuple[int, int]) -> PIL.Image.Image:
    width, height = bounds
    if pixels.size != width * height:
        raise ValueError(f"Pixel buffer holds {pixels.size} values, expected {width}x{height}.")
    return PIL.Image.fromarray(np.asarray(pixels, dtype=np.uint8).reshape(height, width))


def write_image(
    pixels: np.ndarray,
    bounds: tuple[int, int],
    output_path: Path,
    image_format: Optional[str] = None,
) -> Path:
    """Write ``pixels`` as an 8-bit grayscale image and return the path."""

    output_path = Path(output_path)
    image = to_image(pixels, bounds)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=image_format_for(output_path, image_format))
    return output_path
