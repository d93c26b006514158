"""Pixel buffer acquisition: loading, downscaling and RGB array conversion."""

from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image as PIL_Image
from PIL import ImageOps
from PIL.Image import Resampling

from price_label.exceptions import InvalidImageError


def load_image(path: Union[str, Path]) -> PIL_Image.Image:
    """
    Open a photograph upright and in RGB.

    Args:
        path: Image file path

    Returns:
        PIL Image with EXIF orientation applied

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")
    with PIL_Image.open(path) as image:
        upright = ImageOps.exif_transpose(image)
        return upright.convert("RGB")


def downscale(
    image: PIL_Image.Image, max_width: int = 1920, max_height: int = 1080
) -> PIL_Image.Image:
    """Shrink an image to fit the bounds, keeping its aspect ratio."""
    ratio = min(max_width / image.width, max_height / image.height)

    # Only resize if the image is larger than the bounds
    if ratio >= 1:
        return image

    new_width = max(int(image.width * ratio), 1)
    new_height = max(int(image.height * ratio), 1)
    return image.resize((new_width, new_height), Resampling.LANCZOS)


def to_rgb_array(pixels) -> np.ndarray:
    """
    Convert a Pillow image or numpy array to a ``uint8`` H×W×3 array.

    Greyscale input is broadcast to three channels and an alpha channel is
    dropped.

    Raises:
        InvalidImageError: If the input cannot be read as an RGB image
    """
    if isinstance(pixels, PIL_Image.Image):
        pixels = np.asarray(pixels.convert("RGB"))
    elif not isinstance(pixels, np.ndarray):
        raise InvalidImageError(
            f"Expected PIL Image or numpy array, got {type(pixels).__name__}"
        )

    if pixels.ndim == 2:
        pixels = np.stack([pixels] * 3, axis=2)
    elif pixels.ndim == 3 and pixels.shape[2] == 4:
        pixels = pixels[:, :, :3]
    elif pixels.ndim == 3 and pixels.shape[2] == 1:
        pixels = np.repeat(pixels, 3, axis=2)

    if pixels.ndim != 3 or pixels.shape[2] != 3:
        raise InvalidImageError(f"Unsupported pixel array shape {pixels.shape}")
    if pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise InvalidImageError("Pixel array is empty")

    if pixels.dtype != np.uint8:
        pixels = np.clip(pixels, 0, 255).astype(np.uint8)
    return pixels
