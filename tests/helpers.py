"""Synthetic image builders shared by the tests."""

import numpy as np

DARK = 30
WHITE = 240


def dark_image(width: int, height: int) -> np.ndarray:
    """A uniformly dark RGB shelf background."""
    return np.full((height, width, 3), DARK, dtype=np.uint8)


def textured_label(
    image: np.ndarray, left: int, top: int, right: int, bottom: int
) -> np.ndarray:
    """Paint a white label with 10% dark print pixels onto ``image``."""
    ys, xs = np.mgrid[top:bottom, left:right]
    label = np.full((bottom - top, right - left), WHITE, dtype=np.uint8)
    label[(xs + ys) % 10 == 0] = DARK
    image[top:bottom, left:right, :] = label[:, :, None]
    return image
