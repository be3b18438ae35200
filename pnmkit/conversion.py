"""Conversion between AnymapImage and Pillow images."""

import numpy as np
from PIL import Image

from .errors import UnsupportedFormat
from .models import (
    MAX_SATURATION,
    AnymapImage,
    PnmFormat,
    make_bitmap,
    make_greymap,
    make_pixmap,
)


def to_pil(image: AnymapImage) -> Image.Image:
    """Convert an anymap to a PIL image.

    Args:
        image: Source image

    Returns:
        PIL Image in mode "1" (bitmap), "L" (greymap) or "RGB" (pixmap)

    AIDEV-NOTE: PBM uses 1 for black while Pillow's "1" mode uses 0 for
    black, so bitmap samples are flipped on the way through.
    """
    height, width = image.get_dimensions()
    buffer = image.get_buffer()

    if image.format is PnmFormat.BITMAP:
        grey = np.where(buffer.reshape(height, width) == 1, 0, 255).astype(np.uint8)
        return Image.fromarray(grey).convert("1", dither=Image.Dither.NONE)
    if image.format is PnmFormat.GREYMAP:
        return Image.fromarray(buffer.reshape(height, width))
    return Image.fromarray(buffer.reshape(height, width, 3))


def from_pil(pil_image: Image.Image, saturation: int | None = None) -> AnymapImage:
    """Convert a PIL image to an anymap.

    Args:
        pil_image: Source image in mode "1", "L", "RGB", "RGBA" or "P"
        saturation: Saturation for greymaps and pixmaps (default 255)

    Returns:
        Bitmap for mode "1", greymap for "L", pixmap otherwise

    Raises:
        UnsupportedFormat: If the image mode has no anymap counterpart
    """
    saturation = MAX_SATURATION if saturation is None else saturation
    width, height = pil_image.size

    if pil_image.mode == "1":
        white = np.asarray(pil_image, dtype=bool)
        return make_bitmap((~white).astype(np.uint8).reshape(-1), height, width)
    if pil_image.mode == "L":
        grey = np.asarray(pil_image, dtype=np.uint8)
        return make_greymap(grey.reshape(-1), saturation, height, width)
    if pil_image.mode in ("RGB", "RGBA", "P"):
        # Drop alpha / expand palette
        rgb = np.asarray(pil_image.convert("RGB"), dtype=np.uint8)
        return make_pixmap(rgb.reshape(-1), saturation, height, width)

    raise UnsupportedFormat(f"PIL mode {pil_image.mode!r} has no anymap counterpart")
