"""In-place pixel transforms.

AIDEV-NOTE: Every transform checks its preconditions before touching the
buffer, so a failed call leaves the image exactly as it was.
"""

import numpy as np

from .errors import FilterTooLarge, FormatMismatch, UnsupportedFormat
from .models import AnymapImage, PnmFormat


def invert(image: AnymapImage) -> None:
    """Invert every sample.

    Bitmaps flip each bit (1 - s), greymaps and pixmaps take the bitwise
    complement (255 - s).
    """
    buffer = image._buffer
    if image.format is PnmFormat.BITMAP:
        np.subtract(1, buffer, out=buffer)
    else:
        np.invert(buffer, out=buffer)


def apply_filter(image: AnymapImage, filter_image: AnymapImage) -> None:
    """Add a filter image onto ``image`` sample by sample, wrapping at 256.

    Samples past the end of the filter buffer are left as they are. Only
    ``image`` is modified.

    Raises:
        FilterTooLarge: if the filter buffer is longer than the image buffer
        FormatMismatch: if the two images are of different formats
        UnsupportedFormat: if the images are bitmaps
    """
    if len(filter_image) > len(image):
        raise FilterTooLarge(
            f"Filter buffer ({len(filter_image)} samples) is larger than "
            f"image buffer ({len(image)} samples)"
        )
    if filter_image.format is not image.format:
        raise FormatMismatch(
            f"Filter format {filter_image.format.name} differs from image "
            f"format {image.format.name}"
        )
    if image.format is PnmFormat.BITMAP:
        raise UnsupportedFormat("Bitmap images cannot have a filter applied")

    count = len(filter_image)
    # uint8 addition wraps modulo 256
    np.add(image._buffer[:count], filter_image._buffer, out=image._buffer[:count])


def greyscale(image: AnymapImage, include_last_pixel: bool = False) -> None:
    """Replace each RGB triple of a pixmap with its channel average.

    Bitmaps and greymaps are left unchanged.

    Args:
        image: Image to convert in place
        include_last_pixel: Also convert the final pixel. By default the
            final triple is left untouched.
    """
    if image.format is not PnmFormat.PIXMAP or len(image) == 0:
        return

    pixels = image._buffer.reshape(-1, 3)
    if not include_last_pixel:
        pixels = pixels[:-1]
    averages = pixels.sum(axis=1, dtype=np.uint16) // 3
    pixels[:] = averages.astype(np.uint8)[:, np.newaxis]
