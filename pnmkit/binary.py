"""Binary (P4, P5, P6) serialization.

AIDEV-NOTE: PBM rows are bit-packed MSB first and every row starts on a
fresh byte, so a row of `width` pixels always takes ceil(width / 8) bytes
with zero padding in the low bits of the last one. numpy's packbits and
unpackbits along axis 1 give exactly that layout.
"""

import logging
from pathlib import Path

import numpy as np

from .errors import DimensionMismatch, UnreadableSource, WriteError
from .header import parse_binary_header
from .models import AnymapImage, PnmFormat, make_image

logger = logging.getLogger(__name__)


def encode_header(image: AnymapImage, magic: bytes) -> bytes:
    """Build `<magic>\\n<width> <height>\\n[<saturation>\\n]`."""
    header = b"%s\n%d %d\n" % (magic, image.width, image.height)
    if image.format.has_saturation:
        header += b"%d\n" % image.saturation
    return header


def row_bytes(width: int) -> int:
    """Bytes taken by one packed PBM row."""
    return (width + 7) // 8


def pack_bits(buffer: np.ndarray, height: int, width: int) -> bytes:
    """Pack one-byte-per-pixel bitmap samples into PBM rows."""
    rows = buffer.reshape(height, width)
    return np.packbits(rows, axis=1).tobytes()


def unpack_bits(payload: bytes, height: int, width: int) -> np.ndarray:
    """Expand packed PBM rows back into one byte (0 or 1) per pixel.

    Raises:
        DimensionMismatch: if the payload is not exactly height rows long
    """
    per_row = row_bytes(width)
    expected = per_row * height
    if len(payload) != expected:
        raise DimensionMismatch(
            f"Could not create bitmap: packed payload does not fit given "
            f"dimensions (payload length: {len(payload)}) != "
            f"(expected [h*ceil(w/8)]: {expected})"
        )
    packed = np.frombuffer(payload, dtype=np.uint8).reshape(height, per_row)
    return np.unpackbits(packed, axis=1, count=width).reshape(-1)


def encode_binary(image: AnymapImage) -> bytes:
    """Serialize an image to binary anymap bytes."""
    header = encode_header(image, image.format.binary_magic)
    if image.format is PnmFormat.BITMAP:
        payload = pack_bits(image._buffer, image.height, image.width)
    else:
        payload = image._buffer.tobytes()
    return header + payload


def decode_binary(data: bytes) -> AnymapImage:
    """Build an image from binary anymap bytes.

    Raises:
        UnknownMagicNumber: if the data does not start with P4, P5 or P6
        MalformedHeader: if the header is truncated or not numeric
        DimensionMismatch, InvalidSample, SaturationOutOfRange: from the
            validating constructors
    """
    header, offset = parse_binary_header(data)
    payload = data[offset:]

    if header.format is PnmFormat.BITMAP:
        samples = unpack_bits(payload, header.height, header.width)
    else:
        samples = payload

    return make_image(
        header.format, samples, header.saturation, header.height, header.width
    )


def write_binary(image: AnymapImage, destination: str | Path) -> None:
    """Write an image to a binary anymap file.

    Args:
        image: Image to serialize
        destination: Path of the file to create or overwrite

    Raises:
        WriteError: If the file cannot be opened or written
    """
    data = encode_binary(image)
    try:
        with open(destination, "wb") as f:
            f.write(data)
    except OSError as e:
        raise WriteError(f"Could not write {destination}: {e}") from e
    logger.debug("Wrote %d bytes of %s to %s", len(data), image.format.name, destination)


def read_binary(source: str | Path) -> AnymapImage:
    """Read a binary anymap file.

    Raises:
        UnreadableSource: If the file cannot be read
        UnknownMagicNumber: If the file is not P4, P5 or P6
        MalformedHeader: If the header is truncated or not numeric
    """
    try:
        with open(source, "rb") as f:
            data = f.read()
    except OSError as e:
        raise UnreadableSource(f"Could not read {source}: {e}") from e
    logger.debug("Read %d bytes from %s", len(data), source)
    return decode_binary(data)
