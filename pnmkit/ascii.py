"""ASCII (P1, P2, P3) serialization."""

import logging
import re
from pathlib import Path

import numpy as np

from .errors import MalformedPixelData, UnreadableSource, WriteError
from .header import parse_ascii_header
from .models import AnymapImage, make_image

logger = logging.getLogger(__name__)

# Tokens are split on ASCII whitespace only (no vertical tab, no Unicode spaces)
_TOKEN = re.compile(r"[^ \t\n\r\f]+")
_DIGITS = re.compile(r"[0-9]+")


def encode_ascii(image: AnymapImage) -> str:
    """Serialize an image to ASCII anymap text.

    Samples are space-separated within a row and rows are newline-separated.
    There is no trailing whitespace after the last sample.
    """
    header = f"{image.format.ascii_magic.decode()}\n{image.width} {image.height}\n"
    if image.format.has_saturation:
        header += f"{image.saturation}\n"

    if len(image) == 0:
        return header

    body = "\n".join(
        " ".join(str(sample) for sample in row) for row in image.get_rows().tolist()
    )
    return header + body


def tokenize(text: str) -> "list[str]":
    return _TOKEN.findall(text)


def parse_samples(tokens: "list[str]") -> np.ndarray:
    """Parse pixel tokens as unsigned byte values.

    Raises:
        MalformedPixelData: on the first token that is not a value in 0..255
    """
    samples = np.empty(len(tokens), dtype=np.uint8)
    for idx, token in enumerate(tokens):
        value = -1
        if _DIGITS.fullmatch(token):
            try:
                value = int(token)
            except ValueError as e:
                # digit strings past the interpreter's conversion limit
                raise MalformedPixelData(
                    f"Pixel data holds oversized element at sample {idx}"
                ) from e
        if not 0 <= value <= 255:
            raise MalformedPixelData(
                f"Pixel data holds non-byte element {token[:16]!r} at sample {idx}"
            )
        samples[idx] = value
    return samples


def decode_ascii(text: str, skip_non_numeric: bool = True) -> AnymapImage:
    """Build an image from ASCII anymap text.

    Args:
        text: Full file contents
        skip_non_numeric: Skip stray non-numeric tokens inside the header
            rather than raising MalformedHeader

    Raises:
        UnknownMagicNumber: if the first token is not P1, P2 or P3
        MalformedHeader: if the header is incomplete
        MalformedPixelData: if a sample is not a byte value
    """
    tokens = tokenize(text.removeprefix("\ufeff"))
    header, first_sample = parse_ascii_header(tokens, skip_non_numeric)
    logger.debug(
        "Parsed %s header: %dx%d, saturation %d",
        header.format.name,
        header.width,
        header.height,
        header.saturation,
    )
    samples = parse_samples(tokens[first_sample:])
    return make_image(
        header.format, samples, header.saturation, header.height, header.width
    )


def write_ascii(
    image: AnymapImage, destination: str | Path, encoding: str = "utf-8"
) -> None:
    """Write an image to an ASCII anymap file.

    Raises:
        WriteError: If the file cannot be opened or written
    """
    text = encode_ascii(image)
    try:
        with open(destination, "w", encoding=encoding, newline="\n") as f:
            f.write(text)
    except OSError as e:
        raise WriteError(f"Could not write {destination}: {e}") from e
    logger.debug("Wrote %d characters of %s to %s", len(text), image.format.name, destination)


def read_ascii(
    source: str | Path,
    encoding: str = "utf-8",
    skip_non_numeric: bool = True,
) -> AnymapImage:
    """Read an ASCII anymap file.

    Raises:
        UnreadableSource: If the file cannot be read or decoded as text
    """
    try:
        with open(source, "r", encoding=encoding) as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise UnreadableSource(f"Could not read {source} as text: {e}") from e
    return decode_ascii(text, skip_non_numeric)
