"""Data models and constants for the PNM codec."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import numpy as np

from .errors import (
    DimensionMismatch,
    InvalidSample,
    SaturationOutOfRange,
)

# Largest saturation (maxval) an 8-bit sample can carry
MAX_SATURATION = 255

# Configuration file path
CONFIG_FILE = Path.home() / ".pnmkit_config.json"


class PnmFormat(Enum):
    """The three members of the anymap family.

    AIDEV-NOTE: Every per-format constant lives here so that readers and
    writers never branch on strings.
    """

    BITMAP = "pbm"
    GREYMAP = "pgm"
    PIXMAP = "ppm"

    @property
    def ascii_magic(self) -> bytes:
        return {
            PnmFormat.BITMAP: b"P1",
            PnmFormat.GREYMAP: b"P2",
            PnmFormat.PIXMAP: b"P3",
        }[self]

    @property
    def binary_magic(self) -> bytes:
        return {
            PnmFormat.BITMAP: b"P4",
            PnmFormat.GREYMAP: b"P5",
            PnmFormat.PIXMAP: b"P6",
        }[self]

    @property
    def samples_per_pixel(self) -> int:
        return 3 if self is PnmFormat.PIXMAP else 1

    @property
    def has_saturation(self) -> bool:
        """Bitmaps carry no saturation line in their header."""
        return self is not PnmFormat.BITMAP

    @property
    def suffix(self) -> str:
        return f".{self.value}"

    @classmethod
    def from_magic(cls, magic: bytes) -> "tuple[PnmFormat, bool] | None":
        """Look up a magic number.

        Returns:
            Tuple of (format, is_binary) or None if the magic is unknown
        """
        for fmt in cls:
            if magic == fmt.ascii_magic:
                return fmt, False
            if magic == fmt.binary_magic:
                return fmt, True
        return None


@dataclass
class CodecConfig:
    """Tunable codec behaviour."""

    # Encoding used by AnymapCodec.write when none is requested
    binary_output: bool = True

    # Text encoding for ASCII files
    text_encoding: str = "utf-8"

    # ASCII reader skips stray non-numeric tokens inside the header.
    # When False those tokens raise MalformedHeader instead.
    ascii_skip_non_numeric_header: bool = True

    # Greyscale leaves the final RGB triple untouched unless this is set
    greyscale_include_last_pixel: bool = False

    # Saturation assigned to greymaps/pixmaps built from Pillow images
    default_saturation: int = MAX_SATURATION


class AnymapImage:
    """An in-memory PBM, PGM or PPM image.

    Samples are held in a flat uint8 buffer, one entry per sample and
    RGB-interleaved for pixmaps. Build instances with make_bitmap,
    make_greymap or make_pixmap (or one of the readers); the buffer is
    validated there and never again.

    Calling the constructor directly is internal to pnmkit: it neither
    copies nor validates its arguments.
    """

    def __init__(
        self,
        fmt: PnmFormat,
        buffer: np.ndarray,
        saturation: int,
        height: int,
        width: int,
    ):
        self._format = fmt
        self._buffer = buffer
        self._saturation = saturation
        self._height = height
        self._width = width

    @property
    def format(self) -> PnmFormat:
        return self._format

    @property
    def saturation(self) -> int:
        return self._saturation

    @property
    def height(self) -> int:
        return self._height

    @property
    def width(self) -> int:
        return self._width

    @property
    def samples_per_row(self) -> int:
        """Number of samples in one row (3 per pixel for pixmaps)."""
        return self._width * self._format.samples_per_pixel

    def get_buffer(self) -> np.ndarray:
        """Return an independent copy of the sample buffer."""
        return self._buffer.copy()

    def get_dimensions(self) -> "tuple[int, int]":
        """Return (height, width)."""
        return self._height, self._width

    def get_rows(self) -> np.ndarray:
        """Return a copy of the buffer shaped (height, samples_per_row)."""
        return self._buffer.reshape(self._height, self.samples_per_row).copy()

    def copy(self) -> "AnymapImage":
        return AnymapImage(
            self._format,
            self._buffer.copy(),
            self.saturation,
            self._height,
            self._width,
        )

    def __len__(self) -> int:
        return int(self._buffer.size)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AnymapImage):
            return NotImplemented
        return (
            self._format is other._format
            and self.saturation == other.saturation
            and self.get_dimensions() == other.get_dimensions()
            and np.array_equal(self._buffer, other._buffer)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"AnymapImage(format={self._format.name}, width={self._width}, "
            f"height={self._height}, saturation={self.saturation})"
        )


def _to_samples(buffer, fmt: PnmFormat) -> np.ndarray:
    """Copy any byte-like or integer sequence into a flat int64 array."""
    if isinstance(buffer, (bytes, bytearray, memoryview)):
        return np.frombuffer(buffer, dtype=np.uint8).astype(np.int64)

    samples = np.asarray(buffer)
    if samples.size == 0:
        return np.zeros(0, dtype=np.int64)
    if samples.dtype == np.bool_:
        return samples.reshape(-1).astype(np.int64)
    if not np.issubdtype(samples.dtype, np.integer):
        raise InvalidSample(
            f"Could not create {fmt.name.lower()}: samples must be integers, "
            f"got dtype {samples.dtype}"
        )
    return samples.reshape(-1).astype(np.int64)


def _check_dimensions(
    samples: np.ndarray, fmt: PnmFormat, height: int, width: int
) -> None:
    if height < 0 or width < 0:
        raise DimensionMismatch(
            f"Could not create {fmt.name.lower()}: negative dimensions "
            f"({width}x{height})"
        )
    expected = height * width * fmt.samples_per_pixel
    if samples.size != expected:
        raise DimensionMismatch(
            f"Could not create {fmt.name.lower()}: buffer does not fit given "
            f"dimensions (buffer length: {samples.size}) != "
            f"(expected [h*w*{fmt.samples_per_pixel}]: {expected})"
        )


def _check_range(samples: np.ndarray, fmt: PnmFormat, upper: int) -> None:
    if samples.size and (samples.min() < 0 or samples.max() > upper):
        raise InvalidSample(
            f"Could not create {fmt.name.lower()}: samples must lie in 0..{upper}"
        )


def _check_saturation(saturation: int, fmt: PnmFormat) -> None:
    if not 0 <= saturation <= MAX_SATURATION:
        raise SaturationOutOfRange(
            f"Could not create {fmt.name.lower()}: saturation {saturation} "
            f"outside 0..{MAX_SATURATION}"
        )


def make_bitmap(buffer, height: int, width: int) -> AnymapImage:
    """Build a PBM image.

    Args:
        buffer: One sample per pixel, each 0 (white) or 1 (black)
        height: Rows in the image
        width: Pixels per row

    Raises:
        DimensionMismatch: if len(buffer) != height * width
        InvalidSample: if any sample is not 0 or 1
    """
    fmt = PnmFormat.BITMAP
    samples = _to_samples(buffer, fmt)
    _check_dimensions(samples, fmt, height, width)
    _check_range(samples, fmt, 1)
    return AnymapImage(fmt, samples.astype(np.uint8), 0, height, width)


def make_greymap(buffer, saturation: int, height: int, width: int) -> AnymapImage:
    """Build a PGM image.

    Raises:
        DimensionMismatch: if len(buffer) != height * width
        SaturationOutOfRange: if saturation is not in 0..255
    """
    fmt = PnmFormat.GREYMAP
    samples = _to_samples(buffer, fmt)
    _check_dimensions(samples, fmt, height, width)
    _check_saturation(saturation, fmt)
    _check_range(samples, fmt, MAX_SATURATION)
    return AnymapImage(fmt, samples.astype(np.uint8), saturation, height, width)


def make_pixmap(buffer, saturation: int, height: int, width: int) -> AnymapImage:
    """Build a PPM image from RGB-interleaved samples.

    Raises:
        DimensionMismatch: if len(buffer) != 3 * height * width
        SaturationOutOfRange: if saturation is not in 0..255
    """
    fmt = PnmFormat.PIXMAP
    samples = _to_samples(buffer, fmt)
    _check_dimensions(samples, fmt, height, width)
    _check_saturation(saturation, fmt)
    _check_range(samples, fmt, MAX_SATURATION)
    return AnymapImage(fmt, samples.astype(np.uint8), saturation, height, width)


def make_image(
    fmt: PnmFormat, buffer, saturation: int, height: int, width: int
) -> AnymapImage:
    """Dispatch to the validating constructor for ``fmt``.

    The saturation argument is ignored for bitmaps.
    """
    if fmt is PnmFormat.BITMAP:
        return make_bitmap(buffer, height, width)
    if fmt is PnmFormat.GREYMAP:
        return make_greymap(buffer, saturation, height, width)
    return make_pixmap(buffer, saturation, height, width)
