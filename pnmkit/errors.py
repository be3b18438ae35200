"""Exception hierarchy for the PNM codec.

Construction, parse and transform errors also derive from ValueError; I/O
failures also derive from OSError.
"""


class PnmError(Exception):
    """Base class for every error raised by pnmkit."""


# --- Construction ---


class DimensionMismatch(PnmError, ValueError):
    """Buffer length does not fit the given width and height."""


class InvalidSample(PnmError, ValueError):
    """A sample is outside the range allowed by the format."""


class SaturationOutOfRange(PnmError, ValueError):
    """Saturation (maxval) is not in 0..255."""


# --- Deserialization ---


class UnknownMagicNumber(PnmError, ValueError):
    """Leading magic number is not one the reader accepts."""


class MalformedHeader(PnmError, ValueError):
    """Header is truncated or holds a non-numeric value."""


class MalformedPixelData(PnmError, ValueError):
    """An ASCII sample token is not a byte value."""


class UnreadableSource(PnmError, OSError):
    """Source file could not be read (or decoded as text)."""


# --- Serialization ---


class WriteError(PnmError, OSError):
    """Destination could not be opened or written."""


# --- Transforms ---


class FilterTooLarge(PnmError, ValueError):
    """Filter buffer is longer than the target buffer."""


class FormatMismatch(PnmError, ValueError):
    """Filter and target images have different formats."""


class UnsupportedFormat(PnmError, ValueError):
    """Operation is not defined for this format."""
