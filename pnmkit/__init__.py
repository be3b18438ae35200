"""Reading, writing and transforming Portable Anymap (PBM/PGM/PPM) images.

AIDEV-NOTE: This package is organized into modular components:
- models: PnmFormat tag, AnymapImage and its validating constructors
- header: header state machine shared by both readers
- binary / ascii: the two serializers
- manipulation: invert, additive filter, greyscale
- conversion: Pillow interop
- codec: AnymapCodec, a config-aware front end
"""

from .ascii import decode_ascii, encode_ascii, read_ascii, write_ascii
from .binary import decode_binary, encode_binary, read_binary, write_binary
from .codec import AnymapCodec
from .config_manager import ConfigManager
from .conversion import from_pil, to_pil
from .errors import (
    DimensionMismatch,
    FilterTooLarge,
    FormatMismatch,
    InvalidSample,
    MalformedHeader,
    MalformedPixelData,
    PnmError,
    SaturationOutOfRange,
    UnknownMagicNumber,
    UnreadableSource,
    UnsupportedFormat,
    WriteError,
)
from .manipulation import apply_filter, greyscale, invert
from .models import (
    AnymapImage,
    CodecConfig,
    PnmFormat,
    make_bitmap,
    make_greymap,
    make_image,
    make_pixmap,
)

__all__ = [
    "AnymapCodec",
    "AnymapImage",
    "CodecConfig",
    "ConfigManager",
    "PnmFormat",
    "make_bitmap",
    "make_greymap",
    "make_image",
    "make_pixmap",
    "encode_binary",
    "decode_binary",
    "write_binary",
    "read_binary",
    "encode_ascii",
    "decode_ascii",
    "write_ascii",
    "read_ascii",
    "invert",
    "apply_filter",
    "greyscale",
    "to_pil",
    "from_pil",
    "PnmError",
    "DimensionMismatch",
    "InvalidSample",
    "SaturationOutOfRange",
    "UnknownMagicNumber",
    "MalformedHeader",
    "MalformedPixelData",
    "UnreadableSource",
    "WriteError",
    "FilterTooLarge",
    "FormatMismatch",
    "UnsupportedFormat",
]
