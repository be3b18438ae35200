"""Config-aware front end for reading, writing and transforming anymaps."""

import logging
from pathlib import Path

from PIL import Image

from .ascii import read_ascii, write_ascii
from .binary import read_binary, write_binary
from .conversion import from_pil, to_pil
from .errors import UnknownMagicNumber, UnreadableSource
from .manipulation import apply_filter, greyscale, invert
from .models import AnymapImage, CodecConfig, PnmFormat

logger = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"
_LEADING_WHITESPACE = b" \t\n\r\f"
_SNIFF_CHUNK = 512


class AnymapCodec:
    """Reads, writes and transforms PNM images using one CodecConfig."""

    def __init__(self, config: CodecConfig | None = None):
        self.config = config or CodecConfig()

    def detect(self, file_path: str | Path) -> "tuple[PnmFormat, bool]":
        """Identify a file from its magic number.

        A UTF-8 byte order mark and leading ASCII whitespace are skipped, as
        the ASCII reader skips them too.

        Returns:
            Tuple of (format, is_binary)

        Raises:
            UnreadableSource: If the file cannot be opened
            UnknownMagicNumber: If the file does not start with P1-P6
        """
        try:
            with open(file_path, "rb") as f:
                magic = _read_magic(f)
        except OSError as e:
            raise UnreadableSource(f"Could not read {file_path}: {e}") from e

        found = PnmFormat.from_magic(magic)
        if found is None:
            raise UnknownMagicNumber(
                f"{file_path} does not appear to be a netpbm file - "
                f"magic number {magic!r} not valid"
            )
        return found

    def read(self, file_path: str | Path) -> AnymapImage:
        """Read an ASCII or binary anymap, chosen by its magic number."""
        fmt, is_binary = self.detect(file_path)
        if is_binary:
            image = read_binary(file_path)
        else:
            image = read_ascii(
                file_path,
                encoding=self.config.text_encoding,
                skip_non_numeric=self.config.ascii_skip_non_numeric_header,
            )
        logger.debug(
            "Loaded %s %s image %dx%d from %s",
            "binary" if is_binary else "ASCII",
            fmt.name,
            image.width,
            image.height,
            file_path,
        )
        return image

    def write(
        self,
        image: AnymapImage,
        file_path: str | Path,
        binary: bool | None = None,
    ) -> None:
        """Write an image as binary or ASCII.

        Args:
            image: Image to write
            file_path: Destination path
            binary: Encoding to use, config.binary_output if None
        """
        binary = self.config.binary_output if binary is None else binary
        if binary:
            write_binary(image, file_path)
        else:
            write_ascii(image, file_path, encoding=self.config.text_encoding)

    def convert(
        self,
        source: str | Path,
        destination: str | Path,
        binary: bool | None = None,
    ) -> AnymapImage:
        """Read ``source`` and write it back out to ``destination``.

        Returns:
            The image that was written
        """
        image = self.read(source)
        self.write(image, destination, binary=binary)
        return image

    @staticmethod
    def suffix_for(image: AnymapImage) -> str:
        """Conventional file suffix: .pbm, .pgm or .ppm."""
        return image.format.suffix

    def invert(self, image: AnymapImage) -> None:
        invert(image)

    def apply_filter(self, image: AnymapImage, filter_image: AnymapImage) -> None:
        apply_filter(image, filter_image)

    def greyscale(self, image: AnymapImage) -> None:
        greyscale(image, include_last_pixel=self.config.greyscale_include_last_pixel)

    def to_pil(self, image: AnymapImage) -> Image.Image:
        return to_pil(image)

    def from_pil(self, pil_image: Image.Image) -> AnymapImage:
        return from_pil(pil_image, saturation=self.config.default_saturation)


def _read_magic(f) -> bytes:
    """Return the first two bytes after any BOM and leading whitespace."""
    prefix = b""
    stripped = b""
    while len(stripped) < 2:
        chunk = f.read(_SNIFF_CHUNK)
        if not chunk:
            break
        prefix += chunk
        stripped = prefix.removeprefix(_UTF8_BOM).lstrip(_LEADING_WHITESPACE)
    return stripped[:2]
