"""Header parsing shared by the ASCII and binary readers.

AIDEV-NOTE: The header is consumed by a small state machine:

    EXPECT_MAGIC -> EXPECT_DIMENSIONS -> EXPECT_SATURATION -> READ_PAYLOAD

EXPECT_SATURATION is skipped for bitmaps. Readers feed tokens until the
parser reports READ_PAYLOAD; everything after that point is pixel data.
The binary reader depends on the exact byte offset where the header ends,
so it must stop feeding as soon as the parser is done.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum

from .errors import MalformedHeader, UnknownMagicNumber
from .models import PnmFormat

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")

# Binary headers are delimited by runs of these bytes only
BINARY_DELIMITERS = b" \n"


class HeaderState(Enum):
    EXPECT_MAGIC = "expect_magic"
    EXPECT_DIMENSIONS = "expect_dimensions"
    EXPECT_SATURATION = "expect_saturation"
    READ_PAYLOAD = "read_payload"


@dataclass
class Header:
    """Parsed header fields."""

    format: PnmFormat
    binary: bool
    width: int
    height: int
    saturation: int = 0  # always 0 for bitmaps


class HeaderParser:
    """Token-driven header state machine.

    Args:
        binary: Accept binary magic numbers (P4-P6) instead of ASCII (P1-P3)
        skip_non_numeric: Ignore non-numeric tokens after the magic number
            instead of raising MalformedHeader
    """

    def __init__(self, binary: bool, skip_non_numeric: bool = False):
        self.binary = binary
        self.skip_non_numeric = skip_non_numeric
        self.state = HeaderState.EXPECT_MAGIC
        self.format: PnmFormat | None = None
        self._values: list[int] = []

    @property
    def done(self) -> bool:
        return self.state is HeaderState.READ_PAYLOAD

    def feed(self, token: str) -> None:
        """Advance the state machine by one header token."""
        if self.state is HeaderState.EXPECT_MAGIC:
            self._accept_magic(token)
        elif self.state in (
            HeaderState.EXPECT_DIMENSIONS,
            HeaderState.EXPECT_SATURATION,
        ):
            self._accept_value(token)
        else:
            raise RuntimeError("header already complete")

    def header(self) -> Header:
        """Return the parsed header.

        Raises:
            MalformedHeader: if the header is not complete
        """
        if not self.done or self.format is None:
            raise MalformedHeader(
                f"Header ended early while in state {self.state.value}"
            )
        width, height = self._values[0], self._values[1]
        saturation = self._values[2] if self.format.has_saturation else 0
        return Header(self.format, self.binary, width, height, saturation)

    def _accept_magic(self, token: str) -> None:
        found = PnmFormat.from_magic(token.encode("ascii", "replace"))
        if found is None or found[1] != self.binary:
            expected = "P4, P5 or P6" if self.binary else "P1, P2 or P3"
            raise UnknownMagicNumber(
                f"Magic number {token[:8]!r} not valid, expected {expected}"
            )
        self.format = found[0]
        self.state = HeaderState.EXPECT_DIMENSIONS

    def _accept_value(self, token: str) -> None:
        if not _DIGITS.fullmatch(token):
            if self.skip_non_numeric:
                logger.debug("Skipping non-numeric header token %r", token)
                return
            raise MalformedHeader(f"Header value {token[:16]!r} is not a number")

        try:
            value = int(token)
        except ValueError as e:
            raise MalformedHeader(
                f"Header value {token[:16]!r}... is too long to parse"
            ) from e
        self._values.append(value)
        if len(self._values) == 2:
            self.state = (
                HeaderState.EXPECT_SATURATION
                if self.format is not None and self.format.has_saturation
                else HeaderState.READ_PAYLOAD
            )
        elif len(self._values) == 3:
            self.state = HeaderState.READ_PAYLOAD


def parse_binary_header(data: bytes) -> "tuple[Header, int]":
    """Parse the header of a binary anymap.

    Args:
        data: Full file contents

    Returns:
        Tuple of (header, payload offset). The payload starts right after
        the single delimiter byte that ends the last header token.

    Raises:
        UnknownMagicNumber: if the first two bytes are not P4, P5 or P6
        MalformedHeader: if the header is truncated or not numeric
    """
    magic = data[:2]
    found = PnmFormat.from_magic(magic)
    if found is None or not found[1]:
        raise UnknownMagicNumber(
            f"Magic number {magic!r} not valid, expected P4, P5 or P6"
        )

    parser = HeaderParser(binary=True)
    pos = 0
    while not parser.done:
        token, pos = _next_binary_token(data, pos)
        # CRLF headers leave a trailing \r on the token
        token = token.strip()
        if parser.state is HeaderState.EXPECT_MAGIC and token != magic:
            raise MalformedHeader(f"Magic number token {token[:8]!r} is malformed")
        try:
            parser.feed(token.decode("ascii"))
        except UnicodeDecodeError as e:
            raise MalformedHeader(f"Header token {token[:8]!r} is not ASCII") from e

    header = parser.header()
    logger.debug(
        "Parsed %s header: %dx%d, saturation %d, payload at byte %d",
        header.format.name,
        header.width,
        header.height,
        header.saturation,
        pos + 1,
    )
    return header, pos + 1


def _next_binary_token(data: bytes, pos: int) -> "tuple[bytes, int]":
    """Return the next token and the index of the delimiter that ends it."""
    end = len(data)
    while pos < end and data[pos] in BINARY_DELIMITERS:
        pos += 1
    start = pos
    while pos < end and data[pos] not in BINARY_DELIMITERS:
        pos += 1
    if pos >= end:
        raise MalformedHeader("Header is truncated")
    return data[start:pos], pos


def parse_ascii_header(
    tokens: "list[str]", skip_non_numeric: bool = True
) -> "tuple[Header, int]":
    """Parse the header of an ASCII anymap from its whitespace tokens.

    Returns:
        Tuple of (header, index of the first pixel token)

    Raises:
        UnknownMagicNumber: if the first token is not P1, P2 or P3
        MalformedHeader: if tokens run out before the header is complete
    """
    if not tokens:
        raise UnknownMagicNumber("File is empty, no magic number found")

    parser = HeaderParser(binary=False, skip_non_numeric=skip_non_numeric)
    idx = 0
    while not parser.done and idx < len(tokens):
        parser.feed(tokens[idx])
        idx += 1

    return parser.header(), idx
