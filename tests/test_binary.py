"""Tests for the binary (P4/P5/P6) serializer."""

import sys

import numpy as np
import pytest
from PIL import Image

from pnmkit import (
    DimensionMismatch,
    MalformedHeader,
    PnmFormat,
    SaturationOutOfRange,
    UnknownMagicNumber,
    UnreadableSource,
    WriteError,
    decode_binary,
    encode_binary,
    make_bitmap,
    make_greymap,
    make_pixmap,
    read_binary,
    write_binary,
)
from pnmkit.binary import pack_bits, unpack_bits


def test_bitmap_narrower_than_a_byte_is_padded():
    image = make_bitmap([1] * 9, 3, 3)

    assert encode_binary(image) == b"P4\n3 3\n\xe0\xe0\xe0"


def test_bitmap_row_spills_into_second_byte():
    image = make_bitmap([1, 0, 1, 0, 1, 0, 1, 0, 1, 1], 1, 10)

    assert encode_binary(image) == b"P4\n10 1\n\xaa\xc0"


def test_bitmap_rows_start_on_fresh_bytes():
    # two rows of 4 pixels must not share a byte
    image = make_bitmap([1, 1, 1, 1, 0, 0, 0, 1], 2, 4)

    assert encode_binary(image) == b"P4\n4 2\n\xf0\x10"


def test_bitmap_width_multiple_of_eight():
    image = make_bitmap([1, 0] * 8, 1, 16)

    assert encode_binary(image) == b"P4\n16 1\n\xaa\xaa"


def test_greymap_written_verbatim():
    image = make_greymap([1, 2, 3], 255, 1, 3)

    assert encode_binary(image) == b"P5\n3 1\n255\n\x01\x02\x03"


def test_pixmap_written_verbatim(red_pixmap):
    data = encode_binary(red_pixmap)

    assert data.startswith(b"P6\n2 2\n255\n")
    assert data[len(b"P6\n2 2\n255\n"):] == bytes([225, 0, 0] * 4)


def test_pack_and_unpack_are_inverse(rng):
    bits = rng.integers(0, 2, 5 * 13).astype(np.uint8)

    packed = pack_bits(bits, 5, 13)

    assert len(packed) == 5 * 2
    assert unpack_bits(packed, 5, 13).tolist() == bits.tolist()


def test_unpack_discards_padding_bits():
    # padding bits set to 1 must not leak into pixels
    assert unpack_bits(b"\xff", 1, 3).tolist() == [1, 1, 1]


@pytest.mark.parametrize("kind", ["bitmap", "greymap", "pixmap"])
@pytest.mark.parametrize("height,width", [(1, 1), (3, 7), (2, 8), (4, 9), (1, 17), (0, 5)])
def test_round_trip(tmp_path, random_image, kind, height, width):
    image = random_image(kind, height, width)
    path = tmp_path / f"image{image.format.suffix}"

    write_binary(image, path)

    assert read_binary(path) == image


def test_decode_header_with_runs_of_delimiters():
    data = b"P5  3\n\n1 255\n" + b"\n \r"

    image = decode_binary(data)

    assert image.get_dimensions() == (1, 3)
    # payload bytes that look like whitespace are not trimmed
    assert image.get_buffer().tolist() == [10, 32, 13]


def test_decode_keeps_saturation():
    image = decode_binary(b"P5\n2 1\n15\n\x03\x0f")

    assert image.format is PnmFormat.GREYMAP
    assert image.saturation == 15


@pytest.mark.parametrize("data", [b"", b"P", b"P7\n1 1\n255\n\x00", b"P2\n1 1\n255\n0"])
def test_decode_unknown_magic(data):
    with pytest.raises(UnknownMagicNumber):
        decode_binary(data)


@pytest.mark.parametrize(
    "data",
    [
        b"P5\n3 x\n255\n\x00\x00\x00",
        b"P5\n-3 1\n255\n\x00\x00\x00",
        b"P5\n3 1",
        b"P4\n8",
        b"P5x\n1 1\n255\n\x00",
    ],
)
def test_decode_malformed_header(data):
    with pytest.raises(MalformedHeader):
        decode_binary(data)


def test_decode_saturation_out_of_range():
    with pytest.raises(SaturationOutOfRange):
        decode_binary(b"P5\n1 1\n300\n\x00")


def test_decode_short_pixmap_payload():
    with pytest.raises(DimensionMismatch):
        decode_binary(b"P6\n2 1\n255\n\x00\x00\x00")


def test_decode_short_bitmap_payload():
    with pytest.raises(DimensionMismatch):
        decode_binary(b"P4\n9 2\n\xff\x80\xff")


def test_pillow_reads_packed_bitmap(tmp_path, random_image):
    image = random_image("bitmap", 5, 11)
    path = tmp_path / "image.pbm"

    write_binary(image, path)

    with Image.open(path) as pil_image:
        assert pil_image.mode == "1"
        assert pil_image.size == (11, 5)
        white = np.asarray(pil_image, dtype=bool)
    # PBM 1 is black, Pillow True is white
    assert np.array_equal(white, image.get_rows() == 0)


def test_pillow_reads_pixmap(tmp_path, random_image):
    image = random_image("pixmap", 3, 4)
    path = tmp_path / "image.ppm"

    write_binary(image, path)

    with Image.open(path) as pil_image:
        assert pil_image.mode == "RGB"
        pixels = np.asarray(pil_image)
    assert pixels.reshape(-1).tolist() == image.get_buffer().tolist()


def test_write_to_missing_directory(tmp_path, grey_greymap):
    with pytest.raises(WriteError) as info:
        write_binary(grey_greymap, tmp_path / "missing" / "out.pgm")

    assert isinstance(info.value, OSError)


def test_read_missing_file(tmp_path):
    with pytest.raises(UnreadableSource):
        read_binary(tmp_path / "missing.pgm")


@pytest.mark.skipif(
    not hasattr(sys, "get_int_max_str_digits"),
    reason="interpreter has no integer string conversion limit",
)
def test_decode_oversized_header_token():
    with pytest.raises(MalformedHeader):
        decode_binary(b"P5\n" + b"9" * 5000 + b" 1\n255\n\x00")


def test_decode_crlf_header():
    image = decode_binary(b"P5\r\n3 1\r\n255\n\x01\x02\x03")

    assert image.get_dimensions() == (1, 3)
    assert image.saturation == 255
    assert image.get_buffer().tolist() == [1, 2, 3]


def test_decode_crlf_header_keeps_payload_offset():
    # \r\n closing the last token: \r is part of the header, \n is the delimiter
    image = decode_binary(b"P4\r\n3 1\r\n\xe0")

    assert image.get_buffer().tolist() == [1, 1, 1]
