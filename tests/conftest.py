"""Pytest configuration and fixtures."""

import numpy as np
import pytest

from pnmkit import make_bitmap, make_greymap, make_pixmap


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def checker_bitmap():
    """3x4 bitmap with alternating black and white pixels."""
    buffer = [(x + y) % 2 for y in range(3) for x in range(4)]
    return make_bitmap(buffer, 3, 4)


@pytest.fixture
def grey_greymap():
    """2x3 greymap with distinct samples."""
    return make_greymap([0, 50, 100, 150, 200, 255], 255, 2, 3)


@pytest.fixture
def red_pixmap():
    """2x2 pixmap, every pixel (225, 0, 0)."""
    return make_pixmap([225, 0, 0] * 4, 255, 2, 2)


@pytest.fixture
def random_image(rng):
    """Factory for random images of a given kind, used by round-trip tests."""

    def build(kind: str, height: int, width: int):
        if kind == "bitmap":
            return make_bitmap(rng.integers(0, 2, height * width), height, width)
        if kind == "greymap":
            return make_greymap(rng.integers(0, 256, height * width), 255, height, width)
        return make_pixmap(rng.integers(0, 256, 3 * height * width), 255, height, width)

    return build
