import os
import sys

import numpy as np
import pytest
from PIL import Image

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def make_cover(rng):
    """Factory for random RGB covers of a given size."""
    def _make(width=12, height=7):
        arr = rng.integers(0, 256, size=(height, width, 3), dtype=np.uint8)
        return Image.fromarray(arr)
    return _make


@pytest.fixture
def cover_path(tmp_path, make_cover):
    path = tmp_path / "cover.png"
    make_cover(16, 9).save(path)
    return path


@pytest.fixture
def secret_path(tmp_path):
    path = tmp_path / "secret.bin"
    path.write_bytes(b"Top secret \x00\x01\x02\xff payload")
    return path
