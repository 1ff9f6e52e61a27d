from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Tuple, Union

import numpy as np
from PIL import Image

from .chunker import BitChunkSpec
from .errors import SecretTooLarge

logger = logging.getLogger(__name__)

ImageLike = Union[Image.Image, np.ndarray]


@dataclass
class LSBConfig:
    bits: int = 2  # low bits replaced per image byte, 1..8

    def spec(self) -> BitChunkSpec:
        return BitChunkSpec(self.bits)


def _img_to_array(img: Image.Image) -> np.ndarray:
    if img.mode != "RGB":
        img = img.convert("RGB")
    return np.array(img, dtype=np.uint8)


def _array_to_img(arr: np.ndarray) -> Image.Image:
    return Image.fromarray(arr.astype(np.uint8))


def _as_array(src: ImageLike) -> np.ndarray:
    if isinstance(src, Image.Image):
        return _img_to_array(src)
    arr = np.asarray(src)
    if arr.dtype != np.uint8:
        raise ValueError(f"expected a uint8 pixel buffer, got {arr.dtype}")
    return arr.copy()


def _kl_divergence(p: np.ndarray, q: np.ndarray, eps: float = 1e-9) -> float:
    p = p.astype(np.float64); q = q.astype(np.float64)
    p = p / (p.sum() + eps)
    q = q / (q.sum() + eps)
    m = (p > 0)
    return float(np.sum(p[m] * (np.log(p[m] + eps) - np.log(q[m] + eps))))


class Embedder:
    """Writes a secret into the low bits of a cover image.

    The secret is expanded into chunks and right-aligned against the end of
    the flat pixel buffer; every image byte before it receives a zero chunk.
    """

    def __init__(self, cover: ImageLike, secret: bytes, spec: BitChunkSpec):
        self.spec = spec
        self._arr = _as_array(cover)
        self._secret = bytes(secret)

        image_size = self._arr.size
        self.secret_bit_capacity = len(self._secret) * spec.chunks_per_byte
        if image_size < self.secret_bit_capacity:
            raise SecretTooLarge(self.secret_bit_capacity, image_size)
        self.zero_padding_count = image_size - self.secret_bit_capacity

    def chunk_stream(self) -> np.ndarray:
        """Padding chunks followed by the secret's chunks; one per image byte."""
        padding = np.zeros(self.zero_padding_count, dtype=np.uint8)
        return np.concatenate([padding, self.spec.decompose_bytes(self._secret)])

    def embed(self) -> np.ndarray:
        flat = self._arr.reshape(-1)
        keep = np.uint8(0xFF ^ self.spec.mask)
        stego = (flat & keep) | self.chunk_stream()
        logger.debug(
            "embedded %d secret bytes at %d bits (%d padding chunks)",
            len(self._secret), self.spec.bits, self.zero_padding_count,
        )
        return stego.reshape(self._arr.shape)

    def embed_image(self) -> Image.Image:
        return _array_to_img(self.embed())


class Extractor:
    """Recovers the bytes hidden by :class:`Embedder`.

    Data is assumed to start at the first nonzero chunk. There is no length
    field, so everything from that point to the end of the image is returned.
    """

    def __init__(self, stego: ImageLike, spec: BitChunkSpec):
        self.spec = spec
        self._arr = _as_array(stego)
        self.start_index = self._arr.size

    def chunk_values(self) -> np.ndarray:
        return self._arr.reshape(-1) & np.uint8(self.spec.mask)

    def extract(self) -> bytes:
        values = self.chunk_values()
        n = values.size
        per_byte = self.spec.chunks_per_byte

        nonzero = np.flatnonzero(values)
        start = int(nonzero[0]) if nonzero.size else n
        self.start_index = start
        if start == n:
            logger.warning("no nonzero chunk found at %d bits; nothing to extract", self.spec.bits)

        # align to the end of the buffer, not to the detected start
        offset = (n - start) % per_byte
        lead = per_byte - offset if offset else 0
        buf = np.concatenate([np.zeros(lead, dtype=np.uint8), values[start:]])

        data = self.spec.recompose_groups(buf).tobytes()
        logger.debug("data starts at %d, %d alignment chunks, %d bytes out", start, lead, len(data))
        return data


def embed_lsb(img: ImageLike, payload: bytes, cfg: LSBConfig | None = None) -> Tuple[Image.Image, Dict]:
    cfg = cfg or LSBConfig()
    embedder = Embedder(img, payload, cfg.spec())
    cover = embedder._arr
    stego = embedder.embed()

    before_hist, _ = np.histogram(cover, bins=256, range=(0, 256))
    after_hist, _ = np.histogram(stego, bins=256, range=(0, 256))
    info = {
        "bits": embedder.spec.bits,
        "chunks_per_byte": embedder.spec.chunks_per_byte,
        "capacity_chunks": int(cover.size),
        "used_chunks": embedder.secret_bit_capacity,
        "padding_chunks": embedder.zero_padding_count,
        "payload_len": len(payload),
        "hist_kl": _kl_divergence(before_hist, after_hist),
    }
    return _array_to_img(stego), info


def extract_lsb(img: ImageLike, cfg: LSBConfig | None = None) -> bytes:
    cfg = cfg or LSBConfig()
    return Extractor(img, cfg.spec()).extract()
