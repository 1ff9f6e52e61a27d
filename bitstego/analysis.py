from __future__ import annotations

import numpy as np
from PIL import Image
from typing import Dict, List
from .chunker import BitChunkSpec
from .lsb import ImageLike, _as_array


def low_bit_plane(img: ImageLike, bits: int = 1) -> np.ndarray:
    # mean of the low-bit values over the colour channels, scaled to [0, 1]
    spec = BitChunkSpec(bits)
    arr = _as_array(img)
    plane = (arr & spec.mask).astype(np.float64) / spec.mask
    if plane.ndim == 3:
        plane = plane.mean(axis=2)
    return plane


def hist_256(img: ImageLike) -> Dict[str, np.ndarray]:
    arr = _as_array(img)
    if arr.ndim == 2:
        arr = arr[..., None]
    out: Dict[str, np.ndarray] = {}
    for c in range(arr.shape[-1]):
        h, _ = np.histogram(arr[..., c].reshape(-1), bins=256, range=(0, 256))
        out[f"ch{c}"] = h
    return out


def psnr(img1: ImageLike, img2: ImageLike) -> float:
    a = _as_array(img1).astype(np.float64)
    b = _as_array(img2).astype(np.float64)
    mse = np.mean((a - b) ** 2)
    if mse == 0:
        return 99.0
    return float(20 * np.log10(255.0 / np.sqrt(mse)))


def changed_fraction(img1: ImageLike, img2: ImageLike) -> float:
    a = _as_array(img1)
    b = _as_array(img2)
    if a.shape != b.shape:
        raise ValueError(f"shape mismatch: {a.shape} vs {b.shape}")
    return float(np.count_nonzero(a != b)) / max(1, a.size)


def capacity_report(img: ImageLike) -> List[Dict[str, int]]:
    """Secret capacity of ``img`` for every chunk width."""
    if isinstance(img, Image.Image):
        w, h = img.size
        size = w * h * 3
    else:
        size = np.asarray(img).size
    rows = []
    for bits in range(1, 9):
        spec = BitChunkSpec(bits)
        rows.append({
            "bits": bits,
            "chunks_per_byte": spec.chunks_per_byte,
            "capacity_bytes": spec.capacity_bytes(size),
        })
    return rows
