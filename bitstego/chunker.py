"""
Variable-width bit chunking.

A secret byte is split into ``chunks_per_byte`` chunks of ``bits`` bits each,
most-significant group first, so that each chunk fits into the low bits of a
single image byte. When ``bits`` does not divide 8 the final chunk of every
byte carries fewer meaningful bits and is emitted unshifted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List

import numpy as np

from .errors import InvalidBitWidth


@dataclass(frozen=True)
class BitChunkSpec:
    bits: int
    mask: int = field(init=False)
    chunks_per_byte: int = field(init=False)
    padded: bool = field(init=False)

    def __post_init__(self) -> None:
        bits = self.bits
        if isinstance(bits, bool) or not isinstance(bits, int) or bits < 1 or bits > 8:
            raise InvalidBitWidth(bits)
        chunks = -(-8 // bits)
        # frozen dataclass: derived fields go through object.__setattr__
        object.__setattr__(self, "mask", (1 << bits) - 1)
        object.__setattr__(self, "chunks_per_byte", chunks)
        object.__setattr__(self, "padded", chunks * bits > 8)

    def decompose(self, byte: int) -> Iterator[int]:
        """Yield the chunks of ``byte``, most-significant group first."""
        if not 0 <= byte <= 0xFF:
            raise ValueError(f"byte out of range: {byte}")
        for step in range(1, self.chunks_per_byte + 1):
            if self.padded and step == self.chunks_per_byte:
                shift = self.bits * step - 8
                yield byte & (self.mask >> shift)
            else:
                shift = 8 - self.bits * step
                yield (byte >> shift) & self.mask

    def recompose(self, chunks: Iterable[int]) -> int:
        """Join chunks produced by :meth:`decompose` back into one byte.

        Short or malformed input is not rejected; the result is whatever the
        shift schedule accumulates, truncated to 8 bits.
        """
        byte = 0
        shift = 8
        for chunk in chunks:
            shift = max(0, shift - self.bits)
            byte |= int(chunk) << shift
        return byte & 0xFF

    def shifts(self) -> List[int]:
        """Left shift applied to each chunk position by :meth:`recompose`."""
        out = []
        shift = 8
        for _ in range(self.chunks_per_byte):
            shift = max(0, shift - self.bits)
            out.append(shift)
        return out

    def decompose_table(self) -> np.ndarray:
        return _decompose_table(self)

    def decompose_bytes(self, data: bytes) -> np.ndarray:
        """Flattened chunk stream for every byte of ``data``, in order."""
        a = np.frombuffer(bytes(data), dtype=np.uint8)
        return self.decompose_table()[a].reshape(-1)

    def recompose_groups(self, groups: np.ndarray) -> np.ndarray:
        """Vectorised :meth:`recompose` over an ``(n, chunks_per_byte)`` array."""
        groups = np.asarray(groups, dtype=np.uint16).reshape(-1, self.chunks_per_byte)
        shifted = groups << np.array(self.shifts(), dtype=np.uint16)
        joined = np.bitwise_or.reduce(shifted, axis=1) if shifted.size else np.zeros(0, np.uint16)
        return (joined & 0xFF).astype(np.uint8)

    def capacity_bytes(self, byte_count: int) -> int:
        """Largest secret, in bytes, that fits into ``byte_count`` image bytes."""
        return byte_count // self.chunks_per_byte


_TABLES = {}


def _decompose_table(spec: BitChunkSpec) -> np.ndarray:
    table = _TABLES.get(spec.bits)
    if table is None:
        table = np.array([list(spec.decompose(b)) for b in range(256)], dtype=np.uint8)
        table.setflags(write=False)
        _TABLES[spec.bits] = table
    return table
