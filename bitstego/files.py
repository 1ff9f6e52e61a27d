"""
File boundary of the codec: loading covers, reading secrets and writing
results. Every failure is mapped onto the I/O branch of the error hierarchy,
and outputs are rendered in memory first so a failed pass leaves no file.
"""
from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Union

from PIL import Image

from .chunker import BitChunkSpec
from .errors import ImageReadError, ImageWriteError, SecretReadError, SecretWriteError
from .lsb import Extractor, LSBConfig, embed_lsb

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

# formats that would destroy the embedded low bits on save
LOSSY_FORMATS = {"JPEG", "WEBP", "MPO"}


def load_image(path: PathLike) -> Image.Image:
    try:
        img = Image.open(path)
        img.load()
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise ImageReadError("Cannot decode image", str(path)) from exc
    return img


def _resolve_format(path: PathLike, fallback_format: Optional[str]) -> Optional[str]:
    ext = Path(path).suffix.lower()
    return Image.registered_extensions().get(ext) or fallback_format


def save_image(img: Image.Image, path: PathLike, fallback_format: Optional[str] = None) -> str:
    fmt = _resolve_format(path, fallback_format)
    if fmt is None:
        raise ImageWriteError("Cannot determine output image format", str(path))
    if fmt.upper() in LOSSY_FORMATS:
        logger.warning("saving stego image as %s is lossy; hidden data will not survive", fmt)

    buf = io.BytesIO()
    try:
        img.save(buf, format=fmt)
    except (OSError, ValueError, KeyError) as exc:
        raise ImageWriteError(f"Cannot encode image as {fmt}", str(path)) from exc
    try:
        Path(path).write_bytes(buf.getvalue())
    except OSError as exc:
        raise ImageWriteError("Cannot write image", str(path)) from exc
    return fmt


def read_secret(path: PathLike) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as exc:
        raise SecretReadError("Cannot read secret", str(path)) from exc


def write_secret(data: bytes, path: PathLike) -> None:
    try:
        Path(path).write_bytes(data)
    except OSError as exc:
        raise SecretWriteError("Cannot write extracted secret", str(path)) from exc


def encode_file(image_path: PathLike, secret_path: PathLike, output_path: PathLike, bits: int = 2) -> Dict:
    """Hide the contents of ``secret_path`` in ``image_path``, writing ``output_path``.

    Returns the embedding info produced by :func:`bitstego.lsb.embed_lsb`,
    extended with the output path and format.
    """
    spec = BitChunkSpec(bits)

    cover = load_image(image_path)
    secret = read_secret(secret_path)
    stego, info = embed_lsb(cover, secret, LSBConfig(bits=spec.bits))
    fmt = save_image(stego, output_path, cover.format)

    logger.info("hid %d bytes in %s -> %s (%s)", len(secret), image_path, output_path, fmt)
    info.update({"input": str(image_path), "output": str(output_path), "format": fmt})
    return info


def decode_file(image_path: PathLike, output_path: PathLike, bits: int = 2) -> int:
    """Extract the hidden stream of ``image_path`` into ``output_path``.

    Returns the number of bytes written.
    """
    spec = BitChunkSpec(bits)

    stego = load_image(image_path)
    data = Extractor(stego, spec).extract()
    write_secret(data, output_path)

    logger.info("recovered %d bytes from %s -> %s", len(data), image_path, output_path)
    return len(data)
