"""
Variable-width LSB steganography for RGB images.

Modules:
- chunker: splits secret bytes into 1..8 bit chunks and joins them back.
- lsb: Embedder/Extractor over a flat pixel buffer, zero-padding framing.
- files: path based encode/decode passes and I/O error mapping.
- analysis: fidelity and capacity statistics.
- viz: plotting helpers.
- cli: command-line front end.
"""
from .chunker import BitChunkSpec
from .errors import (
    CapacityError,
    ConfigurationError,
    ImageIOError,
    ImageReadError,
    ImageWriteError,
    InvalidBitWidth,
    SecretReadError,
    SecretTooLarge,
    SecretWriteError,
    StegoError,
    StegoIOError,
)
from .files import decode_file, encode_file
from .lsb import Embedder, Extractor, LSBConfig, embed_lsb, extract_lsb

__version__ = "0.1.0"
