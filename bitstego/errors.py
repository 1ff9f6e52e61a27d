from __future__ import annotations

from typing import Optional


class StegoError(Exception):
    """Base class for every failure raised by bitstego."""


class ConfigurationError(StegoError):
    pass


class InvalidBitWidth(ConfigurationError):
    def __init__(self, bits: object):
        super().__init__(f"Only 1 to 8 LSB bits are allowed, got {bits!r}")
        self.bits = bits


class CapacityError(StegoError):
    pass


class SecretTooLarge(CapacityError):
    def __init__(self, required: int, available: int):
        super().__init__(
            f"Secret is too large to fit in image: need {required} image bytes, have {available}"
        )
        self.required = required
        self.available = available


class StegoIOError(StegoError):
    def __init__(self, message: str, path: Optional[str] = None):
        if path is not None:
            message = f"{message}: {path}"
        super().__init__(message)
        self.path = path


class SecretReadError(StegoIOError):
    pass


class SecretWriteError(StegoIOError):
    pass


class ImageIOError(StegoIOError):
    pass


class ImageReadError(ImageIOError):
    pass


class ImageWriteError(ImageIOError):
    pass
