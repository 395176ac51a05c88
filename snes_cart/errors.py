"""
Error taxonomy for cartridge loading.

Every failure is terminal for the current load attempt: no retry, no
fallback offset, no partially built cartridge.
"""

from __future__ import annotations
from typing import Sequence

__all__ = [
    'CartridgeError', 'SizeError', 'FormatError', 'NoValidHeader',
    'OutOfBounds', 'UnsupportedInterrupt',
]


class CartridgeError(Exception):
    """Base class for every cartridge load failure."""


class SizeError(CartridgeError):
    """Raised when the image length is outside the accepted bounds."""
    def __init__(self, length: int, reason: str):
        self.length = length
        self.reason = reason
        super().__init__(f"Bad image size {length:#x}: {reason}")


class FormatError(CartridgeError):
    """Raised when the image content is malformed."""


class NoValidHeader(FormatError):
    """Neither candidate offset held a structurally valid, checksum-valid header."""
    def __init__(self, offsets: Sequence[int]):
        self.offsets = tuple(offsets)
        probed = ", ".join(f"{o:#06x}" for o in self.offsets)
        super().__init__(
            f"Unable to determine ROM format, cartridge may be corrupt "
            f"(no valid header at {probed})")


class OutOfBounds(CartridgeError):
    """Raised when a fixed-offset read would leave the buffer."""
    def __init__(self, offset: int, width: int, length: int):
        self.offset = offset
        self.width = width
        self.length = length
        super().__init__(
            f"Read of {width} byte(s) at {offset:#x} exceeds image length {length:#x}")


class UnsupportedInterrupt(CartridgeError):
    """Raised when a vector table has no entry for the requested interrupt."""
    def __init__(self, kind, mode):
        self.kind = kind
        self.mode = mode
        super().__init__(f"{mode.label} mode has no {kind.name} vector")
