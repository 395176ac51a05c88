"""
Image loader: file to RawImage.

Checks the size limits, reads the whole file into memory and works out
whether a 512-byte copier header sits in front of the ROM data:

    length & 0x7FFF == 0x000  ->  no copier header
    length & 0x7FFF == 0x200  ->  copier header, ROM data starts at 0x200
    anything else             ->  SizeError
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .config import (
    BANK_REMAINDER_MASK, COPIER_HEADER_SIZE, MAX_IMAGE_SIZE, MIN_IMAGE_SIZE,
    VALID_REMAINDERS,
)
from .errors import SizeError

__all__ = ['RawImage', 'copier_header_offset', 'validate_size', 'load_image']

log = logging.getLogger(__name__)


def validate_size(length: int) -> None:
    """Raise SizeError unless MIN_IMAGE_SIZE <= length <= MAX_IMAGE_SIZE."""
    if length < MIN_IMAGE_SIZE:
        raise SizeError(length, f"smaller than minimum {MIN_IMAGE_SIZE:#x}")
    if length > MAX_IMAGE_SIZE:
        raise SizeError(length, f"larger than maximum {MAX_IMAGE_SIZE:#x}")


def copier_header_offset(length: int) -> int:
    """Return 0 or 0x200 from the low 15 bits of the image length."""
    remainder = length & BANK_REMAINDER_MASK
    if remainder not in VALID_REMAINDERS:
        raise SizeError(length, f"remainder {remainder:#x} is neither 0 nor {COPIER_HEADER_SIZE:#x}")
    return remainder


@dataclass(frozen=True)
class RawImage:
    """Immutable cartridge image as read from disk."""
    data: bytes
    copier_offset: int = 0
    source: Optional[Path] = None

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, memoryview],
                   source: Optional[Union[str, Path]] = None) -> RawImage:
        data = bytes(data)
        length = len(data)
        validate_size(length)
        offset = copier_header_offset(length)
        if offset:
            log.debug("Copier header detected (%d bytes)", offset)
        return cls(data=data, copier_offset=offset,
                   source=Path(source) if source is not None else None)

    @property
    def length(self) -> int:
        return len(self.data)

    @property
    def has_copier_header(self) -> bool:
        return self.copier_offset != 0

    @property
    def payload(self) -> bytes:
        """ROM data with the copier header stripped."""
        return self.data[self.copier_offset:]

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        src = f", source={str(self.source)!r}" if self.source else ""
        return f"RawImage(length=0x{self.length:X}, copier_offset=0x{self.copier_offset:X}{src})"


def load_image(path: Union[str, Path]) -> RawImage:
    """Read a cartridge file into a RawImage.

    Raises:
        OSError: the file cannot be opened or read.
        SizeError: the length is out of range or has a bad remainder.
    """
    path = Path(path)
    log.info("Opening: %s", path)
    # stat() reports 0 for pipes and other special files; those are checked after the read
    reported = path.stat().st_size
    if reported:
        validate_size(reported)
    data = path.read_bytes()
    log.info("Size: %d", len(data))
    return RawImage.from_bytes(data, source=path)
