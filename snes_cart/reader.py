"""
Bounds-checked byte extraction shared by the header detector and the
vector resolver.

All multi-byte values on the SNES are little-endian. Every read checks the
window against the buffer length first and raises OutOfBounds instead of
returning a short slice.
"""

from __future__ import annotations
import struct
from typing import Union

from .errors import OutOfBounds

__all__ = ['as_buffer', 'check_bounds', 'read_u8', 'read_u16le', 'read_bytes', 'ByteCursor']

Buffer = Union[bytes, bytearray, memoryview]

_U16LE = struct.Struct('<H')


def as_buffer(image) -> Buffer:
    """Return the byte buffer behind a RawImage, or the object itself if it is already bytes-like."""
    return getattr(image, 'data', image)


def check_bounds(buf: Buffer, offset: int, width: int) -> None:
    if offset < 0 or offset + width > len(buf):
        raise OutOfBounds(offset, width, len(buf))


def read_u8(buf: Buffer, offset: int) -> int:
    check_bounds(buf, offset, 1)
    return buf[offset]


def read_u16le(buf: Buffer, offset: int) -> int:
    """Read a 16-bit little-endian word."""
    check_bounds(buf, offset, 2)
    return _U16LE.unpack_from(buf, offset)[0]


def read_bytes(buf: Buffer, offset: int, width: int) -> bytes:
    check_bounds(buf, offset, width)
    return bytes(buf[offset:offset + width])


class ByteCursor:
    """Forward-only reader over a fixed-layout record.

    Each call consumes exactly the width it reads:

        cur = ByteCursor(data, 0x7FC0)
        title = cur.take(21)
        mode = cur.u8()
    """

    def __init__(self, buf: Buffer, offset: int = 0):
        self._buf = buf
        self._pos = offset

    @property
    def position(self) -> int:
        return self._pos

    def take(self, width: int) -> bytes:
        value = read_bytes(self._buf, self._pos, width)
        self._pos += width
        return value

    def u8(self) -> int:
        value = read_u8(self._buf, self._pos)
        self._pos += 1
        return value

    def u16le(self) -> int:
        value = read_u16le(self._buf, self._pos)
        self._pos += 2
        return value

    def skip(self, width: int) -> None:
        check_bounds(self._buf, self._pos, width)
        self._pos += width

    def __repr__(self) -> str:
        return f"ByteCursor(pos=0x{self._pos:X}, len=0x{len(self._buf):X})"
