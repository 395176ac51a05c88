"""
Synthetic SNES image builder for the test suite.

Builds zero-filled images with a hand-placed header and vector table so
tests never need a real ROM dump.
"""

import struct

LOROM = 0x7FC0
HIROM = 0xFFC0


def header_bytes(title=b"TEST CART", mode=0x20, cart_type=0x02, rom_log=0x0A,
                 ram_log=0x03, licensee=0x33, reserved=0x00, version=0x01,
                 checksum=0x1234, inverse=None) -> bytes:
    """32-byte header. inverse defaults to the complement of checksum."""
    if inverse is None:
        inverse = checksum ^ 0xFFFF
    title = title[:21].ljust(21, b" ")
    return (title
            + bytes([mode, cart_type, rom_log, ram_log, licensee, reserved, version])
            + struct.pack("<HH", inverse, checksum))


def build_image(size=0x10000, copier=False, lorom=None, hirom=None) -> bytearray:
    """Image of `size` ROM bytes, plus a 0x200 copier header if requested.

    lorom / hirom: header bytes placed at 0x7FC0 / 0xFFC0 (+0x200).
    """
    pad = 0x200 if copier else 0
    data = bytearray(size + pad)
    if lorom is not None:
        data[LOROM + pad:LOROM + pad + len(lorom)] = lorom
    if hirom is not None:
        data[HIROM + pad:HIROM + pad + len(hirom)] = hirom
    return data


def put_word(data: bytearray, offset: int, value: int) -> None:
    struct.pack_into("<H", data, offset, value)
