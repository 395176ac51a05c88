"""
Cartridge header detection.

The mapping mode of an SNES image is not recorded anywhere explicit. The
32-byte header ("ROM registration data") lives at $FFC0 of bank 0 in CPU
address space, which is file offset 0x7FC0 on a LoROM board and 0xFFC0 on
a HiROM board. The detector parses a candidate at each offset and accepts
the first one that passes both checks:

  1. Structural: mode byte ($FFD5) has the form 001F MMMM.
  2. Checksum:   checksum ^ inverse_checksum == 0xFFFF.

Header layout (offsets relative to the header base, words little-endian):

  +00  21  title
  +15   1  mode byte (bit 4 = FastROM, low nibble = sub-mapping mode)
  +16   1  cartridge type
  +17   1  log2 ROM size in KB
  +18   1  log2 RAM size in KB
  +19   1  licensee
  +1A   1  (reserved)
  +1B   1  version
  +1C   2  inverse checksum
  +1E   2  checksum
"""

from __future__ import annotations
import enum
import logging
from dataclasses import dataclass
from typing import NamedTuple, Optional

from .config import (
    CHECKSUM_MASK, FAST_ROM_BIT, HEADER_SIZE, HIROM_HEADER_OFFSET,
    HIROM_VECTOR_BASE, LOROM_HEADER_OFFSET, LOROM_VECTOR_BASE, MODE_SIGNATURE,
    MODE_SIGNATURE_SHIFT, SIZE_UNIT, SUB_MAPPING_MASK, SUB_MAPPING_NAMES,
    TITLE_LENGTH,
)
from .errors import FormatError, NoValidHeader
from .reader import ByteCursor, as_buffer

__all__ = [
    'MappingMode', 'CartridgeType', 'CartridgeHeader', 'HeaderMatch',
    'size_from_log', 'parse_header', 'detect_header',
]

log = logging.getLogger(__name__)


class MappingMode(enum.Enum):
    """Cartridge memory-mapping convention.

    Only LOROM and HIROM are probed by detect_header(). The Ex variants are
    recognised as tags (see CartridgeHeader.declared_mapping) but carry no
    header or vector layout here.
    """
    LOROM = "LoROM"
    HIROM = "HiROM"
    EXLOROM = "ExLoROM"
    EXHIROM = "ExHiROM"

    @property
    def probed(self) -> bool:
        return self in (MappingMode.LOROM, MappingMode.HIROM)

    @property
    def header_offset(self) -> int:
        """File offset of the header, before the copier offset is added."""
        if self is MappingMode.LOROM:
            return LOROM_HEADER_OFFSET
        if self is MappingMode.HIROM:
            return HIROM_HEADER_OFFSET
        raise FormatError(f"{self.value} images are not probed for a header")

    @property
    def vector_base(self) -> int:
        """Base offset of the interrupt vector table."""
        if self is MappingMode.LOROM:
            return LOROM_VECTOR_BASE
        if self is MappingMode.HIROM:
            return HIROM_VECTOR_BASE
        raise FormatError(f"No vector table layout for {self.value} images")

    @classmethod
    def from_sub_mode(cls, sub_mode: int) -> Optional[MappingMode]:
        """Map the header's declared sub-mapping nibble to a tag, or None."""
        name = SUB_MAPPING_NAMES.get(sub_mode & SUB_MAPPING_MASK)
        return cls[name] if name else None


class CartridgeType(enum.IntEnum):
    """Known cartridge type codes ($FFD6)."""
    ROM = 0x00
    ROM_RAM = 0x01
    ROM_RAM_BATTERY = 0x02
    ROM_SA1 = 0x33
    ROM_SA1_RAM = 0x34
    ROM_SA1_RAM_BATTERY = 0x35


def size_from_log(log2_kb: int) -> int:
    """Size in bytes for a log2-KB size field: 0x400 << log2_kb.

    Python integers do not overflow, so every byte value 0..255 yields the
    exact shifted value (no saturation).
    """
    if log2_kb < 0:
        raise ValueError(f"size exponent must be non-negative, got {log2_kb}")
    return SIZE_UNIT << log2_kb


@dataclass(frozen=True)
class CartridgeHeader:
    """Decoded ROM registration data."""
    title: bytes
    mode_byte: int
    cartridge_type: int
    rom_size_log: int
    ram_size_log: int
    licensee: int
    reserved: int
    version: int
    inverse_checksum: int
    checksum: int
    offset: int = 0

    @property
    def fast_rom(self) -> bool:
        return bool(self.mode_byte & FAST_ROM_BIT)

    @property
    def sub_mapping_mode(self) -> int:
        return self.mode_byte & SUB_MAPPING_MASK

    @property
    def declared_mapping(self) -> Optional[MappingMode]:
        return MappingMode.from_sub_mode(self.sub_mapping_mode)

    @property
    def rom_size_bytes(self) -> int:
        return size_from_log(self.rom_size_log)

    @property
    def ram_size_bytes(self) -> int:
        return size_from_log(self.ram_size_log)

    @property
    def checksum_valid(self) -> bool:
        return (self.checksum ^ self.inverse_checksum) == CHECKSUM_MASK

    @property
    def title_text(self) -> str:
        """Title truncated at 21 bytes or the first NUL."""
        raw = self.title[:TITLE_LENGTH].split(b'\x00', 1)[0]
        return raw.decode('ascii', errors='replace').rstrip()

    @property
    def cartridge_type_name(self) -> str:
        try:
            return CartridgeType(self.cartridge_type).name
        except ValueError:
            return f"Unknown (0x{self.cartridge_type:02X})"


class HeaderMatch(NamedTuple):
    header: CartridgeHeader
    mapping: MappingMode


def _has_mode_signature(mode_byte: int) -> bool:
    return mode_byte >> MODE_SIGNATURE_SHIFT == MODE_SIGNATURE


def parse_header(image, offset: int) -> Optional[CartridgeHeader]:
    """Parse a header candidate at an absolute offset.

    Returns None when the candidate is rejected by the structural check or
    the checksum check. Raises OutOfBounds if the 32-byte window does not
    fit in the buffer.
    """
    cur = ByteCursor(as_buffer(image), offset)
    title = cur.take(TITLE_LENGTH)
    mode_byte = cur.u8()
    if not _has_mode_signature(mode_byte):
        log.debug("0x%05X: mode byte 0x%02X has no 001xxxxx signature", offset, mode_byte)
        return None

    header = CartridgeHeader(
        title=title,
        mode_byte=mode_byte,
        cartridge_type=cur.u8(),
        rom_size_log=cur.u8(),
        ram_size_log=cur.u8(),
        licensee=cur.u8(),
        reserved=cur.u8(),
        version=cur.u8(),
        inverse_checksum=cur.u16le(),
        checksum=cur.u16le(),
        offset=offset,
    )
    if not header.checksum_valid:
        log.debug("0x%05X: checksum 0x%04X / complement 0x%04X mismatch",
                  offset, header.checksum, header.inverse_checksum)
        return None
    return header


def detect_header(image, copier_offset: Optional[int] = None) -> HeaderMatch:
    """Probe the LoROM then the HiROM header location.

    Returns the first valid header with the mapping mode it implies.
    A candidate whose window runs past the end of the buffer is skipped.
    copier_offset defaults to the image's own copier offset (0 for plain bytes).

    Raises:
        NoValidHeader: neither candidate validated.
    """
    if copier_offset is None:
        copier_offset = getattr(image, 'copier_offset', 0)
    buf = as_buffer(image)
    probed = []
    for mapping in (MappingMode.LOROM, MappingMode.HIROM):
        offset = mapping.header_offset + copier_offset
        probed.append(offset)
        if offset + HEADER_SIZE > len(buf):
            log.debug("0x%05X: %s header window past end of image (0x%X), skipped",
                      offset, mapping.value, len(buf))
            continue
        header = parse_header(buf, offset)
        if header is not None:
            log.info("Detected %s header at 0x%05X", mapping.value, offset)
            return HeaderMatch(header, mapping)
    raise NoValidHeader(probed)
