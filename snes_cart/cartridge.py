"""
Cartridge aggregate, built in one pass over a loaded image.

    RawImage ──> detect_header() ──> resolve_vectors() ──> Cartridge

The Cartridge is built once and never mutated. If any stage fails the
typed error propagates and no Cartridge is returned.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .header import CartridgeHeader, MappingMode, detect_header
from .loader import RawImage, load_image
from .vectors import InterruptKind, InterruptVectorTable, VectorTables, resolve_vectors

__all__ = ['Cartridge']

log = logging.getLogger(__name__)


def _fmt_size(n: int) -> str:
    if n >= 0x100000 and n % 0x100000 == 0:
        return f"{n:,} bytes ({n // 0x100000}MB)"
    if n >= 0x400 and n % 0x400 == 0:
        return f"{n:,} bytes ({n // 0x400}KB)"
    return f"{n:,} bytes"


@dataclass(frozen=True)
class Cartridge:
    """A loaded, validated cartridge image."""
    image: RawImage
    header: CartridgeHeader
    mapping: MappingMode
    vectors: VectorTables

    # --- Construction ---

    @classmethod
    def from_image(cls, image: RawImage) -> Cartridge:
        header, mapping = detect_header(image, image.copier_offset)
        vectors = resolve_vectors(image, mapping, image.copier_offset)
        log.debug("%r: %s, RES $%04X", image, mapping.value,
                  vectors.emulation.dispatch(InterruptKind.RES))
        return cls(image=image, header=header, mapping=mapping, vectors=vectors)

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, memoryview],
                   source: Optional[Union[str, Path]] = None) -> Cartridge:
        return cls.from_image(RawImage.from_bytes(data, source=source))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> Cartridge:
        return cls.from_image(load_image(path))

    # --- Convenience accessors ---

    @property
    def title(self) -> str:
        return self.header.title_text

    @property
    def copier_offset(self) -> int:
        return self.image.copier_offset

    @property
    def rom_size_bytes(self) -> int:
        return self.header.rom_size_bytes

    @property
    def ram_size_bytes(self) -> int:
        return self.header.ram_size_bytes

    @property
    def native_vectors(self) -> InterruptVectorTable:
        return self.vectors.native

    @property
    def emulation_vectors(self) -> InterruptVectorTable:
        return self.vectors.emulation

    @property
    def reset_vector(self) -> int:
        """Entry point after power-on (emulation-mode RES)."""
        return self.vectors.emulation.dispatch(InterruptKind.RES)

    # --- Output ---

    def to_dict(self) -> Dict[str, Any]:
        h = self.header
        return {
            "source": str(self.image.source) if self.image.source else None,
            "file_size": self.image.length,
            "copier_header": self.image.has_copier_header,
            "header_offset": f"0x{h.offset:05X}",
            "title": self.title,
            "title_raw": h.title.hex(),
            "mapping_mode": self.mapping.value,
            "declared_mapping": h.declared_mapping.value if h.declared_mapping else None,
            "fast_rom": h.fast_rom,
            "sub_mapping_mode": h.sub_mapping_mode,
            "cartridge_type": h.cartridge_type,
            "cartridge_type_name": h.cartridge_type_name,
            "rom_size": h.rom_size_bytes,
            "ram_size": h.ram_size_bytes,
            "licensee": h.licensee,
            "reserved": h.reserved,
            "version": h.version,
            "checksum": f"0x{h.checksum:04X}",
            "inverse_checksum": f"0x{h.inverse_checksum:04X}",
            "vectors": {
                table.mode.value: {kind.name: f"0x{addr:04X}" for kind, addr in table.items()}
                for table in self.vectors
            },
        }

    def summary(self) -> str:
        h = self.header
        lines = [
            f"Title:            {self.title}",
            f"FastROM:          {'True' if h.fast_rom else 'False'}",
            f"Mapping Mode:     {self.mapping.value} (declared sub-mode 0x{h.sub_mapping_mode:X})",
            f"Cartridge Type:   0x{h.cartridge_type:02X} {h.cartridge_type_name}",
            f"ROM Size:         {_fmt_size(h.rom_size_bytes)}",
            f"RAM Size:         {_fmt_size(h.ram_size_bytes)}",
            f"Licensee:         0x{h.licensee:02X}",
            f"Reserved:         0x{h.reserved:02X}",
            f"Version:          1.{h.version}",
            f"Checksum:         0x{h.checksum:04X} / complement 0x{h.inverse_checksum:04X}",
            f"Header Offset:    0x{h.offset:05X}"
            + (" (copier header)" if self.image.has_copier_header else ""),
        ]
        for table in self.vectors:
            lines.append("")
            lines.append(f"{table.mode.label} vectors:")
            for kind, addr in table.items():
                lines.append(f"  {kind.name:<6} ${addr:04X}   {kind.value}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.summary()
