"""
SNES Cartridge Inspector
========================
Loads a Super Famicom / SNES cartridge image, works out its mapping mode
from the embedded header, validates the header checksum and resolves the
65C816 interrupt vectors for native and emulation mode.

Architecture:
    ┌──────────┐    ┌──────────┐    ┌────────────────┐    ┌─────────────────┐
    │ ROM file │───>│  Loader  │───>│ HeaderDetector │───>│ VectorResolver  │
    │ (.sfc)   │    │(RawImage)│    │ (LoROM/HiROM)  │    │ (native / emu)  │
    └──────────┘    └──────────┘    └────────────────┘    └─────────────────┘

    - reader.py:    bounds-checked little-endian reads shared by every stage
    - loader.py:    size limits + copier header detection
    - header.py:    two-offset probe, mode-byte signature + checksum check
    - vectors.py:   vector tables at $FFE4-$FFFF
    - cartridge.py: the immutable aggregate built from all three
"""

__version__ = "0.1.0"

from .errors import (CartridgeError, SizeError, FormatError, NoValidHeader,
                     OutOfBounds, UnsupportedInterrupt)
from .loader import RawImage, copier_header_offset, load_image
from .header import (MappingMode, CartridgeType, CartridgeHeader, HeaderMatch,
                     size_from_log, parse_header, detect_header)
from .vectors import (InterruptKind, ProcessorMode, InterruptVectorTable,
                      VectorTables, read_vector_table, resolve_vectors)
from .cartridge import Cartridge


def inspect_rom(path) -> Cartridge:
    """Load a cartridge image and run the full pipeline.

    Full pipeline: Loader -> HeaderDetector -> VectorResolver -> Cartridge.

    Args:
        path: Path to the ROM image, with or without a copier header.

    Returns:
        The validated Cartridge.

    Raises:
        OSError: the file cannot be read.
        SizeError: bad image length.
        NoValidHeader: neither header candidate validated.
    """
    return Cartridge.from_file(path)
