"""
SNES Cartridge Inspector — Layout Constants
============================================

Fixed hardware layout of Super Famicom / SNES cartridge images.
Every offset here is a file offset unless noted otherwise.

   Sources:
   - Nintendo SNES Development Manual, Book 1, chapter 1-2 (ROM registration data)
   - WDC W65C816S datasheet, table 7-1 (vector locations)
   - fullsnes (nocash), "SNES Cartridge ROM Header"
"""

# =============================================================================
#  IMAGE SIZE LIMITS
# =============================================================================
MIN_IMAGE_SIZE = 0x8000          # one 32KB LoROM bank
MAX_IMAGE_SIZE = 0x6000000       # 96MB, larger than any real board
BANK_REMAINDER_MASK = 0x7FFF     # low 15 bits of the file length

# Copier (SMC/SWC/FIG) header prepended by backup units
COPIER_HEADER_SIZE = 0x200
VALID_REMAINDERS = (0, COPIER_HEADER_SIZE)


# =============================================================================
#  CARTRIDGE HEADER (ROM registration data)
# =============================================================================
LOROM_HEADER_OFFSET = 0x7FC0     # $00:FFC0 in LoROM
HIROM_HEADER_OFFSET = 0xFFC0     # $C0:FFC0 in HiROM
HEADER_SIZE = 0x20               # $FFC0-$FFDF
TITLE_LENGTH = 21                # $FFC0-$FFD4

# Mode byte ($FFD5): 001F MMMM
MODE_SIGNATURE = 0b001           # top 3 bits
MODE_SIGNATURE_SHIFT = 5
FAST_ROM_BIT = 0b00010000
SUB_MAPPING_MASK = 0b00001111

# Declared sub-mapping nibble -> mapping tag name
SUB_MAPPING_NAMES = {
    0x0: "LOROM",
    0x1: "HIROM",
    0x2: "EXLOROM",
    0x5: "EXHIROM",
}

CHECKSUM_MASK = 0xFFFF           # checksum ^ inverse_checksum
SIZE_UNIT = 0x400                # ROM/RAM size = 1KB << log2 field


# =============================================================================
#  INTERRUPT VECTORS
#  Offsets are relative to the vector-table base of the mapping mode.
#  (LoROM base 0x7000 -> $7FE4..$7FFF, HiROM base 0xF000 -> $FFE4..$FFFF)
# =============================================================================
LOROM_VECTOR_BASE = 0x7000
HIROM_VECTOR_BASE = 0xF000

NATIVE_VECTOR_OFFSETS = {
    "COP":   0xFE4,
    "BRK":   0xFE6,
    "ABORT": 0xFE8,
    "NMI":   0xFEA,
    "IRQ":   0xFEE,              # $FFEC is unused
}

EMULATION_VECTOR_OFFSETS = {
    "COP":   0xFF4,              # $FFF6 is unused
    "BRK":   0xFFE,              # shares $FFFE with IRQ in 6502 mode
    "ABORT": 0xFF8,
    "NMI":   0xFFA,
    "IRQ":   0xFFE,
    "RES":   0xFFC,
}


# =============================================================================
#  LOGGING
# =============================================================================
LOGGER_NAME = "snes_cart"
CONSOLE_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
