"""
65C816 interrupt vector resolution.

The vector table sits at the top of bank 0 ($FFE4-$FFFF). The native-mode
vectors come first, then the emulation-mode (6502) vectors:

    Native                      Emulation
    $FFE4  COP                  $FFF4  COP
    $FFE6  BRK                  $FFF6  (unused)
    $FFE8  ABORT                $FFF8  ABORT
    $FFEA  NMI                  $FFFA  NMI
    $FFEC  (unused)             $FFFC  RES
    $FFEE  IRQ                  $FFFE  IRQ / BRK

Native mode has no RES vector: reset always enters emulation mode.
In emulation mode BRK and IRQ share $FFFE; the handler tells them apart by
the B flag pushed on the stack.
"""

from __future__ import annotations
import enum
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, NamedTuple, Tuple

from .config import EMULATION_VECTOR_OFFSETS, NATIVE_VECTOR_OFFSETS
from .errors import UnsupportedInterrupt
from .header import MappingMode
from .reader import as_buffer, read_u16le

__all__ = [
    'InterruptKind', 'ProcessorMode', 'InterruptVectorTable', 'VectorTables',
    'vector_offsets', 'read_vector_table', 'resolve_vectors',
]

log = logging.getLogger(__name__)


class InterruptKind(enum.Enum):
    COP = "Coprocessor"
    BRK = "Break"
    ABORT = "Abort"
    NMI = "Non-Maskable Interrupt"
    IRQ = "Interrupt Request"
    RES = "Reset"


class ProcessorMode(enum.Enum):
    NATIVE = "native"
    EMULATION = "emulation"

    @property
    def label(self) -> str:
        return self.value.capitalize()


_OFFSETS = {
    ProcessorMode.NATIVE: NATIVE_VECTOR_OFFSETS,
    ProcessorMode.EMULATION: EMULATION_VECTOR_OFFSETS,
}


def vector_offsets(mode: ProcessorMode) -> Dict[InterruptKind, int]:
    """Offsets from the vector-table base, in InterruptKind order."""
    table = _OFFSETS[mode]
    return {kind: table[kind.name] for kind in InterruptKind if kind.name in table}


@dataclass(frozen=True)
class InterruptVectorTable:
    """Entry addresses for one processor mode."""
    mode: ProcessorMode
    addresses: Mapping[InterruptKind, int] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'addresses', MappingProxyType(dict(self.addresses)))

    def __hash__(self) -> int:
        return hash((self.mode, tuple(self.addresses.items())))

    def dispatch(self, kind: InterruptKind) -> int:
        """Return the entry address for an interrupt kind."""
        try:
            return self.addresses[kind]
        except KeyError:
            raise UnsupportedInterrupt(kind, self.mode) from None

    __getitem__ = dispatch

    def __contains__(self, kind) -> bool:
        return kind in self.addresses

    def __iter__(self) -> Iterator[InterruptKind]:
        return iter(self.addresses)

    def __len__(self) -> int:
        return len(self.addresses)

    @property
    def supported_kinds(self) -> Tuple[InterruptKind, ...]:
        return tuple(self.addresses)

    def items(self):
        return self.addresses.items()

    def __repr__(self) -> str:
        body = ", ".join(f"{k.name}=${v:04X}" for k, v in self.addresses.items())
        return f"InterruptVectorTable({self.mode.value}: {body})"


class VectorTables(NamedTuple):
    native: InterruptVectorTable
    emulation: InterruptVectorTable

    def for_mode(self, mode: ProcessorMode) -> InterruptVectorTable:
        return self.native if mode is ProcessorMode.NATIVE else self.emulation


def read_vector_table(image, mapping: MappingMode, mode: ProcessorMode,
                      copier_offset: int = 0) -> InterruptVectorTable:
    """Read the six (five in native mode) vectors for one processor mode.

    Values are read unconditionally; a garbage address is not an error here.
    Raises OutOfBounds if the table lies past the end of the buffer.
    """
    buf = as_buffer(image)
    base = mapping.vector_base + copier_offset
    addresses = {}
    for kind, rel in vector_offsets(mode).items():
        addresses[kind] = read_u16le(buf, base + rel)
    table = InterruptVectorTable(mode, addresses)
    log.debug("%s vectors @ 0x%05X: %r", mode.label, base, table)
    return table


def resolve_vectors(image, mapping: MappingMode, copier_offset: int = 0) -> VectorTables:
    """Resolve both processor-mode vector tables for a detected mapping mode."""
    return VectorTables(
        native=read_vector_table(image, mapping, ProcessorMode.NATIVE, copier_offset),
        emulation=read_vector_table(image, mapping, ProcessorMode.EMULATION, copier_offset),
    )
