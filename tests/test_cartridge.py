"""
Full pipeline tests: bytes / file -> Cartridge.
"""
import sys
import os
import json
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import pytest
import snes_cart
from snes_cart import (
    Cartridge, InterruptKind, MappingMode, NoValidHeader, SizeError,
    UnsupportedInterrupt, inspect_rom,
)
from romgen import build_image, header_bytes, put_word


def _hirom_game(copier=False):
    hdr = header_bytes(title=b"HIROM PIPELINE", mode=0x31, cart_type=0x02,
                       rom_log=0x0B, ram_log=0x03, version=0x01, checksum=0x5A5A)
    data = build_image(0x200000, copier=copier, hirom=hdr)
    pad = 0x200 if copier else 0
    put_word(data, pad + 0xFFEA, 0xC010)   # native NMI
    put_word(data, pad + 0xFFFC, 0xC000)   # emulation RES
    return data


def _lorom_game():
    data = build_image(0x100000, lorom=header_bytes(title=b"LOROM PIPELINE"))
    put_word(data, 0x7FFC, 0x8000)
    put_word(data, 0x7FEE, 0x8123)
    return data


class TestFromBytes:

    def test_lorom(self):
        cart = Cartridge.from_bytes(_lorom_game())
        assert cart.mapping is MappingMode.LOROM
        assert cart.title == "LOROM PIPELINE"
        assert cart.copier_offset == 0
        assert cart.reset_vector == 0x8000
        assert cart.native_vectors[InterruptKind.IRQ] == 0x8123

    def test_hirom(self):
        cart = Cartridge.from_bytes(_hirom_game())
        assert cart.mapping is MappingMode.HIROM
        assert cart.rom_size_bytes == 0x200000
        assert cart.ram_size_bytes == 0x2000
        assert cart.reset_vector == 0xC000
        assert cart.native_vectors.dispatch(InterruptKind.NMI) == 0xC010

    def test_hirom_with_copier_header(self):
        cart = Cartridge.from_bytes(_hirom_game(copier=True))
        assert cart.mapping is MappingMode.HIROM
        assert cart.copier_offset == 0x200
        assert cart.header.offset == 0x101C0
        assert cart.reset_vector == 0xC000

    def test_native_res_unsupported(self):
        cart = Cartridge.from_bytes(_lorom_game())
        with pytest.raises(UnsupportedInterrupt):
            cart.vectors.native.dispatch(InterruptKind.RES)

    def test_bad_size_no_cartridge(self):
        with pytest.raises(SizeError):
            Cartridge.from_bytes(bytes(0x8100))

    def test_no_header_no_cartridge(self):
        with pytest.raises(NoValidHeader):
            Cartridge.from_bytes(bytes(0x10000))

    def test_hashable(self):
        cart = Cartridge.from_bytes(_lorom_game())
        again = Cartridge.from_bytes(_lorom_game())
        assert cart == again
        assert hash(cart) == hash(again)
        assert len({cart, again}) == 1

    def test_frozen(self):
        cart = Cartridge.from_bytes(_lorom_game())
        with pytest.raises(AttributeError):
            cart.mapping = MappingMode.HIROM


class TestFromFile:

    def test_inspect_rom(self, tmp_path):
        rom = tmp_path / "game.smc"
        rom.write_bytes(bytes(_hirom_game(copier=True)))
        cart = inspect_rom(rom)
        assert cart.image.source == rom
        assert cart.mapping is MappingMode.HIROM

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            Cartridge.from_file(tmp_path / "nope.sfc")


class TestOutput:

    def test_summary(self):
        text = Cartridge.from_bytes(_hirom_game()).summary()
        assert "Title:            HIROM PIPELINE" in text
        assert "FastROM:          True" in text
        assert "HiROM" in text
        assert "ROM_RAM_BATTERY" in text
        assert "(2MB)" in text
        assert "(8KB)" in text
        assert "Native vectors:" in text
        assert "Emulation vectors:" in text
        assert "RES    $C000" in text

    def test_reserved_byte_reported(self):
        hdr = header_bytes(licensee=0x33, reserved=0x01, version=0x02)
        cart = Cartridge.from_bytes(build_image(0x8000, lorom=hdr))
        text = cart.summary()
        assert "Licensee:         0x33" in text
        assert "Reserved:         0x01" in text
        d = cart.to_dict()
        assert d["licensee"] == 0x33
        assert d["reserved"] == 0x01
        assert d["version"] == 0x02

    def test_str_is_summary(self):
        cart = Cartridge.from_bytes(_lorom_game())
        assert str(cart) == cart.summary()

    def test_to_dict_is_json_ready(self):
        d = Cartridge.from_bytes(_hirom_game(copier=True)).to_dict()
        json.dumps(d)
        assert d["mapping_mode"] == "HiROM"
        assert d["declared_mapping"] == "HiROM"
        assert d["copier_header"] is True
        assert d["header_offset"] == "0x101C0"
        assert d["checksum"] == "0x5A5A"
        assert d["inverse_checksum"] == "0xA5A5"
        assert d["vectors"]["emulation"]["RES"] == "0xC000"
        assert "RES" not in d["vectors"]["native"]

    def test_repr_is_short(self):
        cart = Cartridge.from_bytes(_lorom_game())
        assert len(repr(cart)) < 2000


def test_version():
    assert snes_cart.__version__


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
