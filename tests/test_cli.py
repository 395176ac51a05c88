"""
Command-line tests for snesinfo.
"""
import sys
import os
import json
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import logging
import pytest
from snes_cart.cli import main
from snes_cart.log_setup import console_level, setup_logging
from romgen import build_image, header_bytes, put_word


@pytest.fixture
def rom(tmp_path):
    data = build_image(0x10000, lorom=header_bytes(title=b"CLI GAME"))
    put_word(data, 0x7FFC, 0x8000)
    path = tmp_path / "game.sfc"
    path.write_bytes(bytes(data))
    return path


class TestMain:

    def test_no_argument_exits_nonzero(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code != 0

    def test_text_summary(self, rom, capsys):
        assert main([str(rom)]) == 0
        out = capsys.readouterr().out
        assert "CLI GAME" in out
        assert "LoROM" in out

    def test_json(self, rom, capsys):
        assert main([str(rom), "--format", "json"]) == 0
        d = json.loads(capsys.readouterr().out)
        assert d["title"] == "CLI GAME"
        assert d["vectors"]["emulation"]["RES"] == "0x8000"

    def test_output_file_format_from_extension(self, rom, tmp_path):
        out = tmp_path / "report.json"
        assert main([str(rom), "-o", str(out)]) == 0
        assert json.loads(out.read_text(encoding="utf-8"))["mapping_mode"] == "LoROM"

    def test_output_exists_needs_force(self, rom, tmp_path):
        out = tmp_path / "report.txt"
        out.write_text("old", encoding="utf-8")
        assert main([str(rom), "-o", str(out)]) == 1
        assert out.read_text(encoding="utf-8") == "old"
        assert main([str(rom), "-o", str(out), "--force"]) == 0
        assert "CLI GAME" in out.read_text(encoding="utf-8")

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "missing.sfc")]) == 1

    def test_bad_size(self, tmp_path):
        path = tmp_path / "bad.sfc"
        path.write_bytes(bytes(0x8001))
        assert main([str(path)]) == 1

    def test_no_valid_header(self, tmp_path, capsys):
        path = tmp_path / "blank.sfc"
        path.write_bytes(bytes(0x10000))
        assert main([str(path), "-q"]) == 1
        assert capsys.readouterr().out == ""

    def test_error_logged_with_type_name(self, tmp_path, capsys):
        path = tmp_path / "blank.sfc"
        path.write_bytes(bytes(0x10000))
        assert main([str(path)]) == 1
        assert "NoValidHeader" in capsys.readouterr().err

        path.write_bytes(bytes(0x8001))
        assert main([str(path)]) == 1
        assert "SizeError" in capsys.readouterr().err

    def test_log_file(self, rom, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        assert main([str(rom), "--log-file", str(log_file)]) == 0
        text = log_file.read_text(encoding="utf-8")
        assert "Opening:" in text
        assert "Detected LoROM header" in text


class TestLogging:

    @pytest.mark.parametrize("verbosity,quiet,level", [
        (0, False, logging.WARNING),
        (1, False, logging.INFO),
        (2, False, logging.DEBUG),
        (3, False, logging.DEBUG),
        (2, True, logging.ERROR),
    ])
    def test_console_level(self, verbosity, quiet, level):
        assert console_level(verbosity, quiet) == level

    def test_setup_replaces_handlers(self):
        logger = setup_logging(verbosity=1)
        logger = setup_logging(verbosity=1)
        assert len(logger.handlers) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
