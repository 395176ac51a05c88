"""
snesinfo — SNES cartridge header / vector inspector

Usage:
    snesinfo <rom.sfc> [--format txt|json] [-o OUTPUT] [--force]
                       [-v | -vv | -q] [--log-file FILE]

Examples:
    snesinfo game.sfc                     # summary to stdout
    snesinfo game.smc --format json       # JSON to stdout
    snesinfo game.sfc -o game.json        # format from extension
    python -m snes_cart game.sfc -vv      # debug log of both header probes

Exit status: 0 ok, 1 load failure, 2 usage error.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .cartridge import Cartridge
from .config import LOGGER_NAME
from .errors import CartridgeError
from .log_setup import setup_logging

log = logging.getLogger(LOGGER_NAME)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snesinfo",
        description="Detect the mapping mode, header and interrupt vectors of an SNES ROM image",
    )
    parser.add_argument("rom", help="Cartridge image (.sfc / .smc)")
    parser.add_argument("-o", "--output", help="Write the report to a file (default: stdout)")
    parser.add_argument("--format", choices=["txt", "json"], default=None,
                        help="Report format (auto-detected from -o extension if not set)")
    parser.add_argument("--force", action="store_true",
                        help="Overwrite an existing output file")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Increase verbosity (-v, -vv)")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Suppress all logging except errors")
    parser.add_argument("--log-file", help="Also write a full debug log to FILE")
    parser.add_argument("--version", action="version",
                        version=f"snesinfo {__version__}")
    return parser


def _output_format(args) -> str:
    if args.format:
        return args.format
    if args.output and os.path.splitext(args.output)[1].lower() == ".json":
        return "json"
    return "txt"


def render(cart: Cartridge, out_format: str) -> str:
    if out_format == "json":
        return json.dumps(cart.to_dict(), indent=2, ensure_ascii=False)
    return cart.summary()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbosity=args.verbose, quiet=args.quiet, log_file=args.log_file)

    try:
        cart = Cartridge.from_file(args.rom)
    except FileNotFoundError:
        log.error("File not found: %s", args.rom)
        return 1
    except OSError as e:
        log.error("Error reading %s: %s", args.rom, e)
        return 1
    except CartridgeError as e:
        log.error("%s: %s", type(e).__name__, e)
        return 1

    out_format = _output_format(args)
    report = render(cart, out_format)

    if args.output:
        out_path = Path(args.output)
        if out_path.exists() and not args.force:
            log.error("Output file exists: %s (use --force)", out_path)
            return 1
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(report + "\n", encoding="utf-8")
        log.info("Output written to: %s (%s)", out_path, out_format)
    else:
        print(report)

    return 0


if __name__ == "__main__":
    sys.exit(main())
