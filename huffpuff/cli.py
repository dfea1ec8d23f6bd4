from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from . import __version__
from .archive import Observer, compress_file, decompress_file
from .errors import HuffmanError, UsageError
from .report import ConsoleReporter


class _ArgumentParser(argparse.ArgumentParser):
    # argparse exits with status 2 on bad arguments; the tools report usage errors as 1
    def error(self, message):
        raise UsageError(f"{message}\n\n{self.format_usage()}")


def build_huff_parser() -> argparse.ArgumentParser:
    ap = _ArgumentParser(prog="huff", description="Compress a file with static Huffman coding.")
    ap.add_argument("input", help="File to compress")
    ap.add_argument("output", help="Compressed file to create")
    ap.add_argument("-q", "--quiet", action="store_true", help="Do not print statistics or progress")
    ap.add_argument("--codes", action="store_true", help="List the code of every byte value that occurs")
    ap.add_argument("--plot", metavar="PNG", default=None, help="Save a byte histogram chart to this file")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def build_puff_parser() -> argparse.ArgumentParser:
    ap = _ArgumentParser(prog="puff", description="Decompress a file written by huff.")
    ap.add_argument("input", help="Compressed file")
    ap.add_argument("output", help="File to restore")
    ap.add_argument("-q", "--quiet", action="store_true", help="Do not print statistics or progress")
    ap.add_argument("--codes", action="store_true", help="List the code of every byte value that occurs")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def _run(parser: argparse.ArgumentParser, argv: Optional[List[str]], action) -> int:
    try:
        args = parser.parse_args(argv)
        action(args)
    except HuffmanError as exc:
        print(f"\nError: {exc}", file=sys.stderr)
        return 1
    return 0


def huff_main(argv: Optional[List[str]] = None) -> int:
    def action(args):
        if args.quiet:
            observer = Observer()
        else:
            observer = ConsoleReporter(show_codes=args.codes, plot_path=args.plot)
        compress_file(args.input, args.output, observer)

    return _run(build_huff_parser(), argv, action)


def puff_main(argv: Optional[List[str]] = None) -> int:
    def action(args):
        if args.quiet:
            observer = Observer()
        else:
            observer = ConsoleReporter(show_codes=args.codes, decompressing=True)
        decompress_file(args.input, args.output, observer)

    return _run(build_puff_parser(), argv, action)


def huff_entry() -> None:
    raise SystemExit(huff_main())


def puff_entry() -> None:
    raise SystemExit(puff_main())
