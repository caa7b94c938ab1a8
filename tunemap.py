#!/usr/bin/env python3
"""TUNEMAP - microtonal tuning engine

Load a Scala-derived tuning file, report its keyboard offsets and export
the retuned keyboard.
"""

import argparse
import os
import sys
from typing import List, Optional

import consts
import tables
import tun_csd
import utils
from accidentals import AccidentalType, UnknownAccidental, accidental_code, accidental_name
from tuning import NONE, load_tuning


def _parse_accidental(value: str) -> int:
    """Accidental as vocabulary name (SHARP) or integer code (3)."""
    if value.isdigit():
        try:
            return int(AccidentalType(int(value)))
        except ValueError:
            raise argparse.ArgumentTypeError(f"Unknown accidental code: {value}") from None
    try:
        return accidental_code(value.upper())
    except UnknownAccidental as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _parse_query(values: List[str]) -> tuple:
    if len(values) not in (2, 3):
        raise argparse.ArgumentTypeError("--query expects PITCH TPC [ACCIDENTAL]")
    try:
        pitch = int(values[0])
        tpc = int(values[1])
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid query: {' '.join(values)}") from None
    accidental = _parse_accidental(values[2]) if len(values) == 3 else NONE
    return pitch, tpc, accidental


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=(
            "TUNEMAP – Microtonal tuning engine\n"
            "\n"
            "Builds the keyboard offset map of a Scala-derived JSON tuning file\n"
            "and converts 12-EDO pitches plus their spelling into cents offsets.\n"
        ),
        epilog=(
            "TUNING FILE:\n"
            "  {\"name\": \"...\", \"root\": [0, 60], \"map\": [{\"NONE\": \"2/1\"}, {\"NONE\": \"9/8\"}, ...]}\n"
            "  Values: 700. (cents)  5/4 (ratio)  2 (ratio)\n\n"

            "EXPORT FORMATS:\n"
            "  .txt/.xlsx (offset tables)  --export-xlsx\n"
            "  .tun (AnaMark TUN)          --export-tun\n"
            "  .csd (Csound cpstun)        --export-csd\n\n"

            "EXAMPLES:\n"
            "  tunemap.py just.json --table\n"
            "  tunemap.py just.json --query 61 9 --query 64 18 NATURAL\n"
            "  tunemap.py just.json --export-tun --diapason 415 --output baroque\n"
        )
    )

    grp_base = parser.add_argument_group("Base", "Base")
    grp_query = parser.add_argument_group("Queries", "Queries")
    grp_out = parser.add_argument_group("Output", "Output")

    grp_base.add_argument("tuning_file", help="JSON tuning file")
    grp_base.add_argument("-v", "--version", action="version",
                          version=f"%(prog)s {consts.__version__}")
    grp_base.add_argument("--diapason", type=float, default=consts.DEFAULT_DIAPASON,
                          help=f"Diapason in Hz (default: {consts.DEFAULT_DIAPASON})")
    grp_base.add_argument("--log-file", default=None,
                          help="Write log messages to this file instead of stderr")
    grp_base.add_argument("--verbose", action="store_true",
                          help="Log informational messages")

    grp_query.add_argument("--query", action="append", nargs="+", default=[],
                           metavar="ARG",
                           help="Offset for PITCH TPC [ACCIDENTAL] (name or code); repeatable")
    grp_query.add_argument("--table", action="store_true",
                           help="Print the offset table")

    grp_out.add_argument("--output", default=None,
                         help="Output base name (default: tuning file name)")
    grp_out.add_argument("--export-xlsx", action="store_true",
                         help="Export offset tables (.txt and .xlsx)")
    grp_out.add_argument("--export-tun", action="store_true",
                         help="Export .tun file (AnaMark TUN)")
    grp_out.add_argument("--tun-integer", action="store_true",
                         help="Round .tun cents to integers")
    grp_out.add_argument("--export-csd", action="store_true",
                         help="Append a cpstun table to <output>.csd")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        queries = [_parse_query(q) for q in args.query]
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    utils.setup_logging(args.log_file, args.verbose)
    utils.print_banner()

    config = load_tuning(args.tuning_file)
    if not config.valid():
        print(f"Invalid tuning file {args.tuning_file}: {config.error}", file=sys.stderr)
        return 1
    print(f"Tuning: {config.get_name() or '(unnamed)'}")

    for pitch, tpc, accidental in queries:
        offset = config.get_offset(pitch, tpc, accidental)
        print(f"pitch={pitch} tpc={tpc} accidental={accidental_name(accidental)} -> "
              f"{utils.format_cents(offset)} cents")

    if args.table:
        for line in tables.format_offset_table(config):
            print(line)

    output_base = args.output or os.path.splitext(os.path.basename(args.tuning_file))[0]
    if args.export_xlsx:
        tables.export_offset_tables(output_base, config, args.diapason)
    if args.export_tun:
        tun_csd.write_tun_file(output_base, config, args.diapason, args.tun_integer)
    if args.export_csd:
        tun_csd.write_cpstun_table(output_base, config, args.diapason)
    return 0


if __name__ == "__main__":
    sys.exit(main())
