"""Command-line report for PureData patches.

Usage::

    pdscan synth.pd patches/
    pdscan --no-records -v patches/

Each patch gets a report of its audio channels, MIDI usage and root canvas
geometry, followed by a dump of its records.
"""

import argparse
import io
import logging
import sys
from typing import Optional, Sequence, TextIO

from .ast import ParseError, parse_file
from .discover import find_patches
from .extract import describe

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdscan",
        description="Report audio, MIDI and canvas facts of PureData patches.",
    )
    parser.add_argument("paths", nargs="+", help="Patch files or directories to scan.")
    parser.add_argument(
        "--no-recursive",
        dest="recursive",
        action="store_false",
        help="Do not descend into subdirectories.",
    )
    parser.add_argument(
        "--no-records",
        dest="records",
        action="store_false",
        help="Omit the dump of parsed records.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def report_patch(path: str, out: TextIO, *, records: bool = True) -> None:
    """Parse one patch and write its report to ``out``.

    Raises
    ------
    ParseError
        If the patch cannot be read or is malformed; nothing is written.
    """
    patch = parse_file(path)
    info = describe(patch)

    out.write(f"<{path}>\n")
    for line in info.report_lines():
        out.write(line + "\n")
    if records:
        out.write(str(patch))


def main(argv: Optional[Sequence[str]] = None, out: Optional[TextIO] = None) -> int:
    args = build_parser().parse_args(argv)
    if out is None:
        out = sys.stdout
        # symbols keep undecodable bytes as surrogates; write them back raw
        if hasattr(out, "reconfigure"):
            out.reconfigure(errors="surrogateescape")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    failures = 0
    reported = 0
    for path in find_patches(args.paths, recursive=args.recursive):
        logger.debug("scanning %s", path)
        report = io.StringIO()
        try:
            report_patch(path, report, records=args.records)
        except ParseError as e:
            logger.error("%s: %s", path, e)
            failures += 1
            continue
        if reported:
            out.write("\n")
        out.write(report.getvalue())
        reported += 1

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
