"""Command that times ITCH parsing and order matching over one file."""

from __future__ import annotations

import argparse
import math
import sys
import time
from itertools import islice
from typing import TextIO

from heimdall.arbiter import MatchingEngine
from heimdall.itch import ItchFileError, parse_file

DEFAULT_PATH = "12302019.NASDAQ_ITCH50"
MAX_MSG = 1_000_000


def _rate(count: int, seconds: float) -> float:
    if seconds > 0:
        return count / seconds
    return math.inf if count else math.nan


def run(path: str, max_messages: int = MAX_MSG, file: TextIO | None = None) -> MatchingEngine:
    """Parse and then match up to max_messages events, printing a timing summary."""
    out = file if file is not None else sys.stdout

    parse_start = time.perf_counter()
    parse_count = sum(1 for _ in islice(parse_file(path), max_messages))
    parse_secs = time.perf_counter() - parse_start

    engine = MatchingEngine()
    match_start = time.perf_counter()
    for event in islice(parse_file(path), parse_count):
        engine.handle(event)
    match_secs = time.perf_counter() - match_start

    print(f"Processed {parse_count} messages (max {max_messages})", file=out)
    print("\nITCH Parsing", file=out)
    print(f"  Parse Time:  {parse_secs:.3f} secs", file=out)
    print(f"  Parse Speed: {_rate(parse_count, parse_secs):.0f} msg/sec", file=out)
    print("\nLOB Matching", file=out)
    print(f"  Match Time:  {match_secs:.3f} secs", file=out)
    print(f"  Match Speed: {_rate(parse_count, match_secs):.0f} msg/sec", file=out)
    print(file=out)
    engine.print_stats(out)
    return engine


def main(argv: list[str] | None = None) -> int:
    """Entry point of the command."""
    parser = argparse.ArgumentParser(prog="heimdall", description=__doc__)
    parser.add_argument("path", nargs="?", default=DEFAULT_PATH, help="ITCH 5.0 file")
    parser.add_argument(
        "--max", dest="max_messages", type=int, default=MAX_MSG, help="maximum messages"
    )
    args = parser.parse_args(argv)
    try:
        run(args.path, args.max_messages)
    except ItchFileError as exc:
        cause = f": {exc.__cause__.strerror}" if exc.__cause__ is not None else ""
        print(f"Error: {exc}{cause}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())