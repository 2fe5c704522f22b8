"""
CLI entry point for streaming statistics over numeric text input.

Usage:
    python -m welford [FILE ...] [--json] [--precision N] [--verbose]

Reads stdin when no FILE (or "-") is given.  Several files are read by one
thread each, all feeding a single shared ConcurrentAggregate.
"""

import argparse
import json
import logging
import os
import sys
import threading
from itertools import islice
from typing import Dict, Iterable, List, Optional, TextIO

from welford import __version__
from welford.concurrent_aggregate import ConcurrentAggregate
from welford.parsing import iter_numbers

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 1024


def feed(aggregate: ConcurrentAggregate, stream: TextIO, source: str,
         batch_size: int = DEFAULT_BATCH_SIZE) -> None:
    """Fold every number in *stream* into *aggregate*, batch_size at a time."""
    numbers = iter_numbers(stream, source)
    total = 0
    while True:
        batch = list(islice(numbers, batch_size))
        if not batch:
            break
        aggregate.extend(batch)
        total += len(batch)
    logger.debug("%s: folded %d values", source, total)


def _feed_file(aggregate: ConcurrentAggregate, path: str, batch_size: int,
               errors: Dict[str, str]) -> None:
    try:
        with open(path, encoding="utf-8") as f:
            feed(aggregate, f, path, batch_size)
    except (OSError, UnicodeDecodeError) as e:
        errors[path] = str(e)


def run(paths: List[str], batch_size: int = DEFAULT_BATCH_SIZE,
        stdin: Optional[TextIO] = None) -> ConcurrentAggregate:
    """Aggregate all *paths* concurrently; "-" or no paths means stdin.

    Raises OSError naming the first file that could not be read.
    """
    aggregate = ConcurrentAggregate()
    stdin = stdin if stdin is not None else sys.stdin
    files = [p for p in paths if p != "-"]

    if not paths or len(files) < len(paths):
        feed(aggregate, stdin, "<stdin>", batch_size)

    errors: Dict[str, str] = {}
    threads = [
        threading.Thread(target=_feed_file, args=(aggregate, path, batch_size, errors),
                         name=f"feed-{os.path.basename(path)}")
        for path in files
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    if errors:
        path = next(p for p in files if p in errors)
        raise OSError(f"{path}: {errors[path]}")
    return aggregate


def render(aggregate: ConcurrentAggregate, as_json: bool = False,
           precision: Optional[int] = None) -> str:
    if as_json:
        return json.dumps(aggregate.to_dict(precision), indent=2)
    return str(aggregate)


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="welford",
        description="Running count, mean and variance of numbers in text input",
    )
    parser.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="Text files to read numbers from (default: stdin; '-' also means stdin)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print statistics as JSON instead of the summary line",
    )
    parser.add_argument(
        "--precision", "-p",
        type=int,
        default=None,
        help="Round JSON values to this many decimals",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_BATCH_SIZE,
        help=f"Values folded per lock acquisition (default: {DEFAULT_BATCH_SIZE})",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log progress to stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format="%(levelname)s %(name)s: %(message)s")

    if args.batch_size < 1:
        parser.error("--batch-size must be at least 1")

    for path in args.files:
        if path != "-" and not os.path.exists(path):
            print(f"Error: File not found: {path}", file=sys.stderr)
            return 1

    try:
        aggregate = run(args.files, batch_size=args.batch_size)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(render(aggregate, as_json=args.json, precision=args.precision))
    return 0


if __name__ == "__main__":
    sys.exit(main())
