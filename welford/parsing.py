"""
Numeric token extraction for text input fed to the command-line tool.
"""

import logging
import re
from typing import Iterable, Iterator, List

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

# Matches: integers, decimals, signed numbers, scientific notation.
_NUMBER_PATTERN = re.compile(
    r"[-+]?"
    r"(?:\d+\.?\d*|\.\d+)"
    r"(?:[eE][-+]?\d+)?"
)


def extract_numbers(line: str) -> List[float]:
    """
    Return every numeric value in *line*, in order of appearance.

    Examples:
        >>> extract_numbers("latency_ms 12.5 13 -0.25")
        [12.5, 13.0, -0.25]
        >>> extract_numbers("1e3,2E-2")
        [1000.0, 0.02]
        >>> extract_numbers("no numbers here")
        []
    """
    return [float(match.group(0)) for match in _NUMBER_PATTERN.finditer(line)]


def iter_numbers(lines: Iterable[str], source: str = "<input>") -> Iterator[float]:
    """Yield numbers from each line, skipping lines without any."""
    for lineno, line in enumerate(lines, 1):
        numbers = extract_numbers(line)
        if not numbers:
            if line.strip():
                logger.debug("%s:%d: no numbers found, skipping", source, lineno)
            continue
        yield from numbers
