"""Pre-flight checks run before the stripper touches its destination."""

from pathlib import Path
from typing import Union

from .errors import EmbeddedWiggleError
from .logger import get_logger

log = get_logger(__name__)

WIGGLE_OPEN_NEEDLE = "<wiggle_data id="
CLEANED_HEADING_NEEDLE = "<heading>Cleaned WIG File</heading>"


def count_matching_lines(path: Union[str, Path], needle: str, encoding: str = "utf-8") -> int:
    """Count lines containing ``needle``, the way ``grep -c`` does.

    A line with several occurrences counts once.
    """
    count = 0
    with open(path, "r", encoding=encoding, errors="surrogateescape") as f:
        for line in f:
            if needle in line:
                count += 1
    return count


def embedded_wiggle_count(path: Union[str, Path], encoding: str = "utf-8") -> int:
    """Estimate how many wiggle elements in ``path`` still carry their payload inline.

    Every wiggle element opens with ``<wiggle_data id=``; those already
    externalised carry a "Cleaned WIG File" heading.  The difference is a
    heuristic, not a parse.
    """
    total = count_matching_lines(path, WIGGLE_OPEN_NEEDLE, encoding)
    cleaned = count_matching_lines(path, CLEANED_HEADING_NEEDLE, encoding)
    log.debug("wiggle count for %s: total=%d cleaned=%d", path, total, cleaned)
    return total - cleaned


def check_no_embedded_wiggles(path: Union[str, Path], encoding: str = "utf-8") -> None:
    """Raise EmbeddedWiggleError if ``path`` has any embedded wiggle payloads."""
    count = embedded_wiggle_count(path, encoding)
    if count > 0:
        raise EmbeddedWiggleError(Path(path).name, count)
