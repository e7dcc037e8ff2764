"""Line filter that drops complete tracked elements from a chadoxml stream."""

from typing import Iterable, Iterator, Optional

from .logger import get_logger, truncate
from .stats import RunStats
from .tags import TagKind, classify, still_open

log = get_logger(__name__)


class LineFilter:
    """Drops every tracked element, from its opening line through its closing line.

    Usage:
        line_filter = LineFilter()
        for line in line_filter.filter(source):
            dest.write(line)

    The opening line of an element is never checked for the closing tag, so
    an element is always at least two lines long.  Same-named nesting is not
    modelled: the first matching close tag ends the element.
    """

    def __init__(self, stats: Optional[RunStats] = None):
        self.stats = stats if stats is not None else RunStats()
        self.open_kind: TagKind = TagKind.NONE
        self._opened_at = 0

    @property
    def is_idle(self) -> bool:
        return not self.open_kind.is_open

    def feed(self, line: str) -> Optional[str]:
        """Consume one line; return it if it survives, None if it is dropped."""
        self.stats.lines_read += 1

        if self.open_kind.is_open:
            if not still_open(line, self.open_kind):
                log.debug(
                    "closed %s at line %d (opened at %d)",
                    self.open_kind.value, self.stats.lines_read, self._opened_at,
                )
                self.open_kind = TagKind.NONE
                self.stats.elements_dropped += 1
            return None

        kind = classify(line)
        if kind.is_open:
            self.open_kind = kind
            self._opened_at = self.stats.lines_read
            log.debug("opened %s at line %d: %s", kind.value, self._opened_at, truncate(line, 80))
            return None

        self.stats.lines_written += 1
        return line

    def filter(self, lines: Iterable[str]) -> Iterator[str]:
        """Yield the lines of ``lines`` that lie outside tracked elements."""
        for line in lines:
            kept = self.feed(line)
            if kept is not None:
                yield kept

    def finish(self) -> TagKind:
        """Record and return the kind left open at end of stream (NONE if clean)."""
        self.stats.terminal_state = "idle" if self.is_idle else self.open_kind.value
        if not self.is_idle:
            log.warning(
                "stream ended with <%s> open since line %d",
                self.open_kind.value, self._opened_at,
            )
        return self.open_kind
