"""Wiggle payload extraction for chadoxml streams.

A wiggle element carries a large signal track inline:

    <wiggle_data id="wig_1">
      <name>H3K4me3_rep1</name>
      <data>variableStep chrom=2L
    100 1.5
    200 2.0
    </data>
    </wiggle_data>

The extractor copies the payload into ``H3K4me3_rep1.cleaned.wig`` next to
the destination file and leaves a marker in the stream:

    <wiggle_data id="wig_1">
      <name>H3K4me3_rep1</name>
      <data>Too large, see: H3K4me3_rep1.cleaned.wig
    </data>
    </wiggle_data>

Running the extractor again over its own output leaves such markers alone.
Every other tracked element is dropped exactly as LineFilter drops it.
"""

import re
from enum import Enum
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional, Union

from .line_filter import LineFilter
from .logger import get_logger
from .reporter import ConsoleReporter, Reporter
from .stats import RunStats
from .tags import TagKind, classify

log = get_logger(__name__)

SIDECAR_SUFFIX = ".cleaned.wig"
MARKER_TEXT = "Too large, see: "

NAME_PATTERN = re.compile(r"<name>(.*)</name>")
DATA_OPEN_PATTERN = re.compile(r"<data>")
DATA_PAYLOAD_PATTERN = re.compile(r"<data>(.*)")
DATA_PREFIX_PATTERN = re.compile(r"(.*<data>)")
DATA_CLOSE_PATTERN = re.compile(r"</data>")
ALREADY_CLEANED_PATTERN = re.compile(r"Too large, see: .*.cleaned.wig")


class ExtractionState(str, Enum):
    IDLE = "idle"
    TRACKING_OTHER_TAG = "tracking_other_tag"
    WIGGLE_HEADER = "wiggle_header"
    WIGGLE_COPYING_DATA = "wiggle_copying_data"


def sidecar_name(wiggle_name: Optional[str]) -> str:
    """Filename of the sidecar holding the payload of ``wiggle_name``."""
    return f"{wiggle_name or ''}{SIDECAR_SUFFIX}"


def marker_line(data_line: str, filename: str) -> str:
    """Rewrite ``data_line`` so its payload is replaced by a pointer to ``filename``.

    Everything up to and including the last ``<data>`` tag is kept, so the
    indentation of the original line survives.
    """
    match = DATA_PREFIX_PATTERN.search(data_line)
    prefix = match.group(1) if match else ""
    return f"{prefix}{MARKER_TEXT}{filename}\n"


class WiggleExtractor:
    """State machine that strips tracked elements and externalises wiggle payloads.

    One instance handles one stream.  Sidecars are created in ``dest_dir``;
    at most one is open at a time, and ``close()`` releases it on any exit
    path, so the extractor is best used as a context manager.
    """

    def __init__(
        self,
        dest_dir: Union[str, Path],
        reporter: Optional[Reporter] = None,
        stats: Optional[RunStats] = None,
        encoding: str = "utf-8",
    ):
        self.dest_dir = Path(dest_dir)
        self.reporter = reporter or ConsoleReporter()
        self.stats = stats if stats is not None else RunStats()
        self.encoding = encoding
        self._filter = LineFilter(stats=self.stats)
        self._wiggle_state = ExtractionState.IDLE
        self.wiggle_name: Optional[str] = None
        self.sidecar: Optional[IO[str]] = None
        self.sidecar_path: Optional[Path] = None

    def __enter__(self) -> "WiggleExtractor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def state(self) -> ExtractionState:
        if not self._filter.is_idle:
            return ExtractionState.TRACKING_OTHER_TAG
        return self._wiggle_state

    def feed(self, line: str) -> Optional[str]:
        """Consume one line; return the line to emit, or None to emit nothing."""
        state = self.state
        if state is ExtractionState.WIGGLE_HEADER:
            return self._feed_header(line)
        if state is ExtractionState.WIGGLE_COPYING_DATA:
            return self._feed_data(line)
        if state is ExtractionState.IDLE and classify(line, include_wiggle=True) is TagKind.WIGGLE_DATA:
            self._wiggle_state = ExtractionState.WIGGLE_HEADER
            log.debug("wiggle element opened at line %d", self.stats.lines_read + 1)
            return self._emit(line)
        return self._filter.feed(line)

    def process(self, lines: Iterable[str]) -> Iterator[str]:
        """Yield the rewritten stream for ``lines``."""
        for line in lines:
            out = self.feed(line)
            if out is not None:
                yield out

    def _emit(self, line: str) -> str:
        self.stats.lines_read += 1
        self.stats.lines_written += 1
        return line

    # ── Header: everything between <wiggle_data> and <data> ────────

    def _feed_header(self, line: str) -> str:
        if DATA_OPEN_PATTERN.search(line):
            return self._start_data(line)

        match = NAME_PATTERN.search(line)
        if match:
            self.wiggle_name = match.group(1)
            log.debug("wiggle name %r", self.wiggle_name)
        return self._emit(line)

    def sidecar_path_for(self, filename: str) -> Path:
        """Location of ``filename`` inside the destination directory.

        Leading slashes are dropped the way a string join onto the directory
        would drop them; a name that still resolves elsewhere (``../``, nested
        directories) is reduced to its final component.
        """
        path = self.dest_dir / filename.lstrip("/")
        if path.resolve().parent != self.dest_dir.resolve():
            log.warning("sidecar name %r leaves %s, using its basename", filename, self.dest_dir)
            path = self.dest_dir / Path(filename).name
        return path

    def _start_data(self, line: str) -> str:
        self.stats.lines_read += 1
        self.stats.lines_written += 1

        payload_match = DATA_PAYLOAD_PATTERN.search(line)
        payload = payload_match.group(1) if payload_match else ""
        filename = sidecar_name(self.wiggle_name)
        path = self.sidecar_path_for(filename)

        if ALREADY_CLEANED_PATTERN.search(payload):
            self.reporter.report(f"Already cleaned wiggle {path}")
            self.stats.wiggles_already_clean += 1
            self.wiggle_name = None
            self._wiggle_state = ExtractionState.IDLE
            return line

        if path.exists():
            # The payload of this element is not written anywhere.
            self.reporter.report(f"Wiggle {path} already exists, skipping!")
            self.stats.sidecar_collisions += 1
        else:
            self.sidecar = open(path, "w", encoding=self.encoding, errors="surrogateescape", newline="")
            self.sidecar_path = path
            self.sidecar.write(payload + "\n")
            self.stats.sidecars_written += 1
            self.stats.wiggles_extracted += 1
            log.info("writing wiggle payload to %s", path)

        self._wiggle_state = ExtractionState.WIGGLE_COPYING_DATA
        return marker_line(line, path.name)

    # ── Data: payload lines up to </data> ──────────────────────────

    def _feed_data(self, line: str) -> Optional[str]:
        if DATA_CLOSE_PATTERN.search(line):
            self._close_sidecar()
            self.wiggle_name = None
            self._wiggle_state = ExtractionState.IDLE
            return self._emit(line)

        self.stats.lines_read += 1
        if self.sidecar is not None:
            self.sidecar.write(line)
        return None

    def _close_sidecar(self) -> None:
        if self.sidecar is not None:
            self.sidecar.close()
            log.debug("closed sidecar %s", self.sidecar_path)
        self.sidecar = None
        self.sidecar_path = None

    def finish(self) -> ExtractionState:
        """Close any open sidecar and return the state the stream ended in."""
        state = self.state
        self.stats.terminal_state = state.value
        if state is not ExtractionState.IDLE:
            log.warning(
                "stream ended in state %s (wiggle=%s, sidecar=%s)",
                state.value, self.wiggle_name, self.sidecar_path,
            )
        self._close_sidecar()
        return state

    def close(self) -> None:
        self._close_sidecar()
