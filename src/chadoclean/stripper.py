"""Feature stripper: copy a chadoxml file without its feature elements."""

from pathlib import Path
from typing import Any, Optional, Union

from .config import Config
from .errors import (
    DestinationExistsError,
    EmbeddedWiggleError,
    SourceNotFoundError,
    UnterminatedElementError,
)
from .line_filter import LineFilter
from .logger import get_logger, log_exception
from .preflight import check_no_embedded_wiggles, embedded_wiggle_count
from .reporter import make_reporter
from .stats import RunStats

log = get_logger(__name__)


class ChadoxmlStripper:
    """Copies ``source`` to ``dest``, dropping the six tracked feature elements.

    Wiggle data is NOT handled; run ``embedded_wiggle_count()`` first and
    refuse inputs that still embed payloads.  Messages go to stdout, or to
    ``command_object.stderr`` when a command object is supplied.

    Construction checks the paths right away and reports every problem it
    finds; ``ready`` tells whether stripping can proceed.
    """

    def __init__(
        self,
        source: Union[str, Path],
        dest: Union[str, Path],
        command_object: Any = None,
        config: Optional[Config] = None,
    ):
        self.config = config or Config()
        self.reporter = make_reporter(command_object)
        self.source_path = Path(source)
        self.dest_path = Path(dest)
        self.ready = True

        if not self.source_path.exists():
            self.reporter.report(f" Error: Can't find source file {source}!")
            self.ready = False

        if self.dest_path.exists():
            self.reporter.report(f"Error: destination file {dest} already exists!")
            self.ready = False

    def cmd_puts(self, text: str) -> None:
        """Send one message to whichever sink this stripper was built with."""
        self.reporter.report(text)

    def embedded_wiggle_count(self) -> int:
        return embedded_wiggle_count(self.source_path, self.config.encoding)

    def _check_paths(self) -> None:
        # Re-checked at run time; the files may have changed since __init__
        if not self.source_path.exists():
            raise SourceNotFoundError(self.source_path)
        if self.dest_path.exists():
            raise DestinationExistsError(self.dest_path)

    def strip_features(self, preflight: bool = True) -> RunStats:
        """Copy the source to the destination, stripping out features.

        With ``preflight`` set, a source that still embeds wiggle payloads is
        rejected with EmbeddedWiggleError before the destination is created.
        """
        self._check_paths()
        if preflight:
            try:
                check_no_embedded_wiggles(self.source_path, self.config.encoding)
            except EmbeddedWiggleError as e:
                self.cmd_puts(f"ERROR: {e}")
                raise
        self.cmd_puts("Stripping features from chadoxml file...")

        line_filter = LineFilter()
        encoding = self.config.encoding
        try:
            with open(self.source_path, "r", encoding=encoding, errors="surrogateescape", newline="") as source, \
                    open(self.dest_path, "w", encoding=encoding, errors="surrogateescape", newline="") as dest:
                for line in line_filter.filter(source):
                    dest.write(line)
        except OSError as e:
            log_exception(log, f"stripping {self.source_path} failed", e)
            raise

        open_kind = line_filter.finish()
        stats = line_filter.stats
        log.info("strip finished: %s", stats.to_message())
        self.cmd_puts("Done!")

        if self.config.strict and open_kind.is_open:
            raise UnterminatedElementError(open_kind.value)
        return stats
