"""Metadata extractor: strip features and externalise wiggle payloads."""

from pathlib import Path
from typing import Any, Optional, Union

from .config import Config
from .errors import DestinationExistsError, SourceNotFoundError, UnterminatedElementError
from .logger import get_logger, log_exception
from .reporter import make_reporter
from .stats import RunStats
from .wiggle import ExtractionState, WiggleExtractor

log = get_logger(__name__)


class MetadataExtractor:
    """Builds a metadata-only chadoxml file from ``source`` at ``dest``.

    Feature elements are dropped and each embedded wiggle payload is moved
    to ``<name>.cleaned.wig`` in the destination's directory.
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
            self.reporter.report(f"Error: Can't find source file {source}!")
            self.ready = False

        if self.dest_path.exists():
            self.reporter.report(
                f"Error: destination file {self.dest_path.name} already exists at {self.dest_dir}"
            )
            self.ready = False

    @property
    def dest_dir(self) -> Path:
        return self.dest_path.parent

    def extract(self) -> RunStats:
        if not self.source_path.exists():
            raise SourceNotFoundError(self.source_path)
        if self.dest_path.exists():
            raise DestinationExistsError(self.dest_path)

        self.reporter.report("Extracting wiggle data from chadoxml file...")
        encoding = self.config.encoding
        extractor = WiggleExtractor(self.dest_dir, self.reporter, encoding=encoding)
        try:
            with extractor, \
                    open(self.source_path, "r", encoding=encoding, errors="surrogateescape", newline="") as source, \
                    open(self.dest_path, "w", encoding=encoding, errors="surrogateescape", newline="") as dest:
                for line in extractor.process(source):
                    dest.write(line)
                state = extractor.finish()
        except OSError as e:
            log_exception(log, f"extracting {self.source_path} failed", e)
            raise

        stats = extractor.stats
        log.info("extract finished: %s", stats.to_message())
        self.reporter.report("Done!")

        if self.config.strict and state is not ExtractionState.IDLE:
            raise UnterminatedElementError(state.value)
        return stats
