"""Streaming redaction and wiggle extraction for chadoxml files."""

from .config import Config
from .errors import (
    ChadoxmlError,
    ConfigurationError,
    SourceNotFoundError,
    DestinationExistsError,
    EmbeddedWiggleError,
    UnterminatedElementError,
)
from .tags import TagKind, classify, still_open
from .line_filter import LineFilter
from .wiggle import WiggleExtractor, ExtractionState
from .preflight import embedded_wiggle_count
from .reporter import Reporter, ConsoleReporter, CommandReporter, make_reporter
from .stats import RunStats
from .stripper import ChadoxmlStripper
from .extractor import MetadataExtractor

__version__ = "0.1.0"
__all__ = [
    "Config",
    "ChadoxmlError",
    "ConfigurationError",
    "SourceNotFoundError",
    "DestinationExistsError",
    "EmbeddedWiggleError",
    "UnterminatedElementError",
    "TagKind",
    "classify",
    "still_open",
    "LineFilter",
    "WiggleExtractor",
    "ExtractionState",
    "embedded_wiggle_count",
    "Reporter",
    "ConsoleReporter",
    "CommandReporter",
    "make_reporter",
    "RunStats",
    "ChadoxmlStripper",
    "MetadataExtractor",
]
