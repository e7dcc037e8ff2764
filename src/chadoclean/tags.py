"""Tag kinds tracked in chadoxml streams and the line matchers for them.

Matching is a regular-expression search anywhere in the line, never an
anchored parse: a line containing an opening tag opens that element no
matter what else is on the line.
"""

import re
from enum import Enum
from typing import Dict, Pattern, Tuple


class TagKind(str, Enum):
    DATA_FEATURE = "datafeature"
    FEATURE = "feature"
    RELATIONSHIP = "relationship"
    ANALYSIS_FEATURE = "analysisfeature"
    FEATURE_LOC = "featureloc"
    FEATURE_PROP = "featureprop"
    WIGGLE_DATA = "wiggledata"
    NONE = "none"

    @property
    def is_open(self) -> bool:
        return self is not TagKind.NONE


# Tried in order; the first hit wins.
OPENING_PATTERNS: Tuple[Tuple[TagKind, Pattern[str]], ...] = (
    (TagKind.DATA_FEATURE, re.compile(r"<data_feature>")),
    (TagKind.FEATURE, re.compile(r"<feature id=.*>")),
    (TagKind.RELATIONSHIP, re.compile(r"<feature_relationship>")),
    (TagKind.ANALYSIS_FEATURE, re.compile(r"<analysisfeature>")),
    (TagKind.FEATURE_LOC, re.compile(r"<featureloc>")),
    (TagKind.FEATURE_PROP, re.compile(r"<featureprop>")),
)

WIGGLE_OPENING_PATTERN: Pattern[str] = re.compile(r"<wiggle_data id=.*>")

CLOSING_PATTERNS: Dict[TagKind, Pattern[str]] = {
    TagKind.DATA_FEATURE: re.compile(r"</data_feature>"),
    TagKind.FEATURE: re.compile(r"</feature>"),
    TagKind.RELATIONSHIP: re.compile(r"</feature_relationship>"),
    TagKind.ANALYSIS_FEATURE: re.compile(r"</analysisfeature>"),
    TagKind.FEATURE_LOC: re.compile(r"</featureloc>"),
    TagKind.FEATURE_PROP: re.compile(r"</featureprop>"),
}


def classify(line: str, include_wiggle: bool = False) -> TagKind:
    """Return the tracked kind whose opening tag appears in ``line``.

    ``<wiggle_data id=...>`` is only recognised when ``include_wiggle`` is
    set; the stripper has no wiggle handling and passes such lines through.
    Returns ``TagKind.NONE`` when nothing matches.
    """
    for kind, pattern in OPENING_PATTERNS:
        if pattern.search(line):
            return kind
    if include_wiggle and WIGGLE_OPENING_PATTERN.search(line):
        return TagKind.WIGGLE_DATA
    return TagKind.NONE


def still_open(line: str, kind: TagKind) -> bool:
    """Return False if ``line`` closes the currently open ``kind``, else True."""
    try:
        pattern = CLOSING_PATTERNS[kind]
    except KeyError:
        raise ValueError(f"No closing tag is tracked for {kind!r}")
    return pattern.search(line) is None
