"""Marker tokens and the pattern objects used to filter an annotated map."""

import re
from dataclasses import dataclass, field

FIELD_ID_START = "[FIELD-ID-START]"
FIELD_ID_END = "[FIELD-ID-END]"
FIELD_TYPE_START = "[FIELD-TYPE-START]"
FIELD_TYPE_END = "[FIELD-TYPE-END]"
UNUSED_START = "[UNUSED-START]"
UNUSED_END = "[UNUSED-END]"

ALL_MARKERS = (
    FIELD_ID_START,
    FIELD_ID_END,
    FIELD_TYPE_START,
    FIELD_TYPE_END,
    UNUSED_START,
    UNUSED_END,
)

# Leading glyphs of the two line-level patterns
DEPENDS_ON_GLYPH = "╚═"
DEPENDS_ON_ARROW = "═> "
USED_BY_PREFIX = "└─> IS USED BY "


@dataclass(frozen=True)
class MarkerPair:
    """A START/END token pair delimiting a span of the annotated text.

    ``trailing`` is the pattern consumed right after the END token when the
    whole span is removed.
    """

    name: str
    start: str
    end: str
    trailing: str = r"\s*"
    span: re.Pattern = field(init=False, repr=False, compare=False)
    tokens: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        span = re.compile(
            re.escape(self.start) + r".*?" + re.escape(self.end) + self.trailing,
            re.DOTALL,
        )
        tokens = re.compile(re.escape(self.start) + "|" + re.escape(self.end))
        # frozen dataclass: bypass __setattr__ for derived fields
        object.__setattr__(self, "span", span)
        object.__setattr__(self, "tokens", tokens)

    def remove_spans(self, text: str) -> str:
        """Drop every START..END span, enclosed text included."""
        return self.span.sub("", text)

    def strip_tokens(self, text: str) -> str:
        """Drop the START/END tokens but keep what they enclose."""
        return self.tokens.sub("", text)


@dataclass(frozen=True)
class LinePattern:
    """A whole line recognised by its leading glyph sequence."""

    name: str
    regex: str
    pattern: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # The line terminator goes with the line
        pattern = re.compile(r"^[ \t]*" + self.regex + r".*$(?:\r?\n)?", re.MULTILINE)
        object.__setattr__(self, "pattern", pattern)

    def matches(self, line: str) -> bool:
        return self.pattern.match(line) is not None

    def remove_lines(self, text: str) -> str:
        return self.pattern.sub("", text)


FIELD_ID = MarkerPair("field_id", FIELD_ID_START, FIELD_ID_END)
FIELD_TYPE = MarkerPair("field_type", FIELD_TYPE_START, FIELD_TYPE_END)
# An unused block takes its line terminator and any blank lines after it
UNUSED = MarkerPair("unused", UNUSED_START, UNUSED_END, trailing=r"(?:[ \t]*\r?\n)*")

DEPENDS_ON = LinePattern(
    "depends_on",
    re.escape(DEPENDS_ON_GLYPH) + r"\[[^\]\n]*\]" + re.escape(DEPENDS_ON_ARROW),
)
USED_BY = LinePattern("used_by", re.escape(USED_BY_PREFIX))


def contains_markers(text: str) -> bool:
    return any(marker in text for marker in ALL_MARKERS)
