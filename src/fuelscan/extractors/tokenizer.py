"""
Tokenizer for recognized trip text.

Splits lower-cased text into unit markers, keywords, separators and numeric
literals so that extraction rules can be written over tokens instead of raw
substrings. Whitespace is skipped; every token keeps its character offsets
into the text it was produced from.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum


class TokenKind(str, Enum):
    """Token categories."""

    NUMBER = "NUMBER"
    EFFICIENCY_UNIT = "EFFICIENCY_UNIT"  # km/l, km per l
    DISTANCE_UNIT = "DISTANCE_UNIT"  # bare km
    DISTANCE_KEYWORD = "DISTANCE_KEYWORD"  # distance, trip
    SEPARATOR = "SEPARATOR"  # : or =
    WORD = "WORD"
    OTHER = "OTHER"


_EFFICIENCY_UNIT = r"km\s*/\s*l|km\s*per\s*l"
_DISTANCE_KEYWORD = r"distance|trip"

# Order matters: efficiency units must win over the bare distance unit,
# and keywords over plain words. Words stop where a keyword or efficiency
# unit starts, so "roundtrip" and "avgkm/l" still yield the marker.
TOKEN_PATTERNS = [
    (TokenKind.NUMBER, r"\d+(?:\.\d+)?"),
    (TokenKind.EFFICIENCY_UNIT, _EFFICIENCY_UNIT),
    (TokenKind.DISTANCE_UNIT, r"km\b"),
    (TokenKind.DISTANCE_KEYWORD, _DISTANCE_KEYWORD),
    (TokenKind.SEPARATOR, r"[:=]"),
    (TokenKind.WORD, rf"(?:(?!{_DISTANCE_KEYWORD}|{_EFFICIENCY_UNIT})[^\W\d_])+"),
    (TokenKind.OTHER, r"\S"),
]

_MASTER = re.compile(
    "|".join(f"(?P<{kind.value}>{pattern})" for kind, pattern in TOKEN_PATTERNS)
    + r"|(?P<SPACE>\s+)"
)


@dataclass(frozen=True)
class Token:
    """A token and its [start, end) offsets."""

    kind: TokenKind
    text: str
    start: int
    end: int

    @property
    def number(self) -> float:
        return float(self.text)


def tokenize(text: str) -> Iterator[Token]:
    """Yield tokens of text, skipping whitespace."""
    for match in _MASTER.finditer(text):
        kind = match.lastgroup
        if kind == "SPACE":
            continue
        yield Token(TokenKind(kind), match.group(), match.start(), match.end())
