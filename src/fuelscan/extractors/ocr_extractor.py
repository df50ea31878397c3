"""
OCR text heuristics extractor for trip readings.

Finds fuel-efficiency (km/L) and distance (km) candidates in noisy
recognized text. Labels can precede or follow the number, so each quantity
has two rule shapes:

- Efficiency: "14.5 km/L", "14.5 km per L", "km/L: 14.5"
- Distance: "120 km", "Distance: 120", "Trip = 120"

A bare "<number> km" is dropped when an efficiency marker sits close by,
so "12.5 km/L" never becomes a 12.5 km distance.
"""

import logging
import re
from collections.abc import Callable, Iterator, Sequence

from .base import CandidateSet, TripCandidates
from .tokenizer import Token, TokenKind, tokenize

logger = logging.getLogger(__name__)

# Exclusion window around a bare-unit distance match (characters)
EFFICIENCY_WINDOW_BEFORE = 8
EFFICIENCY_WINDOW_AFTER = 12

EFFICIENCY_MARKER = re.compile(r"/\s*l|per\s*l|km/l|km l")

Rule = Callable[[Sequence[Token], int], Token | None]


def normalize_text(raw_text: str) -> str:
    """Collapse whitespace runs to a single space and trim."""
    return re.sub(r"\s+", " ", raw_text or "").strip()


def near_efficiency_unit(text: str, position: int) -> bool:
    """True if an efficiency marker occurs in the window around position."""
    start = max(0, position - EFFICIENCY_WINDOW_BEFORE)
    window = text[start : position + EFFICIENCY_WINDOW_AFTER]
    return EFFICIENCY_MARKER.search(window) is not None


def _kind_at(tokens: Sequence[Token], index: int) -> TokenKind | None:
    if 0 <= index < len(tokens):
        return tokens[index].kind
    return None


def number_before(unit: TokenKind) -> Rule:
    """Rule: NUMBER immediately followed by unit."""

    def rule(tokens: Sequence[Token], i: int) -> Token | None:
        if tokens[i].kind == TokenKind.NUMBER and _kind_at(tokens, i + 1) == unit:
            return tokens[i]
        return None

    return rule


def number_after(label: TokenKind) -> Rule:
    """Rule: label, optional separator, then NUMBER."""

    def rule(tokens: Sequence[Token], i: int) -> Token | None:
        if tokens[i].kind != label:
            return None
        j = i + 1
        if _kind_at(tokens, j) == TokenKind.SEPARATOR:
            j += 1
        if _kind_at(tokens, j) == TokenKind.NUMBER:
            return tokens[j]
        return None

    return rule


EFFICIENCY_RULES = (
    number_before(TokenKind.EFFICIENCY_UNIT),
    number_after(TokenKind.EFFICIENCY_UNIT),
)
BARE_DISTANCE_RULE = number_before(TokenKind.DISTANCE_UNIT)
KEYWORD_DISTANCE_RULE = number_after(TokenKind.DISTANCE_KEYWORD)


def apply_rule(tokens: Sequence[Token], rule: Rule) -> Iterator[Token]:
    """Yield the number token of every match of rule, left to right."""
    for i in range(len(tokens)):
        match = rule(tokens, i)
        if match is not None:
            yield match


class OCRTextExtractor:
    """
    Extract trip reading candidates from recognized text.

    Pure and total: any input, including empty text, yields a result.
    """

    @property
    def name(self) -> str:
        return "ocr_heuristic"

    def can_extract(self, content: str) -> bool:
        return bool(content and content.strip())

    def extract(self, content: str) -> TripCandidates:
        """Extract km/L and distance candidates from content."""
        text = normalize_text(content)
        lower = text.lower()
        tokens = list(tokenize(lower))

        km_per_liter = [
            token.number for rule in EFFICIENCY_RULES for token in apply_rule(tokens, rule)
        ]

        distance = []
        for token in apply_rule(tokens, BARE_DISTANCE_RULE):
            if near_efficiency_unit(lower, token.start):
                logger.debug(f"Skipping distance {token.text}: efficiency unit nearby")
                continue
            distance.append(token.number)
        distance.extend(token.number for token in apply_rule(tokens, KEYWORD_DISTANCE_RULE))

        result = TripCandidates(
            raw_text=text,
            km_per_liter=CandidateSet(raw_text=text, values=tuple(km_per_liter)),
            distance=CandidateSet(raw_text=text, values=tuple(distance)),
        )
        logger.debug(
            f"Extracted km/L={list(result.km_per_liter.values)} "
            f"distance={list(result.distance.values)}"
        )
        return result


_default_extractor = OCRTextExtractor()


def extract_candidates(raw_text: str) -> TripCandidates:
    """Extract trip reading candidates from recognized text."""
    return _default_extractor.extract(raw_text)
