"""
Review validation rules.

Hard gate: both chosen values must be strictly positive numbers.
Soft advisory: values outside the plausible ranges are flagged, never blocked.
"""

import math
import re
from dataclasses import dataclass
from typing import Optional

# Decimal or exponent literal; ASCII digits only, no digit separators
DECIMAL_LITERAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
# Unsigned hex, octal or binary literal
PREFIXED_LITERAL = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")

# Below this engine confidence (0-100) the user is asked to check the values
CONFIDENCE_THRESHOLD = 50.0


@dataclass(frozen=True)
class PlausibleRange:
    """Inclusive range of values expected for a reading."""

    label: str
    minimum: float
    maximum: float

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum

    def describe(self) -> str:
        return f"{self.label} expected range: {self.minimum:g} to {self.maximum:g}"


KM_PER_LITER_RANGE = PlausibleRange("km/L", 3, 60)
DISTANCE_RANGE = PlausibleRange("Distance", 0.1, 1000)


def parse_positive(value: str) -> Optional[float]:
    """Parse a user-entered value; None unless it is a finite number > 0."""
    text = str(value).strip()
    if DECIMAL_LITERAL.fullmatch(text):
        number = float(text)
    elif PREFIXED_LITERAL.fullmatch(text):
        try:
            number = float(int(text, 0))
        except OverflowError:
            return None
    else:
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def range_issues(km_per_liter: str, distance_km: str) -> list[str]:
    """
    List readings that parse as positive but fall outside their plausible range.

    Values that do not parse are left to the apply gate.
    """
    issues = []
    for value, expected in ((km_per_liter, KM_PER_LITER_RANGE), (distance_km, DISTANCE_RANGE)):
        number = parse_positive(value)
        if number is not None and not expected.contains(number):
            issues.append(f"{expected.label} {value} is outside range. {expected.describe()}")
    return issues
