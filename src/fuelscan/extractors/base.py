"""
Candidate types shared by extractors.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional


def unique_positive(values: Iterable[float]) -> tuple[float, ...]:
    """Deduplicate, keeping first-seen order and only finite values > 0."""
    seen: list[float] = []
    for value in values:
        if math.isfinite(value) and value > 0 and value not in seen:
            seen.append(value)
    return tuple(seen)


def format_number(value: float) -> str:
    """Render a candidate the way a user would type it: 120.0 -> "120"."""
    if value == int(value):
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class CandidateSet:
    """
    Plausible values for one target quantity.

    values are finite, strictly positive, deduplicated and in first-seen
    order. An empty set means nothing was detected.
    """

    raw_text: str
    values: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", unique_positive(self.values))

    @property
    def first(self) -> Optional[float]:
        return self.values[0] if self.values else None

    def display(self) -> str:
        if not self.values:
            return "None"
        return ", ".join(format_number(v) for v in self.values)

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class TripCandidates:
    """Candidates for both trip readings found in one recognized text."""

    raw_text: str = ""
    km_per_liter: CandidateSet = field(default_factory=lambda: CandidateSet(raw_text=""))
    distance: CandidateSet = field(default_factory=lambda: CandidateSet(raw_text=""))

    @property
    def is_empty(self) -> bool:
        return not self.km_per_liter.values and not self.distance.values

    def to_dict(self) -> dict:
        return {
            "raw_text": self.raw_text,
            "km_per_liter_candidates": list(self.km_per_liter.values),
            "distance_candidates": list(self.distance.values),
        }
