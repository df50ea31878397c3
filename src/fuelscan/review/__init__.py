"""
Human-in-the-loop review module.

Provides:
- ReviewWorkflow: single-session import coordinator
- OcrSession / SessionPhase: immutable session state
- Validation: apply gate and plausibility ranges
"""

from .session import ExtractedValues, OcrSession, SessionPhase
from .validation import (
    CONFIDENCE_THRESHOLD,
    DISTANCE_RANGE,
    KM_PER_LITER_RANGE,
    PlausibleRange,
    parse_positive,
)
from .workflow import InvalidTransitionError, ReviewWorkflow

__all__ = [
    "CONFIDENCE_THRESHOLD",
    "DISTANCE_RANGE",
    "ExtractedValues",
    "InvalidTransitionError",
    "KM_PER_LITER_RANGE",
    "OcrSession",
    "PlausibleRange",
    "ReviewWorkflow",
    "SessionPhase",
    "parse_positive",
]
