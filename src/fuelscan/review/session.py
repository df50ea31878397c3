"""
OCR review session state.

A session is an immutable value: every workflow transition produces a new
OcrSession instead of mutating the current one.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from ..extractors import TripCandidates, format_number
from .validation import CONFIDENCE_THRESHOLD

LOW_CONFIDENCE_MESSAGE = "Could not confidently detect values. Please input manually."
RECOGNITION_FAILED_MESSAGE = "Couldn't detect, please input manually."
INVALID_APPLY_MESSAGE = "Both values must be greater than 0."
OUT_OF_RANGE_MESSAGE = "Value is outside expected range. You can still apply if this is correct."


class SessionPhase(str, Enum):
    """
    Review session phases.

    IDLE: No import in progress
    RUNNING: Preprocessing and recognition executing
    READY: Candidates available, user reviews and edits
    APPLIED: Values written to the ledger (session discarded)
    CANCELLED: User abandoned the import (session discarded)
    """

    IDLE = "IDLE"
    RUNNING = "RUNNING"
    READY = "READY"
    APPLIED = "APPLIED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class ExtractedValues:
    """Candidates found in the photo, plus the two values the user will apply."""

    candidates: TripCandidates
    chosen_km_per_liter: str = ""
    chosen_distance_km: str = ""

    @classmethod
    def prefilled(cls, candidates: TripCandidates) -> "ExtractedValues":
        """Pre-fill each chosen value with the first candidate, if any."""
        kpl = candidates.km_per_liter.first
        distance = candidates.distance.first
        return cls(
            candidates=candidates,
            chosen_km_per_liter=format_number(kpl) if kpl is not None else "",
            chosen_distance_km=format_number(distance) if distance is not None else "",
        )


@dataclass(frozen=True)
class OcrSession:
    """State of one photo import for a single target trip."""

    phase: SessionPhase = SessionPhase.IDLE
    progress_percent: int = 0
    target: Optional[str] = None
    extracted: Optional[ExtractedValues] = None
    confidence: Optional[float] = None
    message: str = ""

    @classmethod
    def idle(cls) -> "OcrSession":
        return cls()

    @classmethod
    def running(cls, target: str) -> "OcrSession":
        return cls(phase=SessionPhase.RUNNING, target=target)

    def with_progress(self, percent: int) -> "OcrSession":
        return replace(self, progress_percent=max(0, min(100, int(percent))))

    def ready(self, candidates: TripCandidates, confidence: float) -> "OcrSession":
        """Enter READY with the extraction results pre-filled."""
        session = replace(
            self,
            phase=SessionPhase.READY,
            extracted=ExtractedValues.prefilled(candidates),
            confidence=confidence,
            message="",
        )
        if session.low_confidence or session.no_candidates:
            session = replace(session, message=LOW_CONFIDENCE_MESSAGE)
        return session

    def failed(self) -> "OcrSession":
        """Enter READY with nothing detected, so the user can type the values."""
        return replace(
            self,
            phase=SessionPhase.READY,
            extracted=ExtractedValues(candidates=TripCandidates()),
            confidence=0.0,
            message=RECOGNITION_FAILED_MESSAGE,
        )

    @property
    def is_running(self) -> bool:
        return self.phase == SessionPhase.RUNNING

    @property
    def is_ready(self) -> bool:
        return self.phase == SessionPhase.READY

    @property
    def low_confidence(self) -> bool:
        return self.confidence is not None and self.confidence < CONFIDENCE_THRESHOLD

    @property
    def no_candidates(self) -> bool:
        return self.extracted is not None and self.extracted.candidates.is_empty

    def confidence_display(self) -> str:
        if self.confidence is None:
            return "N/A"
        return f"{self.confidence:.1f}%"
