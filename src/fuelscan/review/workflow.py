"""
Review workflow management.
"""

import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Optional

from ..extractors import OCRTextExtractor
from ..ledger import LedgerError, TripLedger
from ..preprocessing import Bitmap, ImageLoadError, preprocess
from ..recognition import (
    RecognitionEngine,
    RecognitionEngineError,
    RecognitionJob,
    RecognitionResult,
)
from .session import (
    INVALID_APPLY_MESSAGE,
    OUT_OF_RANGE_MESSAGE,
    OcrSession,
    SessionPhase,
)
from .validation import parse_positive, range_issues

logger = logging.getLogger(__name__)

SessionListener = Callable[[OcrSession], None]


class InvalidTransitionError(Exception):
    """Operation is not allowed in the current session phase."""

    def __init__(self, operation: str, phase: SessionPhase):
        self.operation = operation
        self.phase = phase
        super().__init__(f"Cannot {operation} while session is {phase.value}")


class ReviewWorkflow:
    """
    Drives one photo import at a time: preprocess → recognize → extract → review → apply.

    Responsibilities:
    - Hold the single active OcrSession
    - Downgrade any import failure to manual entry
    - Gate apply on strictly positive values, flag implausible ones
    - Hand accepted values to the trip ledger
    """

    def __init__(
        self,
        engine: RecognitionEngine,
        ledger: TripLedger,
        preprocessor: Callable[[bytes], Bitmap] = preprocess,
        extractor: Optional[OCRTextExtractor] = None,
    ):
        self.engine = engine
        self.ledger = ledger
        self.preprocessor = preprocessor
        self.extractor = extractor or OCRTextExtractor()
        self.last_applied_trip_id: Optional[str] = None
        # Phase transitions, including the terminal APPLIED / CANCELLED labels
        self.phase_log: list[SessionPhase] = []
        self._session = OcrSession.idle()
        self._listeners: list[SessionListener] = []

    @property
    def session(self) -> OcrSession:
        return self._session

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Call listener with every new session value. Returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _set(self, session: OcrSession) -> None:
        self._session = session
        for listener in list(self._listeners):
            try:
                listener(session)
            except Exception:
                logger.exception(f"Session listener {listener!r} failed")

    def _enter(self, session: OcrSession, label: Optional[SessionPhase] = None) -> None:
        if label is not None:
            self.phase_log.append(label)
        self.phase_log.append(session.phase)
        self._set(session)

    def _require_ready(self, operation: str) -> OcrSession:
        if not self._session.is_ready or self._session.extracted is None:
            raise InvalidTransitionError(operation, self._session.phase)
        return self._session

    async def import_photo(self, target: str, image_bytes: bytes) -> OcrSession:
        """
        Run a photo import for a target trip and land in READY.

        Ignored while another import is RUNNING. Failures never propagate:
        the session reaches READY with no candidates, zero confidence and an
        advisory message. If the caller cancels the import, the session is
        downgraded the same way before the cancellation is re-raised.

        Args:
            target: Trip id, or NEW_TRIP to create a trip on apply
            image_bytes: Raw photo content

        Returns:
            The resulting session
        """
        if self._session.is_running:
            logger.info(f"Import for trip {target} ignored: recognition already running")
            return self._session

        logger.info(f"Starting photo import for trip {target}")
        self._enter(OcrSession.running(target))

        try:
            result = await self._recognize(image_bytes)
            logger.debug(f"Recognized text: {result.text!r}")
            candidates = self.extractor.extract(result.text)
        except (ImageLoadError, RecognitionEngineError) as e:
            logger.warning(f"Photo import failed, manual input required: {e}")
            self._fail_running()
            return self._session
        except Exception:
            logger.exception("Photo import failed unexpectedly, manual input required")
            self._fail_running()
            return self._session
        except BaseException:
            logger.warning(f"Photo import for trip {target} interrupted, manual input required")
            self._fail_running()
            raise

        self._enter(self._session.ready(candidates, result.confidence))

        logger.info(
            f"Import ready: confidence={result.confidence:.1f}, "
            f"km/L candidates={candidates.km_per_liter.display()}, "
            f"distance candidates={candidates.distance.display()}"
        )
        return self._session

    def _fail_running(self) -> None:
        if self._session.is_running:
            self._enter(self._session.failed())

    async def _recognize(self, image_bytes: bytes) -> RecognitionResult:
        bitmap = self.preprocessor(image_bytes)
        job: Optional[RecognitionJob] = None
        try:
            job = self.engine.recognize(bitmap)
            async for percent in job.progress():
                self._set(self._session.with_progress(percent))
            return await job.result()
        finally:
            if job is not None:
                job.cancel()
            bitmap.release()

    def edit(
        self,
        km_per_liter: Optional[str] = None,
        distance_km: Optional[str] = None,
    ) -> OcrSession:
        """
        Change the chosen values. No phase change.

        Args:
            km_per_liter: New km/L value as typed, or None to keep
            distance_km: New distance value as typed, or None to keep
        """
        session = self._require_ready("edit")
        changes = {}
        if km_per_liter is not None:
            changes["chosen_km_per_liter"] = str(km_per_liter)
        if distance_km is not None:
            changes["chosen_distance_km"] = str(distance_km)

        self._set(replace(session, extracted=replace(session.extracted, **changes)))
        return self._session

    def range_issues(self) -> list[str]:
        """Chosen values that are positive but implausible."""
        extracted = self._session.extracted
        if extracted is None:
            return []
        return range_issues(extracted.chosen_km_per_liter, extracted.chosen_distance_km)

    def range_advisory(self) -> str:
        """Non-blocking warning for implausible chosen values, "" when none."""
        return OUT_OF_RANGE_MESSAGE if self.range_issues() else ""

    def apply(self) -> OcrSession:
        """
        Write the chosen values to the target trip.

        Both values must be strictly positive; otherwise the session stays
        READY with a rejection message. Out-of-range values are applied.
        """
        session = self._require_ready("apply")
        extracted = session.extracted

        km_per_liter = parse_positive(extracted.chosen_km_per_liter)
        distance_km = parse_positive(extracted.chosen_distance_km)
        if km_per_liter is None or distance_km is None:
            logger.info(
                f"Apply rejected: km/L={extracted.chosen_km_per_liter!r}, "
                f"distance={extracted.chosen_distance_km!r}"
            )
            self._set(replace(session, message=INVALID_APPLY_MESSAGE))
            return self._session

        for issue in self.range_issues():
            logger.warning(f"Applying implausible value: {issue}")

        try:
            trip_id = self.ledger.apply_values(session.target, km_per_liter, distance_km)
        except LedgerError as e:
            logger.error(f"Apply to trip {session.target} failed: {e}")
            self._set(replace(session, message=str(e)))
            return self._session

        self.last_applied_trip_id = trip_id
        self._enter(OcrSession.idle(), label=SessionPhase.APPLIED)
        return self._session

    def cancel(self) -> OcrSession:
        """Discard the session. Recognition in flight cannot be cancelled."""
        if self._session.is_running:
            raise InvalidTransitionError("cancel", self._session.phase)
        if self._session.phase == SessionPhase.IDLE:
            return self._session

        logger.info(f"Import for trip {self._session.target} cancelled")
        self._enter(OcrSession.idle(), label=SessionPhase.CANCELLED)
        return self._session
