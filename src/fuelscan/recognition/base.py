"""
Recognition engine interface and common types.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Coroutine
from dataclasses import dataclass
from typing import Any, Optional

from ..preprocessing import Bitmap

logger = logging.getLogger(__name__)

# Single language hint; multi-language recognition is not supported
DEFAULT_LANGUAGE = "eng"


class RecognitionError(Exception):
    """Base exception for recognition errors."""

    pass


class RecognitionEngineError(RecognitionError):
    """External engine failed or returned no data."""

    pass


@dataclass(frozen=True)
class RecognitionResult:
    """Text recognized in one image, with the engine's overall confidence (0-100)."""

    text: str
    confidence: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidence", min(100.0, max(0.0, float(self.confidence))))


class RecognitionJob:
    """
    Handle for a single in-flight recognition call.

    Resolves to the final RecognitionResult and exposes the intermediate
    progress percentages as an async stream. Progress is best-effort:
    an engine may report nothing at all.
    """

    def __init__(self) -> None:
        self._updates: asyncio.Queue[Optional[int]] = asyncio.Queue()
        self._percent = 0
        self._task: Optional[asyncio.Task] = None

    def _start(self, work: Coroutine[Any, Any, Optional[RecognitionResult]]) -> None:
        self._task = asyncio.ensure_future(self._run(work))

    async def _run(
        self, work: Coroutine[Any, Any, Optional[RecognitionResult]]
    ) -> Optional[RecognitionResult]:
        try:
            return await work
        finally:
            self._updates.put_nowait(None)

    @property
    def percent(self) -> int:
        """Last reported progress."""
        return self._percent

    def report_progress(self, percent: float) -> None:
        """Publish a progress update; values below the last one are dropped."""
        value = max(0, min(100, int(round(percent))))
        if value < self._percent:
            return
        self._percent = value
        self._updates.put_nowait(value)

    async def progress(self) -> AsyncIterator[int]:
        """Yield progress percentages until the engine finishes."""
        while True:
            value = await self._updates.get()
            if value is None:
                return
            yield value

    async def result(self) -> RecognitionResult:
        """
        Wait for the engine to finish.

        Raises:
            RecognitionEngineError: If the engine raised or returned no data
        """
        if self._task is None:
            raise RecognitionEngineError("Recognition job was never started")

        try:
            result = await self._task
        except RecognitionEngineError:
            raise
        except Exception as e:
            raise RecognitionEngineError(f"Recognition engine failed: {e}") from e

        if result is None:
            raise RecognitionEngineError("Recognition engine returned no data")
        return result

    def cancel(self) -> None:
        """Stop the engine call if it is still in flight. No-op once finished."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            self._updates.put_nowait(None)


class RecognitionEngine(ABC):
    """
    Base class for recognition engines.

    Engines are black boxes: bitmap in, text + confidence out. Each call to
    recognize() invokes the underlying engine exactly once, without retries.
    """

    language: str = DEFAULT_LANGUAGE

    @property
    @abstractmethod
    def name(self) -> str:
        """Engine name for logging."""
        pass

    @abstractmethod
    async def _recognize(self, bitmap: Bitmap, job: RecognitionJob) -> Optional[RecognitionResult]:
        """
        Run the engine on a bitmap.

        Args:
            bitmap: Preprocessed bitmap
            job: Handle to publish progress on

        Returns:
            RecognitionResult, or None if the engine produced no data
        """
        pass

    def recognize(self, bitmap: Bitmap) -> RecognitionJob:
        """Start recognition. Must be called from a running event loop."""
        logger.debug(f"Starting {self.name} recognition on {bitmap.width}x{bitmap.height} bitmap")
        job = RecognitionJob()
        job._start(self._recognize(bitmap, job))
        return job


class StaticEngine(RecognitionEngine):
    """
    Engine that returns a fixed result.

    Used to drive the review workflow from known text, without an OCR binary.
    """

    def __init__(
        self,
        text: str = "",
        confidence: float = 100.0,
        progress_steps: tuple[int, ...] = (),
        error: Optional[Exception] = None,
    ):
        self.text = text
        self.confidence = confidence
        self.progress_steps = progress_steps
        self.error = error
        self.calls = 0

    @property
    def name(self) -> str:
        return "static"

    async def _recognize(self, bitmap: Bitmap, job: RecognitionJob) -> Optional[RecognitionResult]:
        self.calls += 1
        for step in self.progress_steps:
            job.report_progress(step)
            await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return RecognitionResult(text=self.text, confidence=self.confidence)
