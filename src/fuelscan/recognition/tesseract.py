"""
Tesseract OCR engine (pytesseract).
"""

import asyncio
import logging
from typing import Any, Optional

import pytesseract

from ..preprocessing import Bitmap
from .base import RecognitionEngine, RecognitionEngineError, RecognitionJob, RecognitionResult

logger = logging.getLogger(__name__)

# OEM 3 = default engine, PSM 6 = uniform block of text (receipts, displays)
DEFAULT_TESSERACT_CONFIG = "--oem 3 --psm 6"


def text_from_data(data: dict[str, list[Any]]) -> str:
    """Rebuild text from image_to_data output: words per line, lines per block."""
    lines: dict[tuple[int, int, int], list[str]] = {}
    for i, word in enumerate(data.get("text", [])):
        word = str(word).strip()
        if not word:
            continue
        key = (
            int(data["block_num"][i]),
            int(data["par_num"][i]),
            int(data["line_num"][i]),
        )
        lines.setdefault(key, []).append(word)
    return "\n".join(" ".join(words) for words in lines.values())


def confidence_from_data(data: dict[str, list[Any]]) -> float:
    """Mean word confidence; Tesseract marks non-word boxes with -1."""
    scores = []
    for word, conf in zip(data.get("text", []), data.get("conf", [])):
        try:
            score = float(conf)
        except (TypeError, ValueError):
            continue
        if score >= 0 and str(word).strip():
            scores.append(score)
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


class TesseractEngine(RecognitionEngine):
    """
    Recognize text with a local Tesseract binary.

    Tesseract exposes no progress callback; the job reports 0 when the
    recognizing phase starts and 100 when it completes.
    """

    def __init__(
        self,
        tesseract_cmd: Optional[str] = None,
        tesseract_config: str = DEFAULT_TESSERACT_CONFIG,
        timeout_seconds: float = 0,
    ):
        self.tesseract_cmd = tesseract_cmd
        self.tesseract_config = tesseract_config
        self.timeout_seconds = timeout_seconds

        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    @property
    def name(self) -> str:
        return "tesseract"

    def is_available(self) -> bool:
        """Check whether the Tesseract binary can be found."""
        try:
            version = pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError:
            logger.error(
                "Tesseract OCR binary not found. Please install it:\n"
                "  Linux: sudo apt-get install tesseract-ocr\n"
                "  macOS: brew install tesseract"
            )
            return False
        logger.info(f"Tesseract OCR {version} available")
        return True

    def _image_to_data(self, bitmap: Bitmap) -> dict[str, list[Any]]:
        return pytesseract.image_to_data(
            bitmap.to_image(),
            lang=self.language,
            config=self.tesseract_config,
            timeout=self.timeout_seconds,
            output_type=pytesseract.Output.DICT,
        )

    async def _recognize(self, bitmap: Bitmap, job: RecognitionJob) -> Optional[RecognitionResult]:
        job.report_progress(0)
        loop = asyncio.get_running_loop()
        try:
            data = await loop.run_in_executor(None, self._image_to_data, bitmap)
        except pytesseract.TesseractNotFoundError as e:
            raise RecognitionEngineError("Tesseract OCR binary not found") from e
        except (pytesseract.TesseractError, RuntimeError) as e:
            # pytesseract raises RuntimeError on timeout
            raise RecognitionEngineError(f"Tesseract OCR failed: {e}") from e

        if not data:
            return None

        job.report_progress(100)
        text = text_from_data(data)
        confidence = confidence_from_data(data)
        logger.debug(f"Tesseract recognized {len(text)} chars at {confidence:.1f}% confidence")
        return RecognitionResult(text=text, confidence=confidence)
