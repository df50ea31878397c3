"""
Text recognition adapters.

Provides:
- RecognitionEngine: capability interface (bitmap in, text + confidence out)
- RecognitionJob: handle resolving to the result, with a progress stream
- TesseractEngine: local Tesseract via pytesseract
- StaticEngine: fixed result, for tests and known-text runs

Engines are swappable; nothing downstream depends on a concrete engine.
"""

from .base import (
    DEFAULT_LANGUAGE,
    RecognitionEngine,
    RecognitionEngineError,
    RecognitionError,
    RecognitionJob,
    RecognitionResult,
    StaticEngine,
)
from .tesseract import TesseractEngine

__all__ = [
    "DEFAULT_LANGUAGE",
    "RecognitionEngine",
    "RecognitionEngineError",
    "RecognitionError",
    "RecognitionJob",
    "RecognitionResult",
    "StaticEngine",
    "TesseractEngine",
]
