"""
Trip reading extractors.

Provides:
- OCRTextExtractor: token rules over recognized text
- extract_candidates: module-level shortcut
- CandidateSet / TripCandidates: extraction results
"""

from .base import CandidateSet, TripCandidates, format_number
from .ocr_extractor import OCRTextExtractor, extract_candidates, normalize_text
from .tokenizer import Token, TokenKind, tokenize

__all__ = [
    "CandidateSet",
    "OCRTextExtractor",
    "Token",
    "TokenKind",
    "TripCandidates",
    "extract_candidates",
    "format_number",
    "normalize_text",
    "tokenize",
]
