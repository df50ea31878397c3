"""Test fixtures and utilities."""

import io
from collections.abc import Callable

import pytest
from PIL import Image

from fuelscan.ledger import InMemoryTripLedger

# Sample OCR text for testing
SAMPLE_DASHBOARD_TEXT = """
TRIP A
Distance: 120.4 km
Avg. Fuel  14.5 km/L
Range 380 km
"""

SAMPLE_RECEIPT_TEXT = """
PETRON STATION 0412
Date 2024-11-18  08:14

UNLEADED        32.10 L
Price/L         62.50
Total PHP     2,006.25

Odometer 45210 km
Trip: 412.8
Avg km/L: 12.9
"""


@pytest.fixture
def sample_dashboard_text() -> str:
    """Dashboard trip computer OCR text."""
    return SAMPLE_DASHBOARD_TEXT


@pytest.fixture
def sample_receipt_text() -> str:
    """Fuel receipt OCR text."""
    return SAMPLE_RECEIPT_TEXT


@pytest.fixture
def make_image_bytes() -> Callable[..., bytes]:
    """Build an in-memory PNG filled with a single color."""

    def _make(color=(255, 0, 0, 255), size=(4, 3), mode="RGBA", fmt="PNG") -> bytes:
        image = Image.new(mode, size, color)
        buffer = io.BytesIO()
        image.save(buffer, format=fmt)
        return buffer.getvalue()

    return _make


@pytest.fixture
def image_bytes(make_image_bytes) -> bytes:
    """A small valid PNG."""
    return make_image_bytes()


@pytest.fixture
def ledger() -> InMemoryTripLedger:
    """Empty in-memory trip ledger."""
    return InMemoryTripLedger()
