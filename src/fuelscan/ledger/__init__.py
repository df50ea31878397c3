"""
Trip ledger boundary.

Provides:
- TripLedger: apply interface used by the review workflow
- InMemoryTripLedger: reference implementation
- NEW_TRIP: target sentinel for "create a new trip"
"""

from .base import NEW_TRIP, LedgerError, TripLedger, TripNotFoundError
from .memory import InMemoryTripLedger, Trip

__all__ = [
    "NEW_TRIP",
    "InMemoryTripLedger",
    "LedgerError",
    "Trip",
    "TripLedger",
    "TripNotFoundError",
]
