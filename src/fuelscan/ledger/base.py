"""
Trip ledger boundary.

The ledger owns trip records; the review workflow only references a trip by
id and hands over the two accepted readings.
"""

from abc import ABC, abstractmethod

# Target sentinel: create a new trip instead of updating an existing one
NEW_TRIP = "new"


class LedgerError(Exception):
    """Base exception for ledger errors."""

    pass


class TripNotFoundError(LedgerError):
    """Target trip id does not exist in the ledger."""

    def __init__(self, trip_id: str):
        self.trip_id = trip_id
        super().__init__(f"Trip not found: {trip_id}")


class TripLedger(ABC):
    """Narrow apply interface into the trip ledger."""

    @abstractmethod
    def apply_values(self, target: str, km_per_liter: float, distance_km: float) -> str:
        """
        Write accepted readings into a trip.

        Args:
            target: Existing trip id, or NEW_TRIP to create one
            km_per_liter: Fuel efficiency, > 0
            distance_km: Trip distance, > 0

        Returns:
            Id of the trip that was written
        """
        pass
