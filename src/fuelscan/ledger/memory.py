"""
In-memory trip ledger.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..extractors import format_number
from .base import NEW_TRIP, TripLedger, TripNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class Trip:
    """Trip record. Readings are kept as the numeric strings a form would hold."""

    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    date: str = field(default_factory=lambda: date.today().isoformat())
    label: str = ""
    km_per_liter: str = ""
    distance_km: str = ""


class InMemoryTripLedger(TripLedger):
    """Trip ledger kept in a list, in insertion order."""

    def __init__(self, trips: Optional[list[Trip]] = None):
        self._trips: list[Trip] = list(trips or [])

    @property
    def trips(self) -> list[Trip]:
        return list(self._trips)

    def add_trip(self, label: str = "") -> Trip:
        trip = Trip(label=label)
        self._trips.append(trip)
        return trip

    def get(self, trip_id: str) -> Optional[Trip]:
        for trip in self._trips:
            if trip.id == trip_id:
                return trip
        return None

    def apply_values(self, target: str, km_per_liter: float, distance_km: float) -> str:
        if not (km_per_liter > 0) or not (distance_km > 0):
            raise ValueError("Both values must be greater than 0")

        if target == NEW_TRIP:
            trip = self.add_trip()
        else:
            trip = self.get(target)
            if trip is None:
                raise TripNotFoundError(target)

        trip.km_per_liter = format_number(km_per_liter)
        trip.distance_km = format_number(distance_km)
        logger.info(
            f"Applied km/L={trip.km_per_liter} distance={trip.distance_km} to trip {trip.id}"
        )
        return trip.id
