"""
Photo → Recognized Text → Candidate Readings → Human review → Trip ledger

Recovers a fuel-efficiency figure (km/L) and a trip distance (km) from a
photographed dashboard, receipt or trip log, with confidence gating and an
explicit review step before any value is written to a trip.
"""

__version__ = "0.1.0"
