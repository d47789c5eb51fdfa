"""Models package - Import all models for SQLAlchemy registration."""
from divide.models.trip import Trip, TripPerson
from divide.models.outing import Outing, OutingParticipant
from divide.models.expense import Expense

__all__ = [
    "Trip",
    "TripPerson",
    "Outing",
    "OutingParticipant",
    "Expense",
]
