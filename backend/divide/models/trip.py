"""
Trip model: a named group of people sharing expenses over several outings.
"""
from sqlalchemy import Column, String, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from divide.db.base import BaseModel


class Trip(BaseModel):
    """Trip model representing a group travel event."""
    __tablename__ = "trips"
    
    name = Column(String(200), nullable=False)
    currency = Column(String(3), nullable=False, default="COP")  # Display currency, no conversion
    
    # Relationships
    people = relationship(
        "TripPerson", back_populates="trip", cascade="all, delete-orphan",
        order_by="TripPerson.id"
    )
    outings = relationship(
        "Outing", back_populates="trip", cascade="all, delete-orphan",
        order_by="Outing.id"
    )


class TripPerson(BaseModel):
    """A person on the trip's roster."""
    __tablename__ = "trip_people"
    __table_args__ = (UniqueConstraint("trip_id", "name", name="uq_trip_people_trip_name"),)
    
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    
    # Relationships
    trip = relationship("Trip", back_populates="people")
    outing_participations = relationship(
        "OutingParticipant", back_populates="person", cascade="all, delete-orphan"
    )
    expenses_paid = relationship("Expense", back_populates="payer", cascade="all, delete-orphan")
