"""
Outing model: one event within a trip with its own attendees.
"""
from sqlalchemy import Column, String, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from divide.db.base import BaseModel


class Outing(BaseModel):
    """Outing model; expenses are split among its participants only."""
    __tablename__ = "outings"
    
    trip_id = Column(Integer, ForeignKey("trips.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    
    # Relationships
    trip = relationship("Trip", back_populates="outings")
    participants = relationship(
        "OutingParticipant", back_populates="outing", cascade="all, delete-orphan",
        order_by="OutingParticipant.id"
    )
    expenses = relationship(
        "Expense", back_populates="outing", cascade="all, delete-orphan",
        order_by="Expense.id"
    )


class OutingParticipant(BaseModel):
    """Junction table for Outing and TripPerson many-to-many relationship."""
    __tablename__ = "outing_participants"
    __table_args__ = (UniqueConstraint("outing_id", "person_id", name="uq_outing_participant"),)
    
    outing_id = Column(Integer, ForeignKey("outings.id"), nullable=False, index=True)
    person_id = Column(Integer, ForeignKey("trip_people.id"), nullable=False, index=True)
    
    # Relationships
    outing = relationship("Outing", back_populates="participants")
    person = relationship("TripPerson", back_populates="outing_participations")
