"""
Expense model for tracking spending.
"""
from sqlalchemy import Column, Numeric, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from divide.db.base import BaseModel


class Expense(BaseModel):
    """Expense paid by one person, split equally among the outing's participants."""
    __tablename__ = "expenses"
    
    outing_id = Column(Integer, ForeignKey("outings.id"), nullable=False, index=True)
    payer_id = Column(Integer, ForeignKey("trip_people.id"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    description = Column(Text, nullable=False)
    
    # Relationships
    outing = relationship("Outing", back_populates="expenses")
    payer = relationship("TripPerson", back_populates="expenses_paid")
