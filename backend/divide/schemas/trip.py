"""
Pydantic schemas for Trip, people, outings and expenses.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal


class TripCreate(BaseModel):
    """Schema for trip creation."""
    name: str
    currency: Optional[str] = None  # Falls back to DEFAULT_CURRENCY


class PersonCreate(BaseModel):
    """Schema for adding a person to the roster."""
    name: str


class PersonResponse(BaseModel):
    """Schema for person response."""
    id: int
    name: str
    
    class Config:
        from_attributes = True


class OutingCreate(BaseModel):
    """Schema for outing creation."""
    name: str


class ExpenseCreate(BaseModel):
    """Schema for expense creation."""
    description: str
    amount: Decimal = Field(gt=0)
    payer: str  # Name of a person attending the outing


class ExpenseResponse(BaseModel):
    """Schema for expense response."""
    id: int
    description: str
    amount: float
    payer_id: int
    payer: str


class OutingResponse(BaseModel):
    """Schema for outing response with attendees and expenses."""
    id: int
    name: str
    participants: List[PersonResponse] = []
    expenses: List[ExpenseResponse] = []


class TripResponse(BaseModel):
    """Schema for trip response."""
    id: int
    name: str
    currency: str
    created_at: datetime
    updated_at: datetime
    
    class Config:
        from_attributes = True


class TripDetailResponse(TripResponse):
    """Schema for detailed trip response with roster and outings."""
    people: List[PersonResponse] = []
    outings: List[OutingResponse] = []
