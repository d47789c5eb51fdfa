"""
Pydantic schemas for settlement calculation.
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import List, Dict
from decimal import Decimal


class ExpenseInput(BaseModel):
    """Schema for one expense handed to the calculator."""
    amount: Decimal = Field(gt=0)
    payer: str
    description: str = ""


class SettlementRequest(BaseModel):
    """Schema for a single-outing settlement calculation."""
    participants: List[str]
    expenses: List[ExpenseInput] = []
    currency: str = "COP"
    
    @field_validator("participants")
    @classmethod
    def unique_participants(cls, v):
        """Reject duplicate participant identifiers."""
        if len(set(v)) != len(v):
            raise ValueError("participants must be unique")
        return v
    
    @model_validator(mode="after")
    def payers_are_participants(self):
        """Every payer must be one of the participants."""
        known = set(self.participants)
        unknown = sorted({e.payer for e in self.expenses if e.payer not in known})
        if unknown:
            raise ValueError(f"unknown payers: {', '.join(unknown)}")
        return self


class OutingInput(BaseModel):
    """Schema for one outing inside a trip summary request."""
    name: str = ""
    participants: List[str]
    expenses: List[ExpenseInput] = []

    @field_validator("participants")
    @classmethod
    def unique_participants(cls, v):
        """Reject an outing listing the same person twice."""
        if len(set(v)) != len(v):
            raise ValueError("outing participants must be unique")
        return v

    @model_validator(mode="after")
    def payers_are_participants(self):
        known = set(self.participants)
        unknown = sorted({e.payer for e in self.expenses if e.payer not in known})
        if unknown:
            raise ValueError(f"unknown payers in outing '{self.name}': {', '.join(unknown)}")
        return self


class TripSummaryRequest(BaseModel):
    """Schema for a trip-level aggregation over several outings."""
    people: List[str]
    outings: List[OutingInput] = []
    currency: str = "COP"
    
    @model_validator(mode="after")
    def outings_use_roster(self):
        """Outing participants must come from the trip's roster."""
        roster = set(self.people)
        if len(roster) != len(self.people):
            raise ValueError("people must be unique")
        for outing in self.outings:
            strangers = sorted(set(outing.participants) - roster)
            if strangers:
                raise ValueError(f"not on the trip: {', '.join(strangers)}")
        return self


class Transfer(BaseModel):
    """Schema for a single transfer in settlement."""
    model_config = {"populate_by_name": True}
    
    from_participant: str = Field(alias="from")
    to_participant: str = Field(alias="to")
    amount: float


class SettlementResponse(BaseModel):
    """Schema for an outing settlement result."""
    total: float
    share: float
    balances: Dict[str, float]  # participant -> signed balance
    settlements: List[Transfer]
    is_even: bool
    summary: str


class TripSummaryResponse(BaseModel):
    """Schema for a trip-level settlement summary."""
    total: float
    balances: Dict[str, float]
    settlements: List[Transfer]
    is_even: bool
    summary: str
