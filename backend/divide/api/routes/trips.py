"""
Trip management routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from divide.db.session import get_db
from divide.core.utils import format_response
from divide.models.trip import Trip
from divide.models.outing import Outing
from divide.schemas.trip import (
    TripCreate, TripResponse, TripDetailResponse, PersonCreate, PersonResponse,
    OutingCreate, OutingResponse, ExpenseCreate, ExpenseResponse
)
from divide.schemas.settlement import SettlementResponse, TripSummaryResponse
from divide.services import trip_service
from divide.api.routes.settlements import settlement_response, trip_summary_response

router = APIRouter(prefix="/trips", tags=["trips"])


def build_outing_response(outing: Outing) -> OutingResponse:
    return OutingResponse(
        id=outing.id,
        name=outing.name,
        participants=[PersonResponse(id=op.person.id, name=op.person.name) for op in outing.participants],
        expenses=[
            ExpenseResponse(
                id=e.id,
                description=e.description,
                amount=e.amount,
                payer_id=e.payer_id,
                payer=e.payer.name
            )
            for e in outing.expenses
        ]
    )


def build_trip_detail(trip: Trip) -> TripDetailResponse:
    return TripDetailResponse(
        id=trip.id,
        name=trip.name,
        currency=trip.currency,
        created_at=trip.created_at,
        updated_at=trip.updated_at,
        people=[PersonResponse.model_validate(p) for p in trip.people],
        outings=[build_outing_response(o) for o in trip.outings]
    )


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(trip_data: TripCreate, db: Session = Depends(get_db)):
    """Create a new trip."""
    return trip_service.create_trip(trip_data.name, trip_data.currency, db=db)


@router.get("", response_model=List[TripResponse])
async def list_trips(db: Session = Depends(get_db)):
    """List all trips, newest first."""
    return trip_service.list_trips(db)


@router.get("/{trip_id}", response_model=TripDetailResponse)
async def get_trip(trip_id: int, db: Session = Depends(get_db)):
    """Get trip details with roster, outings and expenses."""
    trip = trip_service.get_trip(trip_id, db)
    return build_trip_detail(trip)


@router.delete("/{trip_id}")
async def delete_trip(trip_id: int, db: Session = Depends(get_db)):
    """Delete a trip and everything recorded for it."""
    trip = trip_service.get_trip(trip_id, db)
    trip_service.delete_trip(trip, db)
    return format_response({"id": trip_id}, "Trip deleted successfully")


@router.post("/{trip_id}/people", response_model=PersonResponse, status_code=status.HTTP_201_CREATED)
async def add_person(trip_id: int, person_data: PersonCreate, db: Session = Depends(get_db)):
    """Add a person to the trip's roster."""
    trip = trip_service.get_trip(trip_id, db)
    return trip_service.add_person(trip, person_data.name, db)


@router.delete("/{trip_id}/people/{person_id}")
async def remove_person(trip_id: int, person_id: int, db: Session = Depends(get_db)):
    """Remove a person, their attendance and the expenses they paid."""
    trip = trip_service.get_trip(trip_id, db)
    trip_service.remove_person(trip, person_id, db)
    return format_response({"id": person_id}, "Person removed successfully")


@router.post("/{trip_id}/outings", response_model=OutingResponse, status_code=status.HTTP_201_CREATED)
async def add_outing(trip_id: int, outing_data: OutingCreate, db: Session = Depends(get_db)):
    """Create an outing; everyone on the roster attends by default."""
    trip = trip_service.get_trip(trip_id, db)
    outing = trip_service.add_outing(trip, outing_data.name, db)
    return build_outing_response(outing)


@router.delete("/{trip_id}/outings/{outing_id}")
async def remove_outing(trip_id: int, outing_id: int, db: Session = Depends(get_db)):
    """Delete an outing and its expenses."""
    trip = trip_service.get_trip(trip_id, db)
    trip_service.remove_outing(trip, outing_id, db)
    return format_response({"id": outing_id}, "Outing removed successfully")


@router.post("/{trip_id}/outings/{outing_id}/participants/{person_id}", response_model=OutingResponse)
async def toggle_outing_participant(
    trip_id: int,
    outing_id: int,
    person_id: int,
    db: Session = Depends(get_db)
):
    """Toggle whether a person attends an outing."""
    trip = trip_service.get_trip(trip_id, db)
    outing = trip_service.get_outing(trip, outing_id, db)
    person = trip_service.get_person(trip, person_id, db)
    outing = trip_service.toggle_outing_participant(outing, person, db)
    return build_outing_response(outing)


@router.post(
    "/{trip_id}/outings/{outing_id}/expenses",
    response_model=ExpenseResponse,
    status_code=status.HTTP_201_CREATED
)
async def add_expense(
    trip_id: int,
    outing_id: int,
    expense_data: ExpenseCreate,
    db: Session = Depends(get_db)
):
    """Record an expense paid by one of the outing's participants."""
    trip = trip_service.get_trip(trip_id, db)
    outing = trip_service.get_outing(trip, outing_id, db)
    expense = trip_service.add_expense(
        outing, expense_data.description, expense_data.amount, expense_data.payer, db
    )
    return ExpenseResponse(
        id=expense.id,
        description=expense.description,
        amount=expense.amount,
        payer_id=expense.payer_id,
        payer=expense.payer.name
    )


@router.delete("/{trip_id}/outings/{outing_id}/expenses/{expense_id}")
async def remove_expense(
    trip_id: int,
    outing_id: int,
    expense_id: int,
    db: Session = Depends(get_db)
):
    """Delete an expense."""
    trip = trip_service.get_trip(trip_id, db)
    outing = trip_service.get_outing(trip, outing_id, db)
    trip_service.remove_expense(outing, expense_id, db)
    return format_response({"id": expense_id}, "Expense removed successfully")


@router.get("/{trip_id}/outings/{outing_id}/settlement", response_model=SettlementResponse)
async def get_outing_settlement(trip_id: int, outing_id: int, db: Session = Depends(get_db)):
    """Settle a single outing among its attendees."""
    trip = trip_service.get_trip(trip_id, db)
    outing = trip_service.get_outing(trip, outing_id, db)
    outcome = trip_service.get_outing_settlement(outing)
    return settlement_response(outcome, trip.currency, title=outing.name)


@router.get("/{trip_id}/summary", response_model=TripSummaryResponse)
async def get_trip_summary(trip_id: int, db: Session = Depends(get_db)):
    """Settle the whole trip across all outings."""
    trip = trip_service.get_trip(trip_id, db)
    summary = trip_service.get_trip_summary(trip)
    return trip_summary_response(summary, trip.currency, title=trip.name)
