"""
Trip service for trip, people, outing and expense business logic.

Mutations validate their input here so the settlement service can assume
positive amounts and payers that belong to the scope.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional
from sqlalchemy.orm import Session
from divide.core.config import settings
from divide.core.money import CURRENCIES, round2, to_decimal
from divide.core.utils import normalize_name
from divide.models.trip import Trip, TripPerson
from divide.models.outing import Outing, OutingParticipant
from divide.models.expense import Expense
from divide.services.settlement_service import (
    ExpenseItem,
    OutingSnapshot,
    SettlementOutcome,
    TripSummary,
    calculate_settlement,
    calculate_trip_summary,
)

logger = logging.getLogger(__name__)

DEFAULT_OUTING_NAME = "Outing"


class TripServiceError(Exception):
    """Base error for rejected trip operations."""


class NotFoundError(TripServiceError):
    """Referenced trip, person, outing or expense does not exist."""


class InvalidOperationError(TripServiceError):
    """The operation breaks a trip rule (duplicate name, bad amount, ...)."""


def _reject(message: str):
    logger.warning(message)
    raise InvalidOperationError(message)


def get_trip(trip_id: int, db: Session) -> Trip:
    trip = db.query(Trip).filter(Trip.id == trip_id).first()
    if not trip:
        raise NotFoundError("Trip not found")
    return trip


def get_outing(trip: Trip, outing_id: int, db: Session) -> Outing:
    outing = db.query(Outing).filter(
        Outing.id == outing_id,
        Outing.trip_id == trip.id
    ).first()
    if not outing:
        raise NotFoundError("Outing not found")
    return outing


def get_person(trip: Trip, person_id: int, db: Session) -> TripPerson:
    person = db.query(TripPerson).filter(
        TripPerson.id == person_id,
        TripPerson.trip_id == trip.id
    ).first()
    if not person:
        raise NotFoundError("Person not found")
    return person


def list_trips(db: Session) -> List[Trip]:
    return db.query(Trip).order_by(Trip.created_at.desc(), Trip.id.desc()).all()


def create_trip(name: str, currency: Optional[str], db: Session) -> Trip:
    """Create a trip with an empty roster."""
    name = (name or "").strip()
    if not name:
        _reject("Trip name is required")

    currency = (currency or settings.DEFAULT_CURRENCY).strip().upper()
    if currency not in CURRENCIES:
        _reject(f"Unsupported currency: {currency}")

    trip = Trip(name=name, currency=currency)
    db.add(trip)
    db.commit()
    db.refresh(trip)
    logger.info(f"Created trip {trip.id} '{trip.name}' ({trip.currency})")
    return trip


def delete_trip(trip: Trip, db: Session):
    """Delete a trip with its roster, outings and expenses."""
    trip_id = trip.id
    db.delete(trip)
    db.commit()
    logger.info(f"Deleted trip {trip_id}")


def add_person(trip: Trip, name: str, db: Session) -> TripPerson:
    """Add a person to the roster under their normalized name."""
    normalized = normalize_name(name)
    if not normalized:
        _reject("Person name is required")
    if any(p.name == normalized for p in trip.people):
        _reject(f"'{normalized}' is already on this trip")

    person = TripPerson(trip_id=trip.id, name=normalized)
    db.add(person)
    db.commit()
    db.refresh(person)
    db.refresh(trip)
    return person


def remove_person(trip: Trip, person_id: int, db: Session):
    """
    Remove a person from the roster.

    Their attendance in every outing and every expense they paid go with them.
    """
    person = get_person(trip, person_id, db)
    db.delete(person)
    db.commit()
    db.refresh(trip)
    logger.info(f"Removed person {person_id} from trip {trip.id}")


def add_outing(trip: Trip, name: str, db: Session) -> Outing:
    """Create an outing attended by everyone currently on the roster."""
    name = (name or "").strip() or DEFAULT_OUTING_NAME

    outing = Outing(trip_id=trip.id, name=name)
    db.add(outing)
    db.flush()

    for person in trip.people:
        db.add(OutingParticipant(outing_id=outing.id, person_id=person.id))

    db.commit()
    db.refresh(outing)
    return outing


def remove_outing(trip: Trip, outing_id: int, db: Session):
    outing = get_outing(trip, outing_id, db)
    db.delete(outing)
    db.commit()
    db.refresh(trip)


def toggle_outing_participant(outing: Outing, person: TripPerson, db: Session) -> Outing:
    """
    Add the person to the outing, or take them out if they attend.

    Taking someone out drops the expenses they paid in that outing. The last
    remaining participant cannot be taken out.
    """
    membership = next((op for op in outing.participants if op.person_id == person.id), None)

    if membership is None:
        db.add(OutingParticipant(outing_id=outing.id, person_id=person.id))
    else:
        if len(outing.participants) <= 1:
            _reject("An outing needs at least one participant")
        db.delete(membership)
        db.query(Expense).filter(
            Expense.outing_id == outing.id,
            Expense.payer_id == person.id
        ).delete(synchronize_session=False)

    db.commit()
    db.refresh(outing)
    return outing


def add_expense(outing: Outing, description: str, amount: Any, payer_name: str, db: Session) -> Expense:
    """Record an expense paid by one of the outing's participants."""
    description = (description or "").strip()
    if not description:
        _reject("Expense description is required")

    try:
        amount = to_decimal(amount)
    except (InvalidOperation, ValueError):
        _reject(f"Invalid amount: {amount}")
    if not amount.is_finite() or amount <= 0:
        _reject("Expense amount must be greater than zero")

    payer_name = normalize_name(payer_name)
    payer = next((op.person for op in outing.participants if op.person.name == payer_name), None)
    if payer is None:
        _reject(f"'{payer_name}' is not a participant of this outing")

    expense = Expense(
        outing_id=outing.id,
        payer_id=payer.id,
        description=description,
        amount=round2(amount)
    )
    db.add(expense)
    db.commit()
    db.refresh(expense)
    db.refresh(outing)
    return expense


def remove_expense(outing: Outing, expense_id: int, db: Session):
    expense = db.query(Expense).filter(
        Expense.id == expense_id,
        Expense.outing_id == outing.id
    ).first()
    if not expense:
        raise NotFoundError("Expense not found")
    db.delete(expense)
    db.commit()
    db.refresh(outing)


def outing_snapshot(outing: Outing) -> OutingSnapshot:
    """Plain participants/expenses of an outing, keyed by person name."""
    return OutingSnapshot(
        participants=[op.person.name for op in outing.participants],
        expenses=[
            ExpenseItem(amount=Decimal(e.amount), payer=e.payer.name, description=e.description)
            for e in outing.expenses
        ],
        name=outing.name,
    )


def get_outing_settlement(outing: Outing) -> SettlementOutcome:
    snapshot = outing_snapshot(outing)
    return calculate_settlement(snapshot.participants, snapshot.expenses)


def get_trip_summary(trip: Trip) -> TripSummary:
    outings = [outing_snapshot(o) for o in trip.outings]
    return calculate_trip_summary(outings, [p.name for p in trip.people])
