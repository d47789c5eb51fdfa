"""
Settlement calculation routes.

These endpoints are stateless: the caller posts participants and expenses
and gets balances and transfers back. Nothing is stored.
"""
from fastapi import APIRouter
from divide.schemas.settlement import (
    SettlementRequest, SettlementResponse, TripSummaryRequest,
    TripSummaryResponse, Transfer
)
from divide.services.settlement_service import (
    ExpenseItem, OutingSnapshot, SettlementOutcome, TripSummary,
    build_summary, calculate_settlement, calculate_trip_summary
)

router = APIRouter(prefix="/settlement", tags=["settlement"])


def _transfers(result):
    return [
        Transfer(
            from_participant=str(t.from_participant),
            to_participant=str(t.to_participant),
            amount=t.amount
        )
        for t in result.settlements
    ]


def settlement_response(outcome: SettlementOutcome, currency: str, title: str = None) -> SettlementResponse:
    """Build the API response for an outing settlement."""
    return SettlementResponse(
        total=outcome.total,
        share=outcome.share,
        balances={str(p): b for p, b in outcome.balances.items()},
        settlements=_transfers(outcome),
        is_even=outcome.is_even,
        summary=build_summary(outcome, currency, title=title)
    )


def trip_summary_response(summary: TripSummary, currency: str, title: str = None) -> TripSummaryResponse:
    """Build the API response for a trip summary."""
    return TripSummaryResponse(
        total=summary.total,
        balances={str(p): b for p, b in summary.balances.items()},
        settlements=_transfers(summary),
        is_even=summary.is_even,
        summary=build_summary(summary, currency, title=title)
    )


@router.post("/calculate", response_model=SettlementResponse)
async def calculate(request: SettlementRequest):
    """Calculate balances and transfers for one group of participants."""
    expenses = [ExpenseItem(e.amount, e.payer, e.description) for e in request.expenses]
    outcome = calculate_settlement(request.participants, expenses)
    return settlement_response(outcome, request.currency)


@router.post("/trip-summary", response_model=TripSummaryResponse)
async def trip_summary(request: TripSummaryRequest):
    """Aggregate several outings and settle the whole trip at once."""
    outings = [
        OutingSnapshot(
            participants=o.participants,
            expenses=[ExpenseItem(e.amount, e.payer, e.description) for e in o.expenses],
            name=o.name
        )
        for o in request.outings
    ]
    summary = calculate_trip_summary(outings, request.people)
    return trip_summary_response(summary, request.currency)
