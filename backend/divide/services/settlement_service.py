"""
Settlement service: equal-split balances and minimal transfer matching.

Everything here is a pure function over plain data. Callers load a snapshot
of participants and expenses, call in, and get fresh results back; nothing
is cached or persisted.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence

from divide.core.money import SETTLED_THRESHOLD, format_amount, round2, to_decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

EVEN_MESSAGE = "Everyone is even!"


class ExpenseItem:
    """A single expense paid by one participant and split among the whole scope."""
    def __init__(self, amount: Any, payer: Hashable, description: str = ""):
        self.amount = to_decimal(amount)
        self.payer = payer
        self.description = description


class Transfer:
    """Represents a single transfer from a debtor to a creditor."""
    def __init__(self, from_participant: Hashable, to_participant: Hashable, amount: Decimal):
        self.from_participant = from_participant
        self.to_participant = to_participant
        self.amount = amount

    def to_dict(self) -> Dict[str, Any]:
        return {"from": self.from_participant, "to": self.to_participant, "amount": self.amount}

    def __eq__(self, other):
        if not isinstance(other, Transfer):
            return NotImplemented
        return (
            self.from_participant == other.from_participant
            and self.to_participant == other.to_participant
            and self.amount == other.amount
        )

    def __repr__(self):
        return f"Transfer({self.from_participant!r} -> {self.to_participant!r}: {self.amount})"


class BalanceSheet:
    """Total, equal share and signed balance per participant for one scope."""
    def __init__(self, total: Decimal, share: Decimal, balances: Dict[Hashable, Decimal]):
        self.total = total
        self.share = share
        self.balances = balances


class SettlementOutcome:
    """Balances plus the transfers that settle them, for a single outing."""
    def __init__(
        self,
        total: Decimal,
        share: Decimal,
        balances: Dict[Hashable, Decimal],
        settlements: List[Transfer],
    ):
        self.total = total
        self.share = share
        self.balances = balances
        self.settlements = settlements

    @property
    def is_even(self) -> bool:
        return not self.settlements

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "share": self.share,
            "balances": dict(self.balances),
            "settlements": [t.to_dict() for t in self.settlements],
        }


class OutingSnapshot:
    """Participants and expenses of one outing, as handed to the trip aggregation."""
    def __init__(self, participants: Sequence[Hashable], expenses: Iterable[Any], name: str = ""):
        self.participants = list(participants)
        self.expenses = list(expenses)
        self.name = name


class TripSummary:
    """Balances summed over every outing of a trip and the trip-level transfers."""
    def __init__(self, total: Decimal, balances: Dict[Hashable, Decimal], settlements: List[Transfer]):
        self.total = total
        self.balances = balances
        self.settlements = settlements

    @property
    def is_even(self) -> bool:
        return not self.settlements

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "balances": dict(self.balances),
            "settlements": [t.to_dict() for t in self.settlements],
        }


def _field(record: Any, name: str) -> Any:
    """Read `name` from a mapping or an attribute-style record."""
    if isinstance(record, Mapping):
        return record[name]
    return getattr(record, name)


def compute_balances(participants: Sequence[Hashable], expenses: Iterable[Any]) -> BalanceSheet:
    """
    Compute each participant's signed balance against an equal split.

    Positive balance = the participant is owed money, negative = owes money.
    Scopes with fewer than two participants or no expenses have nothing to
    settle and yield an empty sheet.
    """
    expenses = list(expenses)
    if len(participants) < 2 or not expenses:
        return BalanceSheet(total=ZERO, share=ZERO, balances={})

    total = sum((to_decimal(_field(e, "amount")) for e in expenses), ZERO)
    share = total / len(participants)

    # How much each participant paid
    paid: Dict[Hashable, Decimal] = {p: ZERO for p in participants}
    for expense in expenses:
        payer = _field(expense, "payer")
        paid[payer] = paid.get(payer, ZERO) + to_decimal(_field(expense, "amount"))

    balances = {p: round2(paid[p] - share) for p in participants}

    logger.debug(
        f"Computed balances for {len(participants)} participants over "
        f"{len(expenses)} expenses: total={total}, share={share}"
    )
    return BalanceSheet(total=total, share=round2(share), balances=balances)


def match_settlements(balances: Mapping[Hashable, Any]) -> List[Transfer]:
    """
    Minimize the number of transfers needed to settle the balances.

    Greedy largest-first matching: the largest creditor is paid by the
    largest debtor, repeatedly. Produces at most
    len(creditors) + len(debtors) - 1 transfers, in match order.
    Equal amounts keep the order of `balances`.
    """
    # Separate creditors (positive balance) and debtors (negative balance)
    creditors = []
    debtors = []
    for participant, balance in balances.items():
        balance = to_decimal(balance)
        if balance > SETTLED_THRESHOLD:
            creditors.append([participant, balance])
        elif balance < -SETTLED_THRESHOLD:
            debtors.append([participant, -balance])  # Store as positive

    # Sort in descending order; sort() is stable so ties keep input order
    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)

    transfers = []
    cred_idx = 0
    debt_idx = 0

    while cred_idx < len(creditors) and debt_idx < len(debtors):
        creditor = creditors[cred_idx]
        debtor = debtors[debt_idx]

        amount = min(creditor[1], debtor[1])
        rounded = round2(amount)
        if rounded > SETTLED_THRESHOLD:
            transfers.append(Transfer(debtor[0], creditor[0], rounded))

        creditor[1] -= amount
        debtor[1] -= amount

        if creditor[1] < SETTLED_THRESHOLD:
            cred_idx += 1
        if debtor[1] < SETTLED_THRESHOLD:
            debt_idx += 1

    return transfers


def calculate_settlement(participants: Sequence[Hashable], expenses: Iterable[Any]) -> SettlementOutcome:
    """Balances and settling transfers for a single outing."""
    sheet = compute_balances(participants, expenses)
    if not sheet.balances:
        return SettlementOutcome(total=ZERO, share=ZERO, balances={}, settlements=[])

    settlements = match_settlements(sheet.balances)
    return SettlementOutcome(
        total=sheet.total,
        share=sheet.share,
        balances=sheet.balances,
        settlements=settlements,
    )


def calculate_trip_summary(outings: Iterable[Any], people: Sequence[Hashable]) -> TripSummary:
    """
    Aggregate every outing of a trip into one set of transfers.

    Each outing is settled on its own attendees, the per-person balances are
    summed over all outings, and the matcher runs once on the sum.
    """
    if len(people) < 2:
        return TripSummary(total=ZERO, balances={}, settlements=[])

    aggregated: Dict[Hashable, Decimal] = {p: ZERO for p in people}
    total_spent = ZERO

    for outing in outings:
        result = calculate_settlement(_field(outing, "participants"), _field(outing, "expenses"))
        total_spent += result.total
        for participant, balance in result.balances.items():
            aggregated[participant] = aggregated.get(participant, ZERO) + balance

    aggregated = {p: round2(balance) for p, balance in aggregated.items()}

    people_with_activity = [p for p, balance in aggregated.items() if abs(balance) > SETTLED_THRESHOLD]
    if len(people_with_activity) < 2:
        logger.debug(f"Trip total {total_spent} needs no transfers")
        return TripSummary(total=total_spent, balances=aggregated, settlements=[])

    settlements = match_settlements(aggregated)
    logger.debug(f"Trip total {total_spent} settled with {len(settlements)} transfers")
    return TripSummary(total=total_spent, balances=aggregated, settlements=settlements)


def build_summary(result: Any, currency: str, title: Optional[str] = None) -> str:
    """
    Render a settlement result (outing or trip) as plain text.

    Balances are listed with a leading "+" for people who are owed money.
    """
    summary_lines = []
    if title:
        summary_lines.append(title)
    summary_lines.append(f"Total expenses: {format_amount(result.total, currency)}")
    share = getattr(result, "share", None)
    if share:
        summary_lines.append(f"Per person: {format_amount(share, currency)}")
    summary_lines.append(f"Participants: {len(result.balances)}")

    if result.balances:
        summary_lines.append("\nNet balances:")
        for participant, balance in result.balances.items():
            prefix = "+" if balance > SETTLED_THRESHOLD else ""
            summary_lines.append(f"  {participant}: {prefix}{format_amount(balance, currency)}")

    summary_lines.append("\nTransfers:")
    if not result.settlements:
        summary_lines.append(f"  {EVEN_MESSAGE}")
    for transfer in result.settlements:
        summary_lines.append(
            f"  {transfer.from_participant} -> {transfer.to_participant}: "
            f"{format_amount(transfer.amount, currency)}"
        )
    return "\n".join(summary_lines)
