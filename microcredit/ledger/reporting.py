"""Read-only portfolio reporting over the ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Protocol

from microcredit.ledger.loans import is_active, remaining_balance, total_paid
from microcredit.models import Loan, LoanStatus
from microcredit.store.repositories import ClientRepository, LoanRepository

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
UNKNOWN_CLIENT = "Unknown"
ADVICE_UNAVAILABLE = "Sorry, portfolio advice is not available right now. Please try again later."

# Statuses shown in the status distribution; RENEGOTIATED is left out on purpose
DISTRIBUTION_STATUSES = (LoanStatus.PAID, LoanStatus.LATE, LoanStatus.PENDING)


@dataclass
class DashboardStats:
    """Figures for the home screen, counted over active loans only."""

    active_loans: int = 0
    due_today: int = 0
    amount_due_today: Decimal = ZERO
    amount_late: Decimal = ZERO
    due_today_loan_ids: list[str] = field(default_factory=list)


@dataclass
class CashFlowTotals:
    principal: Decimal = ZERO
    received: Decimal = ZERO
    projected: Decimal = ZERO
    pending: Decimal = ZERO
    profit_estimate: Decimal = ZERO


@dataclass
class MonthlyFlow:
    month: str  # YYYY-MM
    money_in: Decimal = ZERO
    money_out: Decimal = ZERO


@dataclass
class ClientStats:
    client_id: str
    name: str
    loan_count: int = 0
    total_lent: Decimal = ZERO
    late_count: int = 0


@dataclass
class AdvisoryStats:
    """Aggregates handed to the narrative advisor."""

    total: int
    pending: int
    late: int
    paid: int
    total_amount: Decimal
    outstanding: Decimal

    @property
    def default_rate(self) -> Decimal:
        """Percentage of loans currently LATE."""
        if self.total == 0:
            return ZERO
        return Decimal(self.late) * 100 / Decimal(self.total)


class Advisor(Protocol):
    """Produces free-text advice from portfolio aggregates."""

    def analyze(self, stats: AdvisoryStats) -> str: ...


def _shift_month(year: int, month: int, back: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) - back
    return index // 12, index % 12 + 1


def request_advice(advisor: Advisor, stats: AdvisoryStats) -> str:
    """Ask the advisor for a narrative, returning an apology on any failure."""
    try:
        return advisor.analyze(stats) or ADVICE_UNAVAILABLE
    except Exception:
        logger.warning("Portfolio advisor failed", exc_info=True)
        return ADVICE_UNAVAILABLE


class PortfolioReport:
    """Aggregate views of the loan book.

    The report reads statuses as stored; run the late sweep first so
    overdue loans are already LATE.
    """

    def __init__(
        self,
        loans: LoanRepository,
        clients: ClientRepository,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.loans = loans
        self.clients = clients
        self.clock = clock

    def dashboard(self, today: date | None = None) -> DashboardStats:
        today = today or self.clock().date()
        stats = DashboardStats()
        for loan in self.loans.list():
            if not is_active(loan.status):
                continue
            stats.active_loans += 1
            remaining = remaining_balance(loan)
            if loan.due_date == today:
                stats.due_today += 1
                stats.amount_due_today += remaining
                stats.due_today_loan_ids.append(loan.id)
            if loan.status == LoanStatus.LATE or loan.due_date < today:
                stats.amount_late += remaining
        return stats

    def cash_flow(self) -> CashFlowTotals:
        totals = CashFlowTotals()
        for loan in self.loans.list():
            totals.principal += loan.amount
            totals.received += total_paid(loan)
            totals.projected += loan.total_amount
            if is_active(loan.status):
                totals.pending += remaining_balance(loan)
        totals.profit_estimate = totals.projected - totals.principal
        return totals

    def status_distribution(self) -> dict[LoanStatus, int]:
        counts = {status: 0 for status in DISTRIBUTION_STATUSES}
        for loan in self.loans.list():
            if loan.status in counts:
                counts[loan.status] += 1
        return counts

    def monthly_flow(self, months: int = 5) -> list[MonthlyFlow]:
        """Money out (disbursed principal) and in (payments) per month, oldest first."""
        today = self.clock().date()
        buckets: dict[str, MonthlyFlow] = {}
        for back in range(months - 1, -1, -1):
            year, month = _shift_month(today.year, today.month, back)
            key = f"{year:04d}-{month:02d}"
            buckets[key] = MonthlyFlow(month=key)

        for loan in self.loans.list():
            out_key = loan.start_date.strftime("%Y-%m")
            if out_key in buckets:
                buckets[out_key].money_out += loan.amount
            for payment in loan.payments:
                in_key = payment.date.strftime("%Y-%m")
                if in_key in buckets:
                    buckets[in_key].money_in += payment.amount

        return list(buckets.values())

    def client_stats(self) -> list[ClientStats]:
        names = {client.id: client.name for client in self.clients.list()}
        stats: dict[str, ClientStats] = {}
        for loan in self.loans.list():
            entry = stats.get(loan.client_id)
            if entry is None:
                entry = ClientStats(
                    client_id=loan.client_id,
                    name=names.get(loan.client_id, UNKNOWN_CLIENT),
                )
                stats[loan.client_id] = entry
            entry.loan_count += 1
            entry.total_lent += loan.amount
            if loan.status == LoanStatus.LATE:
                entry.late_count += 1
        return list(stats.values())

    def top_clients(self, n: int = 3) -> list[ClientStats]:
        return sorted(self.client_stats(), key=lambda s: s.total_lent, reverse=True)[:n]

    def late_clients(self, n: int = 3) -> list[ClientStats]:
        late = [s for s in self.client_stats() if s.late_count > 0]
        return sorted(late, key=lambda s: s.late_count, reverse=True)[:n]

    def advisory_stats(self) -> AdvisoryStats:
        loans = self.loans.list()
        return AdvisoryStats(
            total=len(loans),
            pending=_count(loans, LoanStatus.PENDING),
            late=_count(loans, LoanStatus.LATE),
            paid=_count(loans, LoanStatus.PAID),
            total_amount=sum((loan.total_amount for loan in loans), ZERO),
            outstanding=sum(
                (remaining_balance(loan) for loan in loans if is_active(loan.status)), ZERO
            ),
        )

    def summary(self) -> dict[str, Any]:
        """Flat summary for logging and the demo script."""
        flow = self.cash_flow()
        return {
            "loans": len(self.loans.list()),
            "clients": len(self.clients.list()),
            "status_distribution": {s.value: c for s, c in self.status_distribution().items()},
            "principal": flow.principal,
            "received": flow.received,
            "pending": flow.pending,
            "profit_estimate": flow.profit_estimate,
        }


def _count(loans: list[Loan], status: LoanStatus) -> int:
    return sum(1 for loan in loans if loan.status == status)
