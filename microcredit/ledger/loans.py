"""Loan ledger: issuance, derived figures and the status transition table."""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable

from microcredit.exceptions import (
    EntityNotFoundError,
    InvalidEntityStateError,
    ReferentialIntegrityError,
)
from microcredit.ledger.capital import CapitalAccount
from microcredit.models import Loan, LoanEvent, LoanStatus, PaymentFrequency
from microcredit.store.repositories import ClientRepository, LoanRepository
from microcredit.store.serialization import parse_decimal

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")

INSTALLMENTS_BY_FREQUENCY = {
    PaymentFrequency.SINGLE: 1,
    PaymentFrequency.BIWEEKLY: 2,
    PaymentFrequency.WEEKLY: 4,
    PaymentFrequency.MONTHLY: 1,
}

ACTIVE_STATUSES = frozenset({LoanStatus.PENDING, LoanStatus.LATE})

# Statuses that accept no further payments
FROZEN_STATUSES = frozenset({LoanStatus.RENEGOTIATED, LoanStatus.CANCELLED})

TRANSITIONS: dict[tuple[LoanStatus, LoanEvent], LoanStatus] = {
    (LoanStatus.PENDING, LoanEvent.OVERDUE): LoanStatus.LATE,
    (LoanStatus.PENDING, LoanEvent.SETTLE): LoanStatus.PAID,
    (LoanStatus.LATE, LoanEvent.SETTLE): LoanStatus.PAID,
    (LoanStatus.PENDING, LoanEvent.RENEGOTIATE): LoanStatus.RENEGOTIATED,
    (LoanStatus.LATE, LoanEvent.RENEGOTIATE): LoanStatus.RENEGOTIATED,
    (LoanStatus.PENDING, LoanEvent.CANCEL): LoanStatus.CANCELLED,
    (LoanStatus.LATE, LoanEvent.CANCEL): LoanStatus.CANCELLED,
}


def is_active(status: LoanStatus) -> bool:
    """Whether a loan in this status still counts as money on the street."""
    return status in ACTIVE_STATUSES


def is_frozen(status: LoanStatus) -> bool:
    return status in FROZEN_STATUSES


def next_status(status: LoanStatus, event: LoanEvent) -> LoanStatus:
    """Look up the status an event leads to.

    Raises
    ------
    InvalidEntityStateError
        If the event is not allowed from ``status``.
    """
    try:
        return TRANSITIONS[(status, event)]
    except KeyError:
        raise InvalidEntityStateError(
            f"Cannot apply {event.value} to a loan in status {status.value}"
        ) from None


def apply_transition(loan: Loan, event: LoanEvent) -> Loan:
    loan.status = next_status(loan.status, event)
    return loan


def total_paid(loan: Loan) -> Decimal:
    return sum((p.amount for p in loan.payments), Decimal("0"))


def remaining_balance(loan: Loan) -> Decimal:
    """Total amount minus cumulative payments (negative when overpaid)."""
    return loan.total_amount - total_paid(loan)


def progress_pct(loan: Loan) -> Decimal:
    """Share of the total already paid, capped at 100."""
    if loan.total_amount <= 0:
        return HUNDRED
    return min(HUNDRED, HUNDRED * total_paid(loan) / loan.total_amount)


def installment_value(loan: Loan) -> Decimal:
    return loan.total_amount / max(loan.installments, 1)


def compute_total(principal: Decimal, interest_rate_pct: Decimal) -> Decimal:
    """Principal plus one-time interest."""
    return principal * (1 + interest_rate_pct / HUNDRED)


class LoanLedger:
    """Collection of loans and the capital-debit protocol for issuance.

    Parameters
    ----------
    loans : LoanRepository
        Loan persistence.
    clients : ClientRepository
        Used to reject loans for unknown clients.
    capital : CapitalAccount
        Debited by the principal of every loan created.
    clock : Callable[[], datetime]
        Source of "now" for start dates.
    """

    def __init__(
        self,
        loans: LoanRepository,
        clients: ClientRepository,
        capital: CapitalAccount,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.loans = loans
        self.clients = clients
        self.capital = capital
        self.clock = clock

    def create_loan(
        self,
        client_id: str,
        principal: Decimal,
        interest_rate_pct: Decimal,
        term_days: int,
        frequency: PaymentFrequency = PaymentFrequency.SINGLE,
        *,
        notes: str | None = None,
        start_date: date | None = None,
        installments: int | None = None,
        original_loan_id: str | None = None,
    ) -> Loan:
        """Issue a new PENDING loan and debit its principal from capital.

        Over-commitment is not blocked here: callers warn when
        ``principal`` exceeds the current balance. Ints, floats and numeric
        strings are converted to ``Decimal`` through their text form.
        """
        if self.clients.get(client_id) is None:
            raise ReferentialIntegrityError(f"Client {client_id} not found")

        principal = parse_decimal(principal)
        interest_rate_pct = parse_decimal(interest_rate_pct)

        start = start_date or self.clock().date()
        loan = Loan(
            id=str(uuid.uuid4()),
            client_id=client_id,
            amount=principal,
            interest_rate=interest_rate_pct,
            total_amount=compute_total(principal, interest_rate_pct),
            start_date=start,
            due_date=start + timedelta(days=term_days),
            frequency=frequency,
            installments=installments or INSTALLMENTS_BY_FREQUENCY[frequency],
            status=LoanStatus.PENDING,
            notes=notes,
            original_loan_id=original_loan_id,
        )

        self.loans.upsert(loan)
        self.capital.adjust(-principal, reason="disbursement", reference_id=loan.id)
        logger.info(
            "Issued loan %s to client %s: principal %s, total %s, due %s",
            loan.id,
            client_id,
            loan.amount,
            loan.total_amount,
            loan.due_date,
        )
        return loan

    def get_loan(self, loan_id: str) -> Loan | None:
        return self.loans.get(loan_id)

    def require_loan(self, loan_id: str) -> Loan:
        loan = self.loans.get(loan_id)
        if loan is None:
            raise EntityNotFoundError(f"Loan {loan_id} not found")
        return loan

    def list_loans(self, status: LoanStatus | None = None) -> list[Loan]:
        """All loans in insertion order, optionally filtered by status."""
        loans = self.loans.list()
        if status is None:
            return loans
        return [loan for loan in loans if loan.status == status]

    def loans_for_client(self, client_id: str) -> list[Loan]:
        return self.loans.list_for_client(client_id)

    def save_loan(self, loan: Loan) -> Loan:
        """Persist changes to an existing loan. Never touches capital."""
        if self.loans.get(loan.id) is None:
            raise EntityNotFoundError(f"Loan {loan.id} not found")
        self.loans.upsert(loan)
        return loan

    def cancel_loan(self, loan_id: str) -> Loan:
        """Mark an active loan CANCELLED without any capital movement."""
        loan = apply_transition(self.require_loan(loan_id), LoanEvent.CANCEL)
        self.loans.upsert(loan)
        logger.info("Cancelled loan %s", loan_id)
        return loan
