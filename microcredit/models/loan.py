"""Loan and payment models."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from microcredit.models.enums import LoanStatus, PaymentFrequency, PaymentType


@dataclass
class Payment:
    """Money received against a loan."""

    id: str
    loan_id: str
    amount: Decimal
    date: datetime
    type: PaymentType = PaymentType.PARTIAL  # Informational only
    notes: str | None = None


@dataclass
class Loan:
    """Loan contract with its append-only payment history."""

    id: str
    client_id: str
    amount: Decimal  # Principal disbursed
    interest_rate: Decimal  # Percentage applied once over the term
    total_amount: Decimal  # Principal + interest, fixed at creation
    start_date: date
    due_date: date
    frequency: PaymentFrequency
    installments: int
    status: LoanStatus
    payments: list[Payment] = field(default_factory=list)
    notes: str | None = None
    original_loan_id: str | None = None  # Loan this one superseded
