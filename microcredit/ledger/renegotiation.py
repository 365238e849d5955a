"""Renegotiation: retire a loan and issue its successor."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable

from microcredit.exceptions import InvalidEntityStateError
from microcredit.ledger.capital import CapitalAccount
from microcredit.ledger.loans import LoanLedger, next_status, remaining_balance
from microcredit.models import Loan, LoanEvent

logger = logging.getLogger(__name__)


class RenegotiationEngine:
    """Re-paper an outstanding balance as a new loan.

    The successor is issued through the regular creation path, which
    debits its principal from capital. No cash actually leaves the
    business, so the same amount is credited straight back and the net
    capital effect is zero.
    """

    def __init__(
        self,
        ledger: LoanLedger,
        capital: CapitalAccount,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.ledger = ledger
        self.capital = capital
        self.clock = clock

    def renegotiate(self, loan_id: str, extra_days: int, extra_rate_pct: Decimal) -> Loan:
        """Close ``loan_id`` as RENEGOTIATED and return the successor loan.

        Parameters
        ----------
        loan_id : str
            Loan to retire. Must be PENDING or LATE.
        extra_days : int
            Term of the successor, counted from today.
        extra_rate_pct : Decimal
            Interest applied once over the remaining balance.

        Raises
        ------
        EntityNotFoundError
            If the loan does not exist.
        InvalidEntityStateError
            If the loan is not active, already has a successor, or has
            nothing left to pay.
        """
        source = self.ledger.require_loan(loan_id)
        retired_status = next_status(source.status, LoanEvent.RENEGOTIATE)

        successors = [loan for loan in self.ledger.list_loans() if loan.original_loan_id == loan_id]
        if successors:
            raise InvalidEntityStateError(
                f"Loan {loan_id} was already renegotiated into {successors[0].id}"
            )

        remaining = remaining_balance(source)
        if remaining <= 0:
            raise InvalidEntityStateError(f"Loan {loan_id} has no remaining balance to renegotiate")

        # Issue first: creation rejects an unknown client before the source is retired
        successor = self.ledger.create_loan(
            source.client_id,
            remaining,
            extra_rate_pct,
            extra_days,
            source.frequency,
            notes=f"Renegotiation of loan {source.id}",
            start_date=self.clock().date(),
            installments=1,
            original_loan_id=source.id,
        )
        self.capital.adjust(remaining, reason="renegotiation", reference_id=successor.id)

        source.status = retired_status
        self.ledger.save_loan(source)

        logger.info(
            "Renegotiated loan %s into %s: balance %s, new total %s, due %s",
            source.id,
            successor.id,
            remaining,
            successor.total_amount,
            successor.due_date,
        )
        return successor
