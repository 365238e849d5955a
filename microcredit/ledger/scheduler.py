"""Time-driven PENDING -> LATE sweep."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable

from microcredit.ledger.loans import apply_transition
from microcredit.models import Loan, LoanEvent, LoanStatus
from microcredit.store.repositories import LoanRepository

logger = logging.getLogger(__name__)


class StatusScheduler:
    """Mark overdue loans as LATE.

    Must run before anything aggregates statuses: loans are only ever
    created PENDING, so LATE exists only once a sweep has run.
    """

    def __init__(
        self,
        loans: LoanRepository,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.loans = loans
        self.clock = clock

    def sweep_late_loans(self, today: date | None = None) -> list[Loan]:
        """Move every PENDING loan due before ``today`` to LATE.

        Idempotent. Terminal statuses are never touched. The collection
        is rewritten once, and only if something changed.

        Returns
        -------
        list[Loan]
            Loans that became LATE in this sweep.
        """
        today = today or self.clock().date()
        loans = self.loans.list()
        changed = []
        for loan in loans:
            if loan.status == LoanStatus.PENDING and loan.due_date < today:
                apply_transition(loan, LoanEvent.OVERDUE)
                changed.append(loan)

        if changed:
            self.loans.replace_all(loans)
        logger.info("Late sweep for %s: %d loans marked LATE", today, len(changed))
        return changed
