"""Payment recording: append, recapitalize, settle."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Callable

from microcredit.exceptions import InvalidEntityStateError
from microcredit.ledger.capital import CapitalAccount, loan_profit
from microcredit.ledger.loans import LoanLedger, apply_transition, is_active, is_frozen, total_paid
from microcredit.models import Event, Loan, LoanEvent, Payment, PaymentType
from microcredit.store.serialization import parse_decimal

logger = logging.getLogger(__name__)

LOAN_PAID_EVENT = "loan.paid"

EventListener = Callable[[Event], None]


class PaymentRecorder:
    """Record payments against loans.

    Every payment is credited to capital in full, including any
    overpayment. When cumulative payments reach the loan total (within
    ``paid_tolerance``) an active loan becomes PAID and a ``loan.paid``
    event is sent to the subscribed listeners, which is where callers
    hook profit distribution.
    """

    def __init__(
        self,
        ledger: LoanLedger,
        capital: CapitalAccount,
        paid_tolerance: Decimal = Decimal("0.1"),
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.ledger = ledger
        self.capital = capital
        self.paid_tolerance = paid_tolerance
        self.clock = clock
        self._listeners: list[EventListener] = []

    def subscribe(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    def add_payment(
        self,
        loan_id: str,
        amount: Decimal,
        date: datetime | None = None,
        type: PaymentType = PaymentType.PARTIAL,
        notes: str | None = None,
    ) -> Loan:
        """Append a payment to a loan and return the updated loan.

        Raises
        ------
        EntityNotFoundError
            If the loan does not exist.
        InvalidEntityStateError
            If the loan is RENEGOTIATED or CANCELLED.
        """
        amount = parse_decimal(amount)
        loan = self.ledger.require_loan(loan_id)
        if is_frozen(loan.status):
            raise InvalidEntityStateError(
                f"Loan {loan_id} is {loan.status.value} and accepts no payments"
            )

        payment = Payment(
            id=str(uuid.uuid4()),
            loan_id=loan_id,
            amount=amount,
            date=date or self.clock(),
            type=type,
            notes=notes,
        )
        loan.payments.append(payment)
        self.capital.adjust(amount, reason="payment", reference_id=payment.id)

        previous_status = loan.status
        paid = total_paid(loan)
        just_paid = is_active(loan.status) and paid >= loan.total_amount - self.paid_tolerance
        if just_paid:
            apply_transition(loan, LoanEvent.SETTLE)

        self.ledger.save_loan(loan)
        logger.info(
            "Recorded payment %s of %s on loan %s (paid %s of %s)",
            payment.id,
            amount,
            loan_id,
            paid,
            loan.total_amount,
        )

        if just_paid:
            logger.info("Loan %s is now PAID", loan_id)
            self._emit(
                Event(
                    event_id=str(uuid.uuid4()),
                    event_type=LOAN_PAID_EVENT,
                    event_time=self.clock(),
                    source="payment_recorder",
                    subject=loan_id,
                    data={
                        "previous_status": previous_status.value,
                        "total_paid": paid,
                        "profit": loan_profit(loan),
                        "payment_id": payment.id,
                    },
                )
            )
        return loan

    def _emit(self, event: Event) -> None:
        for listener in self._listeners:
            listener(event)
