"""Capital account: the shared pool of lendable cash."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable

from microcredit.exceptions import InvalidEntityStateError
from microcredit.models import Loan, LoanStatus
from microcredit.store.repositories import ConfigRepository

logger = logging.getLogger(__name__)


@dataclass
class CapitalMovement:
    """One change to the capital balance."""

    delta: Decimal
    balance_after: Decimal
    reason: str  # disbursement, payment, renegotiation, manual, profit_withdrawal
    reference_id: str | None
    recorded_at: datetime


class CapitalAccount:
    """Liquid funds available to lend.

    The balance lives in the persisted config record and every call
    re-reads and rewrites that record before returning. No sign or
    magnitude checks are made: a negative balance means the business
    has lent more than it holds, and callers decide what to do about it.

    Each mutation is also appended to an in-session journal so the
    deltas applied since the account was opened can be reconciled
    against the balance.
    """

    def __init__(
        self,
        config: ConfigRepository,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.config = config
        self.clock = clock
        self._journal: list[CapitalMovement] = []

    def get_balance(self) -> Decimal:
        return self.config.get().capital_balance

    def set_balance(self, value: Decimal, reason: str = "manual") -> Decimal:
        """Override the balance, e.g. after counting the cash box."""
        record = self.config.get()
        delta = value - record.capital_balance
        record.capital_balance = value
        self.config.save(record)
        self._record(delta, value, reason, None)
        logger.info("Capital balance set to %s (delta %s)", value, delta)
        return value

    def adjust(
        self,
        delta: Decimal,
        reason: str = "adjustment",
        reference_id: str | None = None,
    ) -> Decimal:
        """Apply a relative change: positive credits, negative debits.

        Returns
        -------
        Decimal
            The new balance.
        """
        record = self.config.get()
        record.capital_balance += delta
        self.config.save(record)
        self._record(delta, record.capital_balance, reason, reference_id)
        logger.debug(
            "Capital %+f (%s, ref=%s) -> %s", delta, reason, reference_id, record.capital_balance
        )
        return record.capital_balance

    def record_replaced(self, previous: Decimal, reason: str = "import") -> Decimal:
        """Journal a balance written behind the account, e.g. by a restore.

        Nothing is persisted: the stored balance is only compared with
        ``previous`` and the difference recorded.
        """
        current = self.get_balance()
        self._record(current - previous, current, reason, None)
        logger.info("Capital balance replaced by %s: %s -> %s", reason, previous, current)
        return current

    def journal(self) -> list[CapitalMovement]:
        return list(self._journal)

    def journal_total(self) -> Decimal:
        """Sum of every delta applied through this account."""
        return sum((m.delta for m in self._journal), Decimal("0"))

    def _record(
        self, delta: Decimal, balance_after: Decimal, reason: str, reference_id: str | None
    ) -> None:
        self._journal.append(
            CapitalMovement(
                delta=delta,
                balance_after=balance_after,
                reason=reason,
                reference_id=reference_id,
                recorded_at=self.clock(),
            )
        )


def loan_profit(loan: Loan) -> Decimal:
    """Interest earned on a loan once it is settled."""
    return loan.total_amount - loan.amount


def withdraw_profit(account: CapitalAccount, loan: Loan, reinvest_amount: Decimal) -> Decimal:
    """Take the non-reinvested part of a settled loan's profit out of capital.

    Payments already returned principal and interest to the pool, so
    only the withdrawn share is debited.

    Parameters
    ----------
    account : CapitalAccount
        Account to debit.
    loan : Loan
        A loan that has just become PAID.
    reinvest_amount : Decimal
        Part of the profit the operator keeps in the lending pool.

    Returns
    -------
    Decimal
        Amount withdrawn (zero when everything is reinvested).
    """
    if loan.status != LoanStatus.PAID:
        raise InvalidEntityStateError(f"Loan {loan.id} is {loan.status.value}, not PAID")

    withdraw = loan_profit(loan) - reinvest_amount
    if withdraw <= 0:
        return Decimal("0")

    account.adjust(-withdraw, reason="profit_withdrawal", reference_id=loan.id)
    logger.info("Withdrew %s profit from loan %s", withdraw, loan.id)
    return withdraw
