"""Demo portfolio scenario: a small loan book with realistic history."""

from __future__ import annotations

import logging
import random
from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import Any

from microcredit.book import MicrocreditBook
from microcredit.config import LedgerSettings
from microcredit.generators import ClientGenerator, LoanTermsGenerator
from microcredit.ledger.loans import is_active, remaining_balance
from microcredit.models import Loan, LoanStatus, PaymentType
from microcredit.store import InMemoryKeyValueStore

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class DemoPortfolioScenario:
    """Populate a book with clients, loans and their payment history.

    This scenario creates:
    - Clients with Brazilian names, phones and CPFs
    - One to three loans per client, issued over the last 90 days
    - Full payments, partial payments and cancellations
    - Overdue loans marked LATE by the sweep, some of them renegotiated
    """

    def __init__(
        self,
        num_clients: int = 20,
        max_loans_per_client: int = 3,
        paid_rate: float = 0.40,
        partial_rate: float = 0.30,
        cancel_rate: float = 0.05,
        renegotiate_rate: float = 0.25,
        seed: int | None = None,
        *,
        book: MicrocreditBook | None = None,
        settings: LedgerSettings | None = None,
    ) -> None:
        """Initialize the scenario.

        Parameters
        ----------
        num_clients : int
            Number of clients to register.
        max_loans_per_client : int
            Upper bound of loans issued per client.
        paid_rate : float
            Share of loans paid in full.
        partial_rate : float
            Share of loans with one partial payment.
        cancel_rate : float
            Share of loans cancelled.
        renegotiate_rate : float
            Share of LATE loans renegotiated after the sweep.
        seed : int | None
            Random seed for reproducibility.
        book : MicrocreditBook | None
            Book to populate. Defaults to a fresh in-memory book.
        settings : LedgerSettings | None
            Settings for the default book.
        """
        self.num_clients = num_clients
        self.max_loans_per_client = max_loans_per_client
        self.paid_rate = paid_rate
        self.partial_rate = partial_rate
        self.cancel_rate = cancel_rate
        self.renegotiate_rate = renegotiate_rate
        self.seed = seed

        self._random = random.Random(seed)
        self.book = book or MicrocreditBook(InMemoryKeyValueStore(), settings)
        self._client_gen = ClientGenerator(seed=seed)
        self._terms_gen = LoanTermsGenerator(seed=seed)

    def generate(self) -> MicrocreditBook:
        """Generate the whole book.

        Returns
        -------
        MicrocreditBook
            The populated book.
        """
        now = self.book.clock()
        logger.info(
            "Starting demo portfolio: %d clients, starting capital %s",
            self.num_clients,
            self.book.capital.get_balance(),
        )

        for client in self._client_gen.generate_batch(self.num_clients, now):
            self.book.clients.add_client(client)
            for _ in range(self._random.randint(1, self.max_loans_per_client)):
                self._issue_with_history(client.id, now)

        late = self.book.scheduler.sweep_late_loans(now.date())

        renegotiated = 0
        for loan in late:
            if self._random.random() < self.renegotiate_rate:
                self.book.renegotiation.renegotiate(
                    loan.id,
                    extra_days=self._random.choice([15, 30]),
                    extra_rate_pct=Decimal(self._random.choice([5, 10])),
                )
                renegotiated += 1

        logger.info(
            "Generated %d loans (%d late, %d renegotiated), capital now %s",
            len(self.book.ledger.list_loans()),
            len(late) - renegotiated,
            renegotiated,
            self.book.capital.get_balance(),
        )
        return self.book

    def _issue_with_history(self, client_id: str, now: datetime) -> Loan:
        terms = self._terms_gen.generate()
        start = now.date() - timedelta(days=self._random.randint(0, 90))
        loan = self.book.ledger.create_loan(
            client_id,
            terms.principal,
            terms.interest_rate_pct,
            terms.term_days,
            terms.frequency,
            start_date=start,
        )

        roll = self._random.random()
        paid_on = datetime.combine(start + timedelta(days=self._random.randint(0, terms.term_days)), time(12))
        paid_on = min(paid_on, now)

        if roll < self.paid_rate:
            return self.book.payments.add_payment(
                loan.id, remaining_balance(loan), date=paid_on, type=PaymentType.FULL
            )
        if roll < self.paid_rate + self.partial_rate:
            share = Decimal(self._random.randint(20, 80)) / 100
            return self.book.payments.add_payment(
                loan.id, (loan.total_amount * share).quantize(CENT), date=paid_on
            )
        if roll < self.paid_rate + self.partial_rate + self.cancel_rate:
            return self.book.ledger.cancel_loan(loan.id)
        return loan

    def get_portfolio_summary(self) -> dict[str, Any]:
        """Summary statistics for the generated book."""
        summary = self.book.report().summary()
        summary["capital_balance"] = self.book.capital.get_balance()
        summary["active_loans"] = sum(
            1 for loan in self.book.ledger.list_loans() if is_active(loan.status)
        )
        summary["renegotiated_loans"] = len(self.book.ledger.list_loans(LoanStatus.RENEGOTIATED))
        return summary
