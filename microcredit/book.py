"""Session facade wiring repositories and ledger components together."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable

from microcredit.config import LedgerSettings
from microcredit.exceptions import StorageError
from microcredit.ledger import (
    CapitalAccount,
    ClientRegistry,
    LoanLedger,
    PaymentRecorder,
    PortfolioReport,
    RenegotiationEngine,
    RiskClassifier,
    StatusScheduler,
)
from microcredit.store import (
    ClientRepository,
    ConfigRepository,
    JsonFileKeyValueStore,
    KeyValueStore,
    LoanRepository,
    export_database,
    import_database,
)

logger = logging.getLogger(__name__)


class MicrocreditBook:
    """One operator session over a key-value store.

    Every component receives the same repositories and clock, so tests
    can swap in an in-memory store and a fixed date.
    """

    def __init__(
        self,
        store: KeyValueStore,
        settings: LedgerSettings | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.settings = settings or LedgerSettings()
        self.clock = clock

        self.client_repo = ClientRepository(store)
        self.loan_repo = LoanRepository(store)
        self.config_repo = ConfigRepository(store, self.settings.defaults)

        self.capital = CapitalAccount(self.config_repo, clock=clock)
        self.clients = ClientRegistry(self.client_repo, self.loan_repo, clock=clock)
        self.ledger = LoanLedger(self.loan_repo, self.client_repo, self.capital, clock=clock)
        self.payments = PaymentRecorder(
            self.ledger, self.capital, paid_tolerance=self.settings.paid_tolerance, clock=clock
        )
        self.scheduler = StatusScheduler(self.loan_repo, clock=clock)
        self.renegotiation = RenegotiationEngine(self.ledger, self.capital, clock=clock)
        self.risk = RiskClassifier(self.loan_repo)

    @classmethod
    def open(
        cls,
        store: KeyValueStore | None = None,
        settings: LedgerSettings | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> "MicrocreditBook":
        """Open a session and normalize loan statuses before any read.

        Parameters
        ----------
        store : KeyValueStore | None
            Backing store. Defaults to JSON files under ``settings.storage.data_dir``.
        settings : LedgerSettings | None
            Ledger settings (defaults when omitted).
        clock : Callable[[], datetime]
            Source of "now".
        """
        settings = settings or LedgerSettings()
        if store is None:
            store = JsonFileKeyValueStore(settings.storage.data_dir)
        book = cls(store, settings, clock)
        book.config_repo.get()
        book.scheduler.sweep_late_loans()
        logger.info("Opened book with capital %s", book.capital.get_balance())
        return book

    def report(self) -> PortfolioReport:
        return PortfolioReport(self.loan_repo, self.client_repo, clock=self.clock)

    def export_database(self) -> str:
        return export_database(self.client_repo, self.loan_repo, self.config_repo, self.clock())

    def import_database(self, text: str) -> None:
        """Replace all state with a snapshot, then normalize loan statuses.

        The balance change is journaled with reason ``import`` so the
        capital journal still explains the current balance.
        """
        try:
            previous = self.capital.get_balance()
        except StorageError:
            # Restoring over a corrupt config is how an operator recovers from it
            logger.warning("Stored config unreadable before import; journaling from zero")
            previous = Decimal("0")
        import_database(text, self.client_repo, self.loan_repo, self.config_repo)
        self.capital.record_replaced(previous, reason="import")
        self.scheduler.sweep_late_loans()
