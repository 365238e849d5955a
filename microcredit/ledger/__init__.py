"""Loan and capital ledger engine."""

from microcredit.ledger.capital import CapitalAccount, CapitalMovement, withdraw_profit
from microcredit.ledger.clients import ClientRegistry
from microcredit.ledger.loans import (
    LoanLedger,
    is_active,
    progress_pct,
    remaining_balance,
    total_paid,
)
from microcredit.ledger.payments import LOAN_PAID_EVENT, PaymentRecorder
from microcredit.ledger.renegotiation import RenegotiationEngine
from microcredit.ledger.reporting import PortfolioReport, request_advice
from microcredit.ledger.risk import RiskClassifier
from microcredit.ledger.scheduler import StatusScheduler

__all__ = [
    "CapitalAccount",
    "CapitalMovement",
    "ClientRegistry",
    "LOAN_PAID_EVENT",
    "LoanLedger",
    "PaymentRecorder",
    "PortfolioReport",
    "RenegotiationEngine",
    "RiskClassifier",
    "StatusScheduler",
    "is_active",
    "progress_pct",
    "remaining_balance",
    "request_advice",
    "total_paid",
]
