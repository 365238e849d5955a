"""Domain models for the microcredit ledger."""

from microcredit.models.base import Event
from microcredit.models.client import Client
from microcredit.models.config import AppConfig
from microcredit.models.enums import (
    CurrencyCode,
    LoanEvent,
    LoanStatus,
    PaymentFrequency,
    PaymentType,
    RiskLevel,
)
from microcredit.models.loan import Loan, Payment

__all__ = [
    "AppConfig",
    "Client",
    "CurrencyCode",
    "Event",
    "Loan",
    "LoanEvent",
    "LoanStatus",
    "Payment",
    "PaymentFrequency",
    "PaymentType",
    "RiskLevel",
]
