"""Enumeration types for ledger entities."""

from enum import Enum


class LoanStatus(str, Enum):
    PENDING = "PENDING"
    LATE = "LATE"
    PAID = "PAID"
    RENEGOTIATED = "RENEGOTIATED"
    CANCELLED = "CANCELLED"


class LoanEvent(str, Enum):
    """Events that drive the loan status transition table."""

    OVERDUE = "OVERDUE"
    SETTLE = "SETTLE"
    RENEGOTIATE = "RENEGOTIATE"
    CANCEL = "CANCEL"


class PaymentFrequency(str, Enum):
    SINGLE = "SINGLE"
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"


class PaymentType(str, Enum):
    PARTIAL = "PARTIAL"
    FULL = "FULL"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class CurrencyCode(str, Enum):
    BRL = "BRL"
    USD = "USD"
    EUR = "EUR"
    MZN = "MZN"
    AOA = "AOA"
