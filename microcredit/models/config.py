"""Persisted application config record."""

from dataclasses import dataclass
from decimal import Decimal

from microcredit.models.enums import CurrencyCode


@dataclass
class AppConfig:
    """Single config record holding the capital balance."""

    capital_balance: Decimal
    initialized: bool = False
    security_pin: str | None = None
    currency: CurrencyCode = CurrencyCode.BRL
    company_name: str | None = None
    support_phone: str | None = None
