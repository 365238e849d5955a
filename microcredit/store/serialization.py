"""Conversion between ledger dataclasses and JSON-compatible dicts."""

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from microcredit.models import (
    AppConfig,
    Client,
    CurrencyCode,
    Loan,
    LoanStatus,
    Payment,
    PaymentFrequency,
    PaymentType,
)

# Portuguese labels found in records written by older app versions
LEGACY_STATUS = {
    "Em Aberto": LoanStatus.PENDING,
    "Pago": LoanStatus.PAID,
    "Atrasado": LoanStatus.LATE,
    "Renegociado": LoanStatus.RENEGOTIATED,
    "Cancelado": LoanStatus.CANCELLED,
}

LEGACY_FREQUENCY = {
    "Parcela Única": PaymentFrequency.SINGLE,
    "Semanal": PaymentFrequency.WEEKLY,
    "Quinzenal": PaymentFrequency.BIWEEKLY,
    "Mensal": PaymentFrequency.MONTHLY,
}


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return obj
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value)
    return result


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def _pick(data: dict, *keys: str, default: Any = None) -> Any:
    """Return the first key present, accepting snake_case or camelCase."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _require(data: dict, *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    raise KeyError(keys[0])


def parse_decimal(value: Any) -> Decimal:
    """Parse a money value, going through ``str`` so floats stay readable."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError(f"Not a number: {value!r}")
    return Decimal(str(value))


def parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def parse_date(value: Any) -> date:
    """Parse a date, tolerating full ISO timestamps."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def parse_status(value: Any) -> LoanStatus:
    if value in LEGACY_STATUS:
        return LEGACY_STATUS[value]
    return LoanStatus(value)


def parse_frequency(value: Any) -> PaymentFrequency:
    if value in LEGACY_FREQUENCY:
        return LEGACY_FREQUENCY[value]
    return PaymentFrequency(value)


def client_from_dict(data: dict) -> Client:
    """Build a Client from its serialized form."""
    return Client(
        id=str(_require(data, "id")),
        name=_require(data, "name"),
        phone=_pick(data, "phone", default=""),
        created_at=parse_datetime(_require(data, "created_at", "createdAt")),
        document=_pick(data, "document"),
        address=_pick(data, "address"),
        notes=_pick(data, "notes"),
    )


def payment_from_dict(data: dict) -> Payment:
    """Build a Payment from its serialized form."""
    return Payment(
        id=str(_require(data, "id")),
        loan_id=str(_require(data, "loan_id", "loanId")),
        amount=parse_decimal(_require(data, "amount")),
        date=parse_datetime(_require(data, "date")),
        type=PaymentType(_pick(data, "type", default=PaymentType.PARTIAL.value)),
        notes=_pick(data, "notes"),
    )


def loan_from_dict(data: dict) -> Loan:
    """Build a Loan (with its payments) from its serialized form."""
    payments = _pick(data, "payments", default=None) or []
    if not isinstance(payments, list):
        raise TypeError("payments must be a list")

    return Loan(
        id=str(_require(data, "id")),
        client_id=str(_require(data, "client_id", "clientId")),
        amount=parse_decimal(_require(data, "amount")),
        interest_rate=parse_decimal(_require(data, "interest_rate", "interestRate")),
        total_amount=parse_decimal(_require(data, "total_amount", "totalAmount")),
        start_date=parse_date(_require(data, "start_date", "startDate")),
        due_date=parse_date(_require(data, "due_date", "dueDate")),
        frequency=parse_frequency(_pick(data, "frequency", default=PaymentFrequency.SINGLE.value)),
        installments=int(_pick(data, "installments", default=1)),
        status=parse_status(_require(data, "status")),
        payments=[payment_from_dict(p) for p in payments],
        notes=_pick(data, "notes"),
        original_loan_id=_pick(data, "original_loan_id", "originalLoanId"),
    )


def config_from_dict(data: dict) -> AppConfig:
    """Build the config record from its serialized form."""
    currency = _pick(data, "currency")
    return AppConfig(
        capital_balance=parse_decimal(_pick(data, "capital_balance", "capitalBalance", default=0)),
        initialized=bool(_pick(data, "initialized", default=False)),
        security_pin=_pick(data, "security_pin", "securityPin"),
        currency=CurrencyCode(currency) if currency else CurrencyCode.BRL,
        company_name=_pick(data, "company_name", "companyName"),
        support_phone=_pick(data, "support_phone", "supportPhone"),
    )
