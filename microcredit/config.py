"""Configuration management for the microcredit ledger."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path

from microcredit.exceptions import ConfigurationError
from microcredit.models.enums import CurrencyCode


@dataclass
class StorageConfig:
    """Key-value store location."""

    data_dir: Path = field(default_factory=lambda: Path("data"))


@dataclass
class CompanyDefaults:
    """Values used to seed the config record on first use."""

    initial_capital: Decimal = Decimal("10000")
    currency: CurrencyCode = CurrencyCode.BRL
    company_name: str = "Fersami SU"
    support_phone: str = "949054619"


@dataclass
class LedgerSettings:
    """Main configuration for the ledger."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    defaults: CompanyDefaults = field(default_factory=CompanyDefaults)
    # Absolute slack when deciding whether cumulative payments settle a loan
    paid_tolerance: Decimal = Decimal("0.1")
    log_level: str = "INFO"
    log_file: Path | None = None
    seed: int | None = None

    @classmethod
    def from_env(cls) -> "LedgerSettings":
        """Create settings from environment variables."""
        import os

        storage = StorageConfig(data_dir=Path(os.getenv("MICROCREDIT_DATA_DIR", "data")))

        currency_code = os.getenv("MICROCREDIT_CURRENCY", CurrencyCode.BRL.value)
        try:
            currency = CurrencyCode(currency_code.upper())
        except ValueError:
            raise ConfigurationError(f"Unsupported currency: {currency_code}") from None

        defaults = CompanyDefaults(
            initial_capital=_decimal_env("MICROCREDIT_INITIAL_CAPITAL", "10000"),
            currency=currency,
            company_name=os.getenv("MICROCREDIT_COMPANY_NAME", "Fersami SU"),
            support_phone=os.getenv("MICROCREDIT_SUPPORT_PHONE", "949054619"),
        )

        log_file = os.getenv("MICROCREDIT_LOG_FILE")

        seed_str = os.getenv("MICROCREDIT_SEED")
        try:
            seed = int(seed_str) if seed_str else None
        except ValueError:
            raise ConfigurationError(f"MICROCREDIT_SEED must be an integer, got {seed_str!r}") from None

        return cls(
            storage=storage,
            defaults=defaults,
            paid_tolerance=_decimal_env("MICROCREDIT_PAID_TOLERANCE", "0.1"),
            log_level=os.getenv("MICROCREDIT_LOG_LEVEL", "INFO"),
            log_file=Path(log_file) if log_file else None,
            seed=seed,
        )


def _decimal_env(name: str, default: str) -> Decimal:
    """Read a decimal environment variable."""
    import os

    raw = os.getenv(name, default)
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
