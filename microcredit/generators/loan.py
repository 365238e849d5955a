"""Loan terms generator."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from microcredit.generators.base import BaseGenerator
from microcredit.models import PaymentFrequency


@dataclass
class LoanTerms:
    """Inputs for ``LoanLedger.create_loan``."""

    principal: Decimal
    interest_rate_pct: Decimal
    term_days: int
    frequency: PaymentFrequency


class LoanTermsGenerator(BaseGenerator):
    """Generate typical microcredit terms."""

    TERM_DAYS = [7, 14, 15, 30, 30, 30, 45, 60]
    FREQUENCIES = list(PaymentFrequency)
    FREQUENCY_WEIGHTS = [0.55, 0.2, 0.15, 0.1]

    # Small loans, flat rate per term
    PRINCIPAL_STEPS = (2, 40)  # x 50
    RATE_CHOICES = [Decimal("5"), Decimal("10"), Decimal("15"), Decimal("20"), Decimal("30")]

    def generate(self) -> LoanTerms:
        principal = Decimal(self.random.randint(*self.PRINCIPAL_STEPS) * 50)
        return LoanTerms(
            principal=principal,
            interest_rate_pct=self.random.choice(self.RATE_CHOICES),
            term_days=self.random.choice(self.TERM_DAYS),
            frequency=self.random.choices(self.FREQUENCIES, weights=self.FREQUENCY_WEIGHTS, k=1)[0],
        )
