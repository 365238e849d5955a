"""Sample-data generators."""

from microcredit.generators.client import ClientGenerator
from microcredit.generators.loan import LoanTerms, LoanTermsGenerator

__all__ = ["ClientGenerator", "LoanTerms", "LoanTermsGenerator"]
