"""Per-client risk tier from late-loan history."""

from microcredit.models import LoanStatus, RiskLevel
from microcredit.store.repositories import LoanRepository

MEDIUM_RISK_MIN_LATE = 1
HIGH_RISK_MIN_LATE = 3


def risk_for_late_count(late_count: int) -> RiskLevel:
    if late_count >= HIGH_RISK_MIN_LATE:
        return RiskLevel.HIGH
    if late_count >= MEDIUM_RISK_MIN_LATE:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


class RiskClassifier:
    """Classify clients by how many of their loans are LATE.

    Only the LATE status counts. A RENEGOTIATED loan is not a delay,
    and a client with no loans at all is LOW.
    """

    def __init__(self, loans: LoanRepository) -> None:
        self.loans = loans

    def late_count(self, client_id: str) -> int:
        return sum(1 for loan in self.loans.list_for_client(client_id) if loan.status == LoanStatus.LATE)

    def classify_risk(self, client_id: str) -> RiskLevel:
        return risk_for_late_count(self.late_count(client_id))
