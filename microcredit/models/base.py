"""Base models shared across the ledger."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Event:
    """Standard event envelope for ledger signals."""

    event_id: str
    event_type: str  # entity.action (e.g., loan.paid)
    event_time: datetime
    source: str  # Component that emitted it
    subject: str  # Entity ID affected
    data: dict
    metadata: dict = field(default_factory=dict)
