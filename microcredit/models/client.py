"""Client model."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Client:
    """Borrower registered with the business."""

    id: str
    name: str
    phone: str
    created_at: datetime
    document: str | None = None
    address: str | None = None
    notes: str | None = None
