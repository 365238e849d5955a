"""Client generator."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterator

from microcredit.generators.base import BaseGenerator
from microcredit.models import Client

CLIENT_NOTES = [None, None, "Pays on time", "New client", "Referred by another client", "Street vendor"]


class ClientGenerator(BaseGenerator):
    """Generate synthetic borrowers."""

    def generate(self, now: datetime | None = None) -> Client:
        """Generate a single client registered within the last two years."""
        now = now or datetime.now()
        return Client(
            id=self.fake.uuid4(),
            name=self.fake.name(),
            phone=self.fake.cellphone_number(),
            created_at=now - timedelta(days=self.random.randint(0, 730)),
            document=self.fake.cpf() if self.random.random() < 0.7 else None,
            address=self.fake.address().replace("\n", ", ") if self.random.random() < 0.5 else None,
            notes=self.random.choice(CLIENT_NOTES),
        )

    def generate_batch(self, count: int, now: datetime | None = None) -> Iterator[Client]:
        """Generate multiple clients.

        Parameters
        ----------
        count : int
            Number of clients to generate.
        now : datetime | None
            Reference time for registration dates.

        Yields
        ------
        Client
            Generated clients.
        """
        for _ in range(count):
            yield self.generate(now)
