"""Client registry with cascading delete."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Callable

from microcredit.exceptions import EntityNotFoundError
from microcredit.models import Client
from microcredit.store.repositories import ClientRepository, LoanRepository

logger = logging.getLogger(__name__)


class ClientRegistry:
    """Create, edit and remove borrowers."""

    def __init__(
        self,
        clients: ClientRepository,
        loans: LoanRepository,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.clients = clients
        self.loans = loans
        self.clock = clock

    def create_client(
        self,
        name: str,
        phone: str,
        document: str | None = None,
        address: str | None = None,
        notes: str | None = None,
    ) -> Client:
        client = Client(
            id=str(uuid.uuid4()),
            name=name,
            phone=phone,
            created_at=self.clock(),
            document=document,
            address=address,
            notes=notes,
        )
        self.clients.upsert(client)
        logger.info("Registered client %s (%s)", client.id, name)
        return client

    def add_client(self, client: Client) -> Client:
        """Register a client built elsewhere (sample data, migrations)."""
        self.clients.upsert(client)
        return client

    def update_client(self, client: Client) -> Client:
        if self.clients.get(client.id) is None:
            raise EntityNotFoundError(f"Client {client.id} not found")
        self.clients.upsert(client)
        return client

    def get_client(self, client_id: str) -> Client | None:
        return self.clients.get(client_id)

    def list_clients(self) -> list[Client]:
        return self.clients.list()

    def delete_client(self, client_id: str) -> int:
        """Remove a client and every loan they own.

        This is data cleanup, not a financial event: principal still
        outstanding on the removed loans is not returned to capital.

        Returns
        -------
        int
            Number of loans removed with the client.
        """
        if not self.clients.delete(client_id):
            raise EntityNotFoundError(f"Client {client_id} not found")
        removed = self.loans.delete_for_client(client_id)
        logger.info("Deleted client %s and %d loans", client_id, removed)
        return removed
