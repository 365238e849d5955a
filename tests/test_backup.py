"""Tests for database export and import."""

import json
from datetime import datetime
from decimal import Decimal

import pytest

from microcredit.book import MicrocreditBook
from microcredit.exceptions import MalformedImportError
from microcredit.models import Client, CurrencyCode, LoanStatus, PaymentFrequency
from microcredit.store import InMemoryKeyValueStore


def _populated(book: MicrocreditBook, client: Client) -> None:
    loan = book.ledger.create_loan(client.id, Decimal("1000"), Decimal("10"), 30)
    book.payments.add_payment(loan.id, Decimal("250.50"))
    book.renegotiation.renegotiate(loan.id, 15, Decimal("7.5"))
    book.config_repo.save_company_info("Crédito Fácil", "900000000")


class TestExport:
    """Tests for export_database."""

    def test_snapshot_shape(self, book: MicrocreditBook, client: Client) -> None:
        _populated(book, client)

        data = json.loads(book.export_database())

        assert set(data) == {"clients", "loans", "config", "timestamp"}
        assert data["timestamp"] == "2026-03-15T10:30:00"
        assert len(data["clients"]) == 1
        assert len(data["loans"]) == 2
        assert data["loans"][0]["payments"][0]["amount"] == "250.50"
        assert data["config"]["company_name"] == "Crédito Fácil"


class TestImport:
    """Tests for import_database."""

    def test_round_trip(self, book: MicrocreditBook, client: Client, now: datetime) -> None:
        _populated(book, client)
        snapshot = book.export_database()

        target = MicrocreditBook(InMemoryKeyValueStore(), clock=lambda: now)
        target.import_database(snapshot)

        assert target.clients.list_clients() == book.clients.list_clients()
        assert target.ledger.list_loans() == book.ledger.list_loans()
        assert target.config_repo.get() == book.config_repo.get()

    def test_replaces_existing_state(self, book: MicrocreditBook, client: Client) -> None:
        source = MicrocreditBook(InMemoryKeyValueStore())
        source.capital.set_balance(Decimal("42"))
        book.ledger.create_loan(client.id, Decimal("100"), Decimal("10"), 30)

        book.import_database(source.export_database())

        assert book.clients.list_clients() == []
        assert book.ledger.list_loans() == []
        assert book.capital.get_balance() == Decimal("42")

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            "[]",
            json.dumps({"loans": [], "config": {"capital_balance": "1"}}),
            json.dumps({"clients": {}, "loans": [], "config": {"capital_balance": "1"}}),
            json.dumps({"clients": [], "loans": "x", "config": {"capital_balance": "1"}}),
            json.dumps({"clients": [], "loans": []}),
            json.dumps({"clients": [], "loans": [], "config": []}),
            json.dumps({"clients": [{"name": "no id"}], "loans": [], "config": {"capital_balance": "1"}}),
            json.dumps({"clients": [], "loans": [{"id": "l1"}], "config": {"capital_balance": "1"}}),
        ],
    )
    def test_malformed_rejected_without_changes(
        self, book: MicrocreditBook, client: Client, payload: str
    ) -> None:
        _populated(book, client)
        before = book.export_database()

        with pytest.raises(MalformedImportError):
            book.import_database(payload)

        assert book.export_database() == before

    def test_accepts_original_app_backup(self, book: MicrocreditBook) -> None:
        backup = {
            "clients": [
                {"id": "1", "name": "Maria Silva", "phone": "11999990000", "createdAt": "2025-01-10T12:00:00.000Z"}
            ],
            "loans": [
                {
                    "id": "a",
                    "clientId": "1",
                    "amount": 1000,
                    "interestRate": 10,
                    "totalAmount": 1100,
                    "startDate": "2025-01-10T12:00:00.000Z",
                    "dueDate": "2025-02-09T12:00:00.000Z",
                    "frequency": "Semanal",
                    "installments": 4,
                    "status": "Atrasado",
                    "payments": [
                        {"id": "p", "loanId": "a", "amount": 100.5, "date": "2025-01-20T09:00:00.000Z", "type": "PARTIAL"}
                    ],
                }
            ],
            "config": {"capitalBalance": 9100.5, "initialized": True, "currency": "MZN"},
            "timestamp": "2025-03-01T00:00:00.000Z",
        }

        book.import_database(json.dumps(backup))

        loan = book.ledger.require_loan("a")
        assert loan.status == LoanStatus.LATE
        assert loan.frequency == PaymentFrequency.WEEKLY
        assert loan.total_amount == Decimal("1100")
        assert loan.payments[0].amount == Decimal("100.5")
        assert book.capital.get_balance() == Decimal("9100.5")
        assert book.config_repo.get().currency == CurrencyCode.MZN

    def test_empty_config_object_accepted(self, book: MicrocreditBook, client: Client) -> None:
        book.import_database(json.dumps({"clients": [], "loans": [], "config": {}}))

        config = book.config_repo.get()
        assert book.clients.list_clients() == []
        assert config.capital_balance == Decimal("0")
        assert config.currency == CurrencyCode.BRL
