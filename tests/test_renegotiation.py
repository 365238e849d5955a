"""Tests for the renegotiation engine."""

from datetime import date
from decimal import Decimal

import pytest

from microcredit.book import MicrocreditBook
from microcredit.exceptions import EntityNotFoundError, InvalidEntityStateError
from microcredit.models import Client, Loan, LoanStatus, PaymentFrequency


def _loan_with_remaining_300(book: MicrocreditBook, client: Client) -> Loan:
    loan = book.ledger.create_loan(client.id, Decimal("1000"), Decimal("10"), 30)
    return book.payments.add_payment(loan.id, Decimal("800"))


class TestRenegotiate:
    """Tests for RenegotiationEngine.renegotiate."""

    def test_successor_terms(self, book: MicrocreditBook, client: Client) -> None:
        source = _loan_with_remaining_300(book, client)

        successor = book.renegotiation.renegotiate(source.id, 30, Decimal("5"))

        assert successor.amount == Decimal("300")
        assert successor.total_amount == Decimal("315")
        assert successor.interest_rate == Decimal("5")
        assert successor.status == LoanStatus.PENDING
        assert successor.installments == 1
        assert successor.original_loan_id == source.id
        assert successor.client_id == client.id
        assert successor.start_date == date(2026, 3, 15)
        assert successor.due_date == date(2026, 4, 14)
        assert successor.payments == []

    def test_source_retired(self, book: MicrocreditBook, client: Client) -> None:
        source = _loan_with_remaining_300(book, client)

        book.renegotiation.renegotiate(source.id, 30, Decimal("5"))

        stored = book.ledger.require_loan(source.id)
        assert stored.status == LoanStatus.RENEGOTIATED
        assert len(stored.payments) == 1
        assert stored.total_amount == Decimal("1100")

    def test_capital_neutral(self, book: MicrocreditBook, client: Client) -> None:
        source = _loan_with_remaining_300(book, client)
        before = book.capital.get_balance()

        book.renegotiation.renegotiate(source.id, 30, Decimal("5"))

        assert book.capital.get_balance() == before

    def test_journal_shows_debit_then_recredit(self, book: MicrocreditBook, client: Client) -> None:
        source = _loan_with_remaining_300(book, client)

        successor = book.renegotiation.renegotiate(source.id, 30, Decimal("5"))

        last_two = book.capital.journal()[-2:]
        assert [(m.reason, m.delta) for m in last_two] == [
            ("disbursement", Decimal("-300")),
            ("renegotiation", Decimal("300")),
        ]
        assert all(m.reference_id == successor.id for m in last_two)

    def test_keeps_frequency(self, book: MicrocreditBook, client: Client) -> None:
        loan = book.ledger.create_loan(
            client.id, Decimal("400"), Decimal("10"), 28, PaymentFrequency.WEEKLY
        )

        successor = book.renegotiation.renegotiate(loan.id, 14, Decimal("0"))

        assert successor.frequency == PaymentFrequency.WEEKLY
        assert successor.installments == 1
        assert successor.total_amount == Decimal("440")

    def test_late_loan(self, book: MicrocreditBook, client: Client) -> None:
        loan = book.ledger.create_loan(
            client.id, Decimal("200"), Decimal("10"), 5, start_date=date(2026, 1, 1)
        )
        book.scheduler.sweep_late_loans()

        successor = book.renegotiation.renegotiate(loan.id, 30, Decimal("10"))

        assert successor.total_amount == Decimal("242")
        assert book.ledger.require_loan(loan.id).status == LoanStatus.RENEGOTIATED

    def test_only_one_successor(self, book: MicrocreditBook, client: Client) -> None:
        source = _loan_with_remaining_300(book, client)
        book.renegotiation.renegotiate(source.id, 30, Decimal("5"))

        with pytest.raises(InvalidEntityStateError):
            book.renegotiation.renegotiate(source.id, 30, Decimal("5"))

        successors = [l for l in book.ledger.list_loans() if l.original_loan_id == source.id]
        assert len(successors) == 1

    def test_successor_can_be_renegotiated(self, book: MicrocreditBook, client: Client) -> None:
        source = _loan_with_remaining_300(book, client)
        second = book.renegotiation.renegotiate(source.id, 30, Decimal("5"))

        third = book.renegotiation.renegotiate(second.id, 30, Decimal("0"))

        assert third.original_loan_id == second.id
        assert third.amount == Decimal("315")

    def test_paid_loan_rejected(self, book: MicrocreditBook, client: Client) -> None:
        loan = book.ledger.create_loan(client.id, Decimal("100"), Decimal("10"), 30)
        book.payments.add_payment(loan.id, Decimal("110"))
        balance = book.capital.get_balance()

        with pytest.raises(InvalidEntityStateError):
            book.renegotiation.renegotiate(loan.id, 30, Decimal("5"))

        assert book.capital.get_balance() == balance
        assert len(book.ledger.list_loans()) == 1

    def test_unknown_loan(self, book: MicrocreditBook) -> None:
        with pytest.raises(EntityNotFoundError):
            book.renegotiation.renegotiate("nope", 30, Decimal("5"))
