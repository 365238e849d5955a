"""Tests for key-value stores and repositories."""

import json
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from microcredit.config import CompanyDefaults
from microcredit.exceptions import StorageError
from microcredit.models import AppConfig, Client, CurrencyCode
from microcredit.store import (
    ClientRepository,
    ConfigRepository,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
)


def _client(client_id: str, name: str = "Test Client") -> Client:
    return Client(id=client_id, name=name, phone="11999990000", created_at=datetime(2026, 1, 1))


class TestKeyValueStores:
    """Tests for the store implementations."""

    def test_in_memory(self) -> None:
        kv = InMemoryKeyValueStore()
        assert kv.get("x") is None
        kv.set("x", "1")
        assert kv.get("x") == "1"
        assert kv.keys() == ["x"]
        kv.delete("x")
        kv.delete("x")
        assert kv.get("x") is None

    def test_json_file(self, tmp_path: Path) -> None:
        kv = JsonFileKeyValueStore(tmp_path / "book")
        assert kv.get("loans") is None

        kv.set("loans", "[]")

        assert (tmp_path / "book" / "loans.json").read_text(encoding="utf-8") == "[]"
        assert JsonFileKeyValueStore(tmp_path / "book").get("loans") == "[]"
        kv.delete("loans")
        assert kv.get("loans") is None

    def test_json_file_delete_error_wrapped(self, tmp_path: Path) -> None:
        kv = JsonFileKeyValueStore(tmp_path / "book")
        (tmp_path / "book" / "loans.json").mkdir()

        with pytest.raises(StorageError, match="Cannot delete"):
            kv.delete("loans")

    def test_protocol(self, tmp_path: Path) -> None:
        assert isinstance(InMemoryKeyValueStore(), KeyValueStore)
        assert isinstance(JsonFileKeyValueStore(tmp_path), KeyValueStore)


class TestCollectionRepository:
    """Tests for whole-collection reads and writes."""

    def test_upsert_insert_and_replace(self) -> None:
        repo = ClientRepository(InMemoryKeyValueStore())

        assert repo.upsert(_client("a")) is True
        assert repo.upsert(_client("b")) is True
        assert repo.upsert(_client("a", "Renamed")) is False

        clients = repo.list()
        assert [c.id for c in clients] == ["a", "b"]
        assert clients[0].name == "Renamed"

    def test_get_and_delete(self) -> None:
        repo = ClientRepository(InMemoryKeyValueStore())
        repo.upsert(_client("a"))

        assert repo.get("a") == _client("a")
        assert repo.get("zz") is None
        assert repo.delete("a") is True
        assert repo.delete("a") is False
        assert repo.list() == []

    def test_every_read_refetches(self) -> None:
        kv = InMemoryKeyValueStore()
        first = ClientRepository(kv)
        second = ClientRepository(kv)

        first.upsert(_client("a"))

        assert [c.id for c in second.list()] == ["a"]

    def test_corrupt_json(self) -> None:
        repo = ClientRepository(InMemoryKeyValueStore({"clients": "{oops"}))
        with pytest.raises(StorageError, match="not valid JSON"):
            repo.list()

    def test_not_a_list(self) -> None:
        repo = ClientRepository(InMemoryKeyValueStore({"clients": "{}"}))
        with pytest.raises(StorageError, match="not a list"):
            repo.list()

    def test_corrupt_record(self) -> None:
        repo = ClientRepository(InMemoryKeyValueStore({"clients": json.dumps([{"id": "a"}])}))
        with pytest.raises(StorageError, match="corrupt"):
            repo.list()


class TestConfigRepository:
    """Tests for the config record."""

    def test_seeded_on_first_use(self) -> None:
        kv = InMemoryKeyValueStore()
        config = ConfigRepository(kv).get()

        assert config.capital_balance == Decimal("10000")
        assert config.initialized is True
        assert config.currency == CurrencyCode.BRL
        assert config.company_name == "Fersami SU"
        assert kv.get("config") is not None

    def test_custom_defaults(self) -> None:
        defaults = CompanyDefaults(initial_capital=Decimal("500"), currency=CurrencyCode.AOA)
        config = ConfigRepository(InMemoryKeyValueStore(), defaults).get()

        assert config.capital_balance == Decimal("500")
        assert config.currency == CurrencyCode.AOA

    def test_old_record_filled_with_defaults(self) -> None:
        kv = InMemoryKeyValueStore({"config": json.dumps({"capitalBalance": 250, "initialized": True})})

        config = ConfigRepository(kv).get()

        assert config.capital_balance == Decimal("250")
        assert config.currency == CurrencyCode.BRL
        assert config.company_name == "Fersami SU"
        assert config.support_phone == "949054619"

    def test_save_and_helpers(self) -> None:
        repo = ConfigRepository(InMemoryKeyValueStore())
        repo.save(AppConfig(capital_balance=Decimal("1"), initialized=True, security_pin="1234"))

        repo.save_company_info("Acme", "123")
        repo.set_currency("EUR")

        config = repo.get()
        assert config.company_name == "Acme"
        assert config.support_phone == "123"
        assert config.currency == CurrencyCode.EUR
        assert config.security_pin == "1234"
        assert config.capital_balance == Decimal("1")

    def test_corrupt_config(self) -> None:
        repo = ConfigRepository(InMemoryKeyValueStore({"config": "[]"}))
        with pytest.raises(StorageError):
            repo.get()
