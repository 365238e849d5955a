"""Repositories over the key-value store with whole-collection writes."""

from __future__ import annotations

import json
import logging
from typing import Callable, Generic, TypeVar

from microcredit.config import CompanyDefaults
from microcredit.exceptions import StorageError
from microcredit.models import AppConfig, Client, CurrencyCode, Loan
from microcredit.store.kv import KeyValueStore
from microcredit.store.serialization import (
    client_from_dict,
    config_from_dict,
    loan_from_dict,
    to_dict,
)

logger = logging.getLogger(__name__)

CLIENTS_KEY = "clients"
LOANS_KEY = "loans"
CONFIG_KEY = "config"

T = TypeVar("T", Client, Loan)


def _load_json(store: KeyValueStore, key: str) -> object | None:
    raw = store.get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StorageError(f"Stored record '{key}' is not valid JSON: {exc}") from exc


def _dump_json(store: KeyValueStore, key: str, data: object) -> None:
    store.set(key, json.dumps(data, indent=2, ensure_ascii=False))


class _CollectionRepository(Generic[T]):
    """Sequence of records stored under a single key.

    Every read re-fetches the latest snapshot and every write
    re-serializes the whole collection, preserving insertion order.
    """

    key: str
    from_dict: Callable[[dict], T]

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def list(self) -> list[T]:
        data = _load_json(self.store, self.key)
        if data is None:
            return []
        if not isinstance(data, list):
            raise StorageError(f"Stored record '{self.key}' is not a list")
        try:
            return [self.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
            raise StorageError(f"Stored record '{self.key}' is corrupt: {exc!r}") from exc

    def get(self, entity_id: str) -> T | None:
        for entity in self.list():
            if entity.id == entity_id:
                return entity
        return None

    def upsert(self, entity: T) -> bool:
        """Insert or replace an entity by id.

        Returns
        -------
        bool
            True when the entity was new.
        """
        entities = self.list()
        for idx, existing in enumerate(entities):
            if existing.id == entity.id:
                entities[idx] = entity
                self.replace_all(entities)
                return False
        entities.append(entity)
        self.replace_all(entities)
        return True

    def delete(self, entity_id: str) -> bool:
        entities = self.list()
        remaining = [e for e in entities if e.id != entity_id]
        if len(remaining) == len(entities):
            return False
        self.replace_all(remaining)
        return True

    def replace_all(self, entities: list[T]) -> None:
        _dump_json(self.store, self.key, [to_dict(e) for e in entities])


class ClientRepository(_CollectionRepository[Client]):
    """Persisted client registry."""

    key = CLIENTS_KEY
    from_dict = staticmethod(client_from_dict)


class LoanRepository(_CollectionRepository[Loan]):
    """Persisted loan collection."""

    key = LOANS_KEY
    from_dict = staticmethod(loan_from_dict)

    def list_for_client(self, client_id: str) -> list[Loan]:
        return [loan for loan in self.list() if loan.client_id == client_id]

    def delete_for_client(self, client_id: str) -> int:
        """Remove every loan owned by a client in one write."""
        loans = self.list()
        remaining = [loan for loan in loans if loan.client_id != client_id]
        removed = len(loans) - len(remaining)
        if removed:
            self.replace_all(remaining)
        return removed


class ConfigRepository:
    """Single config record holding the capital balance."""

    def __init__(self, store: KeyValueStore, defaults: CompanyDefaults | None = None) -> None:
        self.store = store
        self.defaults = defaults or CompanyDefaults()

    def get(self) -> AppConfig:
        """Return the stored config, seeding it on first use."""
        data = _load_json(self.store, CONFIG_KEY)
        if data is None:
            config = AppConfig(
                capital_balance=self.defaults.initial_capital,
                initialized=True,
                currency=self.defaults.currency,
                company_name=self.defaults.company_name,
                support_phone=self.defaults.support_phone,
            )
            logger.info("Seeding config with capital %s", config.capital_balance)
            self.save(config)
            return config

        if not isinstance(data, dict):
            raise StorageError("Stored config is not an object")
        try:
            config = config_from_dict(data)
        except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
            raise StorageError(f"Stored config is corrupt: {exc!r}") from exc

        # Records written before these fields existed
        if not config.company_name:
            config.company_name = self.defaults.company_name
        if not config.support_phone:
            config.support_phone = self.defaults.support_phone
        return config

    def save(self, config: AppConfig) -> None:
        _dump_json(self.store, CONFIG_KEY, to_dict(config))

    def save_company_info(self, name: str, phone: str) -> AppConfig:
        config = self.get()
        config.company_name = name
        config.support_phone = phone
        self.save(config)
        return config

    def set_currency(self, currency: CurrencyCode | str) -> AppConfig:
        config = self.get()
        config.currency = CurrencyCode(currency)
        self.save(config)
        return config
