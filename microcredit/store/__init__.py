"""Persistence: key-value stores, repositories and snapshots."""

from microcredit.store.backup import export_database, import_database
from microcredit.store.kv import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore
from microcredit.store.repositories import ClientRepository, ConfigRepository, LoanRepository

__all__ = [
    "ClientRepository",
    "ConfigRepository",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "LoanRepository",
    "export_database",
    "import_database",
]
