"""Full-database export and all-or-nothing import."""

import json
import logging
from datetime import datetime

from microcredit.exceptions import MalformedImportError
from microcredit.store.repositories import ClientRepository, ConfigRepository, LoanRepository
from microcredit.store.serialization import (
    client_from_dict,
    config_from_dict,
    loan_from_dict,
    to_dict,
)

logger = logging.getLogger(__name__)


def export_database(
    clients: ClientRepository,
    loans: LoanRepository,
    config: ConfigRepository,
    timestamp: datetime | None = None,
) -> str:
    """Serialize clients, loans and config into one JSON snapshot.

    Parameters
    ----------
    clients : ClientRepository
        Client registry.
    loans : LoanRepository
        Loan collection.
    config : ConfigRepository
        Config record holder.
    timestamp : datetime | None
        Snapshot time (defaults to now).

    Returns
    -------
    str
        Indented JSON ``{clients, loans, config, timestamp}``.
    """
    client_list = clients.list()
    loan_list = loans.list()
    snapshot = {
        "clients": [to_dict(c) for c in client_list],
        "loans": [to_dict(loan) for loan in loan_list],
        "config": to_dict(config.get()),
        "timestamp": (timestamp or datetime.now()).isoformat(),
    }
    logger.info("Exported %d clients and %d loans", len(client_list), len(loan_list))
    return json.dumps(snapshot, indent=2, ensure_ascii=False)


def import_database(
    text: str,
    clients: ClientRepository,
    loans: LoanRepository,
    config: ConfigRepository,
) -> None:
    """Replace all state with a snapshot produced by ``export_database``.

    The payload is parsed completely before anything is written, so a
    rejected import leaves the existing state untouched.

    Raises
    ------
    MalformedImportError
        If the text is not JSON, ``clients``/``loans`` are not arrays,
        ``config`` is missing, or any record cannot be parsed.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        raise MalformedImportError(f"Snapshot is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise MalformedImportError("Snapshot must be a JSON object")
    if not isinstance(data.get("clients"), list) or not isinstance(data.get("loans"), list):
        raise MalformedImportError("Snapshot must contain 'clients' and 'loans' arrays")
    if "config" not in data or not isinstance(data["config"], dict):
        raise MalformedImportError("Snapshot must contain a 'config' object")

    try:
        new_clients = [client_from_dict(item) for item in data["clients"]]
        new_loans = [loan_from_dict(item) for item in data["loans"]]
        new_config = config_from_dict(data["config"])
    except (KeyError, TypeError, ValueError, ArithmeticError, AttributeError) as exc:
        raise MalformedImportError(f"Snapshot contains an invalid record: {exc!r}") from exc

    clients.replace_all(new_clients)
    loans.replace_all(new_loans)
    config.save(new_config)
    logger.info("Imported %d clients and %d loans", len(new_clients), len(new_loans))
