"""Registration of new transactions.

Input is validated here, once, when a transaction is created; the aggregator
downstream trusts the stored shape and only guards against unreadable data.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from .logging_setup import get_logger
from .models import NewTransaction, TransactionRecord
from .storage import Storage, append_transaction

_logger = get_logger("gofinances.register")


def _iso_utc(now: datetime) -> str:
    # Millisecond precision with a trailing "Z", the shape mobile clients store.
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def register_transaction(
    storage: Storage,
    user_id: str,
    *,
    name: str,
    amount: str | int | float | Decimal,
    type: str,
    category: str,
    now: datetime | None = None,
) -> TransactionRecord:
    """Validate a new transaction, append it to storage and return the record.

    Raises
    ------
    pydantic.ValidationError
        When ``name`` is blank, ``amount`` is not a positive number, ``type``
        is not ``positive``/``negative`` or ``category`` is unknown.
    """

    data: dict[str, Any] = {"name": name, "amount": amount, "type": type, "category": category}
    tx = NewTransaction.model_validate(data)

    record: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "name": tx.name,
        # Plain decimal string; no exponent, no float rounding.
        "amount": format(tx.amount, "f"),
        "type": tx.type,
        "category": tx.category,
        "date": _iso_utc(now or datetime.now(UTC)),
    }
    append_transaction(storage, user_id, record)
    _logger.debug("registered %s transaction %s", tx.type, record["id"])
    return record


__all__ = ["register_transaction"]
