"""Data models and type aliases for ``gofinances``.

Stored transactions stay opaque mappings (:data:`TransactionRecord`): they
are whatever JSON objects the storage provider hands back. The aggregator
parses them into :class:`Transaction` values and produces the
display-ready structures defined below.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .categories import find_category

# ---------------------------------------------------------------------------
# Transaction type tags
# ---------------------------------------------------------------------------

POSITIVE = "positive"
NEGATIVE = "negative"
TRANSACTION_TYPES: tuple[str, ...] = (POSITIVE, NEGATIVE)

TransactionType = Literal["positive", "negative"]

# Largest amount the dashboard accepts: up to 15 integer digits.
MAX_AMOUNT_INTEGER_DIGITS = 15
AMOUNT_DECIMAL_PLACES = 2

# ---------------------------------------------------------------------------
# Stored and parsed records
# ---------------------------------------------------------------------------

TransactionRecord: TypeAlias = Mapping[str, Any]
"""A single stored transaction as decoded from JSON.

Expected keys: ``id``, ``name``, ``amount`` (number or numeric string),
``type`` (``positive``/``negative``), ``category`` and ``date`` (ISO string).
Nothing is enforced at this level; see :func:`gofinances.aggregate.parse_record`.
"""


@dataclass(frozen=True, slots=True)
class Transaction:
    """A stored record with ``amount`` and ``date`` parsed.

    ``when`` is naive and expressed as wall-clock time in the display
    timezone, so values from one run always compare. ``type`` is kept as
    stored, including unrecognized tags.
    """

    id: str | None
    name: str
    amount: Decimal
    type: str
    category: str
    when: datetime

    @property
    def is_entry(self) -> bool:
        return self.type == POSITIVE


@dataclass(frozen=True, slots=True)
class FormattedTransaction:
    """A transaction ready for display: amount and date are localized strings."""

    id: str | None
    name: str
    amount: str
    type: str
    category: str
    date: str


# ---------------------------------------------------------------------------
# Highlights
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HighlightEntry:
    amount: str
    last_transaction: str


@dataclass(frozen=True, slots=True)
class HighlightSummary:
    """The three dashboard cards; always built together."""

    entries: HighlightEntry
    expenses: HighlightEntry
    total: HighlightEntry


@dataclass(frozen=True, slots=True)
class UnknownCategoryType:
    """Flag for a record whose ``type`` is not a recognized tag.

    Non-fatal: the record is counted as an expense and the flag is carried on
    the summary so callers can surface it.
    """

    record_id: str | None
    value: Any


@dataclass(frozen=True, slots=True)
class DashboardSummary:
    """Result of one aggregation run.

    The raw ``Decimal`` totals sit next to the formatted highlights so the
    ``entries_total - expenses_total == net_total`` relation can be checked
    without parsing display strings.
    """

    transactions: tuple[FormattedTransaction, ...]
    highlights: HighlightSummary
    entries_total: Decimal
    expenses_total: Decimal
    net_total: Decimal
    unknown_types: tuple[UnknownCategoryType, ...] = ()


# ---------------------------------------------------------------------------
# Registration input
# ---------------------------------------------------------------------------


class NewTransaction(BaseModel):
    """Validated input for a transaction about to be stored.

    ``category`` accepts a category key or display name and is normalized to
    the key.
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str
    amount: Decimal = Field(
        max_digits=MAX_AMOUNT_INTEGER_DIGITS + AMOUNT_DECIMAL_PLACES,
        decimal_places=AMOUNT_DECIMAL_PLACES,
    )
    type: TransactionType
    category: str

    @field_validator("name")
    @classmethod
    def _name_non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("name must be non-empty")
        return v

    @field_validator("amount")
    @classmethod
    def _amount_positive(cls, v: Decimal) -> Decimal:
        if not v.is_finite() or v <= 0:
            raise ValueError("amount must be a positive number")
        return v

    @field_validator("category")
    @classmethod
    def _known_category(cls, v: str) -> str:
        found = find_category(v)
        if found is None:
            raise ValueError(f"unknown category: {v!r}")
        return found.key
