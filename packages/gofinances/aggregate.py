"""Transaction aggregation and highlight computation for the dashboard.

:func:`compute_summary` is a pure, synchronous transform from stored records
to a :class:`~gofinances.models.DashboardSummary`:

1. Every record is parsed up front (:func:`parse_record`). An unreadable
   ``amount`` or ``date`` raises :class:`~gofinances.errors.MalformedRecord`
   before any total exists, so a run never yields partial numbers.
2. Amounts are summed into entries (``type == "positive"``) and expenses
   (everything else). A type outside the two known tags is logged, flagged on
   the result and counted as an expense.
3. The most recent date of each side feeds the highlight captions. The total
   card's range is anchored to the expense side's last date, even when an
   entry is more recent; existing dashboards show it that way.

Inputs are never mutated and no state survives between calls.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, tzinfo
from decimal import Decimal, InvalidOperation
from typing import Any

from .errors import MalformedRecord
from .formatting import (
    PT_BR,
    LocaleConfig,
    format_currency,
    format_day_month,
    format_short_date,
)
from .logging_setup import get_logger
from .models import (
    MAX_AMOUNT_INTEGER_DIGITS,
    TRANSACTION_TYPES,
    DashboardSummary,
    FormattedTransaction,
    HighlightEntry,
    HighlightSummary,
    Transaction,
    TransactionRecord,
    UnknownCategoryType,
)

_logger = get_logger("gofinances.aggregate")


# ---------------------------------------------------------------------------
# Record parsing
# ---------------------------------------------------------------------------


def _to_decimal(raw: Any, record_id: str | None) -> Decimal:
    # bool is an int subclass; a stored true/false is not an amount.
    if isinstance(raw, bool) or raw is None:
        raise MalformedRecord(record_id, "amount", f"expected a number, got {raw!r}")
    if isinstance(raw, float) and not math.isfinite(raw):
        raise MalformedRecord(record_id, "amount", f"non-finite amount {raw!r}")
    if isinstance(raw, int | float):
        # str() first so floats keep their shortest repr (0.1 -> "0.1").
        d = Decimal(str(raw))
    elif isinstance(raw, Decimal):
        d = raw
    elif isinstance(raw, str):
        s = raw.strip()
        if not s:
            raise MalformedRecord(record_id, "amount", "amount is empty")
        try:
            d = Decimal(s)
        except InvalidOperation as exc:
            raise MalformedRecord(record_id, "amount", f"invalid amount {raw!r}") from exc
    else:
        raise MalformedRecord(record_id, "amount", f"unsupported amount type {type(raw).__name__}")
    if not d.is_finite():
        raise MalformedRecord(record_id, "amount", f"non-finite amount {raw!r}")
    if d and d.adjusted() >= MAX_AMOUNT_INTEGER_DIGITS:
        raise MalformedRecord(record_id, "amount", f"amount out of range {raw!r}")
    return d


def _to_display_datetime(raw: Any, record_id: str | None, tz: tzinfo | None) -> datetime:
    if not isinstance(raw, str) or not raw.strip():
        raise MalformedRecord(record_id, "date", f"expected an ISO date string, got {raw!r}")
    try:
        when = datetime.fromisoformat(raw.strip())
    except ValueError as exc:
        raise MalformedRecord(record_id, "date", f"invalid ISO date {raw!r}") from exc
    if when.tzinfo is not None:
        # astimezone(None) converts to the system local zone.
        try:
            when = when.astimezone(tz).replace(tzinfo=None)
        except (OverflowError, ValueError) as exc:
            raise MalformedRecord(record_id, "date", f"date out of range {raw!r}") from exc
    return when


def _opt_str(v: Any) -> str | None:
    if v is None:
        return None
    s = str(v).strip()
    return s or None


def parse_record(record: TransactionRecord, *, timezone: tzinfo | None = None) -> Transaction:
    """Parse ``amount`` and ``date`` of one stored record.

    Raises
    ------
    MalformedRecord
        When the record is not a mapping or its amount/date cannot be read.
    """

    if not isinstance(record, Mapping):
        raise MalformedRecord(None, "record", f"expected an object, got {type(record).__name__}")

    record_id = _opt_str(record.get("id"))
    raw_type = record.get("type")
    return Transaction(
        id=record_id,
        name=str(record.get("name") or ""),
        amount=_to_decimal(record.get("amount"), record_id),
        type="" if raw_type is None else str(raw_type),
        category=str(record.get("category") or ""),
        when=_to_display_datetime(record.get("date"), record_id, timezone),
    )


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def last_date_for(subset: Iterable[Transaction]) -> datetime | None:
    """Return the most recent ``when`` in ``subset``, or ``None`` when empty.

    ``subset`` is expected to be filtered by type already. Equal maxima are
    interchangeable since only the date is returned.
    """

    return max((t.when for t in subset), default=None)


def _format_transaction(tx: Transaction, locale: LocaleConfig) -> FormattedTransaction:
    return FormattedTransaction(
        id=tx.id,
        name=tx.name,
        amount=format_currency(tx.amount, locale),
        type=tx.type,
        category=tx.category,
        date=format_short_date(tx.when, locale),
    )


def _caption(last: datetime | None, template: str, locale: LocaleConfig) -> str:
    if last is None:
        return locale.no_transactions
    return template.format(date=format_day_month(last, locale))


def compute_summary(
    records: Sequence[TransactionRecord],
    *,
    locale: LocaleConfig = PT_BR,
) -> DashboardSummary:
    """Aggregate stored records into the dashboard list and highlight cards.

    Parameters
    ----------
    records:
        Stored transactions in storage order (not necessarily chronological).
    locale:
        Formatting constants; Brazilian Portuguese by default.

    Raises
    ------
    MalformedRecord
        When any record has an unreadable amount or date. Nothing is returned
        for the run in that case.
    """

    parsed = [parse_record(r, timezone=locale.timezone) for r in records]

    entries_total = Decimal(0)
    expenses_total = Decimal(0)
    entries: list[Transaction] = []
    expenses: list[Transaction] = []
    unknown: list[UnknownCategoryType] = []

    for raw, tx in zip(records, parsed, strict=True):
        if tx.is_entry:
            entries_total += tx.amount
            entries.append(tx)
            continue
        if tx.type not in TRANSACTION_TYPES:
            flag = UnknownCategoryType(record_id=tx.id, value=raw.get("type"))
            unknown.append(flag)
            _logger.warning(
                "unknown transaction type %r on record id=%s; counting it as an expense",
                flag.value,
                tx.id,
            )
        expenses_total += tx.amount
        expenses.append(tx)

    net_total = entries_total - expenses_total

    last_entry = last_date_for(entries)
    last_expense = last_date_for(expenses)

    highlights = HighlightSummary(
        entries=HighlightEntry(
            amount=format_currency(entries_total, locale),
            last_transaction=_caption(last_entry, locale.entries_caption, locale),
        ),
        expenses=HighlightEntry(
            amount=format_currency(expenses_total, locale),
            last_transaction=_caption(last_expense, locale.expenses_caption, locale),
        ),
        # Anchored to the expense side on purpose; see module docstring.
        total=HighlightEntry(
            amount=format_currency(net_total, locale),
            last_transaction=_caption(last_expense, locale.total_caption, locale),
        ),
    )

    _logger.debug(
        "aggregated %d transactions (entries=%s expenses=%s unknown_types=%d)",
        len(parsed),
        entries_total,
        expenses_total,
        len(unknown),
    )

    return DashboardSummary(
        transactions=tuple(_format_transaction(tx, locale) for tx in parsed),
        highlights=highlights,
        entries_total=entries_total,
        expenses_total=expenses_total,
        net_total=net_total,
        unknown_types=tuple(unknown),
    )


__all__ = ["compute_summary", "last_date_for", "parse_record"]
