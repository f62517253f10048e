import copy
import dataclasses
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from gofinances import (
    EN_US,
    PT_BR,
    MalformedRecord,
    UnknownCategoryType,
    compute_summary,
    last_date_for,
    parse_record,
)

NBSP = "\u00a0"
SENTINEL = "Não há transações"


def _brl(digits: str) -> str:
    return f"R${NBSP}{digits}"


def _tx(id, type, amount, date, *, name="Item", category="food"):
    return {
        "id": id,
        "name": name,
        "amount": amount,
        "type": type,
        "category": category,
        "date": date,
    }


# ---- Scenarios ---------------------------------------------------------------


def test_entry_and_expense_scenario():
    records = [
        _tx("1", "positive", 1000, "2024-01-05", name="Salário", category="salary"),
        _tx("2", "negative", 400, "2024-01-10", name="Mercado", category="food"),
    ]

    summary = compute_summary(records)
    h = summary.highlights

    assert h.entries.amount == _brl("1.000,00")
    assert h.expenses.amount == _brl("400,00")
    assert h.total.amount == _brl("600,00")

    assert h.entries.last_transaction == "Última entrada dia 5 de janeiro"
    assert h.expenses.last_transaction == "Última saída dia 10 de janeiro"
    assert h.total.last_transaction == "01 à 10 de janeiro"

    assert summary.entries_total == Decimal("1000")
    assert summary.expenses_total == Decimal("400")
    assert summary.net_total == Decimal("600")
    assert summary.unknown_types == ()


def test_only_entries_uses_sentinel_for_expenses_and_total():
    summary = compute_summary([_tx("1", "positive", "250.5", "2024-03-02")])
    h = summary.highlights

    assert h.entries.amount == _brl("250,50")
    assert h.entries.last_transaction == "Última entrada dia 2 de março"
    assert h.expenses.amount == _brl("0,00")
    assert h.expenses.last_transaction == SENTINEL
    assert h.total.last_transaction == SENTINEL


def test_total_range_follows_expenses_even_when_entry_is_later():
    records = [
        _tx("1", "negative", 10, "2024-02-03"),
        _tx("2", "positive", 99, "2024-02-20"),
    ]

    h = compute_summary(records).highlights

    assert h.entries.last_transaction == "Última entrada dia 20 de fevereiro"
    assert h.total.last_transaction == "01 à 3 de fevereiro"


def test_tied_max_dates_resolve_to_that_date():
    records = [
        _tx("1", "negative", 5, "2024-06-15T10:00:00"),
        _tx("2", "negative", 7, "2024-06-15T10:00:00"),
        _tx("3", "negative", 1, "2024-06-01T09:00:00"),
    ]

    h = compute_summary(records).highlights

    assert h.expenses.last_transaction == "Última saída dia 15 de junho"
    assert h.expenses.amount == _brl("13,00")


def test_unknown_type_counts_as_expense_and_is_flagged(caplog):
    records = [
        _tx("1", "positive", 100, "2024-01-01"),
        _tx("2", "transfer", 30, "2024-01-04"),
    ]

    with caplog.at_level(logging.WARNING, logger="gofinances.aggregate"):
        summary = compute_summary(records)

    assert summary.expenses_total == Decimal("30")
    assert summary.net_total == Decimal("70")
    assert summary.highlights.expenses.last_transaction == "Última saída dia 4 de janeiro"
    assert summary.unknown_types == (UnknownCategoryType(record_id="2", value="transfer"),)
    assert len(summary.transactions) == 2
    assert any("transfer" in r.getMessage() for r in caplog.records)


def test_missing_type_is_flagged_with_none():
    summary = compute_summary([{"id": "x", "amount": 3, "date": "2024-01-01"}])

    assert summary.unknown_types == (UnknownCategoryType(record_id="x", value=None),)
    assert summary.expenses_total == Decimal("3")


# ---- Empty input and invariants ------------------------------------------------


def test_empty_input_is_the_empty_state():
    summary = compute_summary([])
    h = summary.highlights

    assert summary.transactions == ()
    assert (summary.entries_total, summary.expenses_total, summary.net_total) == (0, 0, 0)
    for entry in (h.entries, h.expenses, h.total):
        assert entry.amount == _brl("0,00")
        assert entry.last_transaction == SENTINEL


def test_net_total_is_exact_for_float_amounts():
    records = [
        _tx("1", "positive", 0.1, "2024-01-01"),
        _tx("2", "positive", 0.2, "2024-01-02"),
        _tx("3", "negative", 0.3, "2024-01-03"),
    ]

    summary = compute_summary(records)

    assert summary.entries_total - summary.expenses_total == summary.net_total
    assert summary.net_total == Decimal("0.0")
    assert summary.highlights.total.amount == _brl("0,00")


def test_negative_net_total_is_formatted_with_leading_minus():
    records = [
        _tx("1", "positive", "400", "2024-01-01"),
        _tx("2", "negative", "1000", "2024-01-02"),
    ]

    assert compute_summary(records).highlights.total.amount == f"-R${NBSP}600,00"


def test_formatted_list_preserves_length_order_and_fields():
    records = [
        _tx("b", "negative", "12.5", "2024-05-20", name="Pizza", category="food"),
        _tx("a", "positive", 3000, "2023-12-31T18:45:00", name="Salário", category="salary"),
        _tx("c", "negative", "1234567.891", "2024-01-09", name="Carro", category="car"),
    ]

    rows = compute_summary(records).transactions

    assert [r.id for r in rows] == ["b", "a", "c"]
    assert rows[0].amount == _brl("12,50")
    assert rows[0].date == "20/05/24"
    assert rows[1].date == "31/12/23"
    assert rows[2].amount == _brl("1.234.567,89")
    assert (rows[1].name, rows[1].type, rows[1].category) == ("Salário", "positive", "salary")


def test_summary_is_idempotent_and_does_not_mutate_input():
    records = [
        _tx("1", "positive", "10", "2024-01-05"),
        _tx("2", "negative", 4, "2024-01-10"),
    ]
    snapshot = copy.deepcopy(records)

    first = compute_summary(records)
    second = compute_summary(records)

    assert first == second
    assert records == snapshot


def test_numeric_ids_are_rendered_as_strings():
    rows = compute_summary([_tx(7, "positive", 1, "2024-01-01")]).transactions
    assert rows[0].id == "7"


# ---- Malformed records ----------------------------------------------------------


@pytest.mark.parametrize(
    "amount",
    ["", "abc", "1,000.00", None, True, float("nan"), float("inf"), "Infinity", [1]],
)
def test_unreadable_amount_raises_malformed_record(amount):
    records = [
        _tx("ok", "positive", 1, "2024-01-01"),
        _tx("bad-amount", "negative", amount, "2024-01-02"),
    ]

    with pytest.raises(MalformedRecord) as ei:
        compute_summary(records)

    assert ei.value.record_id == "bad-amount"
    assert ei.value.field == "amount"
    assert "bad-amount" in str(ei.value)


@pytest.mark.parametrize("date", ["", "yesterday", "2024-13-01", "10/01/2024", None, 1704844800])
def test_unreadable_date_raises_malformed_record(date):
    with pytest.raises(MalformedRecord) as ei:
        compute_summary([_tx("bad-date", "positive", 1, date)])

    assert ei.value.record_id == "bad-date"
    assert ei.value.field == "date"


@pytest.mark.parametrize(
    "amount", ["1e30", "12345678901234567890123456789", 10**20, "1000000000000000"]
)
def test_amount_beyond_display_range_raises_malformed_record(amount):
    records = [_tx("huge", "positive", amount, "2024-01-01")]

    with pytest.raises(MalformedRecord) as ei:
        compute_summary(records)

    assert ei.value.field == "amount"
    assert ei.value.record_id == "huge"



def test_zero_with_large_exponent_is_a_zero_amount():
    summary = compute_summary([_tx("1", "positive", "0E+50", "2024-01-01")])

    assert summary.entries_total == 0
    assert summary.highlights.entries.amount == _brl("0,00")

def test_largest_in_range_amount_is_summarized():
    summary = compute_summary([_tx("1", "negative", "999999999999999.99", "2024-01-01")])

    assert summary.highlights.total.amount == f"-R${NBSP}999.999.999.999.999,99"


def test_aware_date_that_overflows_on_conversion_raises_malformed_record():
    locale = dataclasses.replace(PT_BR, timezone=timezone.utc)
    records = [_tx("edge", "negative", 1, "0001-01-01T00:00:00+05:00")]

    with pytest.raises(MalformedRecord) as ei:
        compute_summary(records, locale=locale)

    assert ei.value.record_id == "edge"
    assert ei.value.field == "date"


def test_non_mapping_record_raises_malformed_record():
    with pytest.raises(MalformedRecord):
        compute_summary(["not a record"])


# ---- Dates and locales -------------------------------------------------------


def test_aware_timestamps_are_shown_in_the_locale_timezone():
    brt = timezone(timedelta(hours=-3))
    locale = dataclasses.replace(PT_BR, timezone=brt)
    records = [_tx("1", "negative", 50, "2024-01-10T02:00:00.000Z")]

    summary = compute_summary(records, locale=locale)

    assert summary.transactions[0].date == "09/01/24"
    assert summary.highlights.expenses.last_transaction == "Última saída dia 9 de janeiro"


def test_mixed_naive_and_aware_dates_compare():
    locale = dataclasses.replace(PT_BR, timezone=timezone.utc)
    records = [
        _tx("1", "negative", 1, "2024-04-01"),
        _tx("2", "negative", 1, "2024-04-02T12:00:00+00:00"),
    ]

    h = compute_summary(records, locale=locale).highlights

    assert h.expenses.last_transaction == "Última saída dia 2 de abril"


def test_en_us_locale_formatting():
    records = [
        _tx("1", "positive", 1000, "2024-01-05"),
        _tx("2", "negative", 400, "2024-01-10"),
    ]

    summary = compute_summary(records, locale=EN_US)
    h = summary.highlights

    assert h.entries.amount == "$1,000.00"
    assert h.total.amount == "$600.00"
    assert h.expenses.last_transaction == "Last exit on January 10"
    assert h.total.last_transaction == "01 to January 10"
    assert summary.transactions[0].date == "01/05/24"
    assert compute_summary([], locale=EN_US).highlights.total.last_transaction == "No transactions"


# ---- Helpers -------------------------------------------------------------------


def test_last_date_for_empty_subset_is_none():
    assert last_date_for([]) is None


def test_last_date_for_returns_maximum():
    subset = [
        parse_record(_tx("1", "negative", 1, "2024-01-03")),
        parse_record(_tx("2", "negative", 1, "2024-01-09T08:00:00")),
        parse_record(_tx("3", "negative", 1, "2024-01-09")),
    ]

    assert last_date_for(subset) == datetime(2024, 1, 9, 8, 0)


def test_parse_record_keeps_exact_decimal_amounts():
    tx = parse_record(_tx("1", "positive", " 19.90 ", "2024-01-01"))

    assert tx.amount == Decimal("19.90")
    assert tx.is_entry
    assert tx.when == datetime(2024, 1, 1)
