"""Locale-bound rendering of amounts, dates and dashboard captions.

Every locale-dependent constant lives on a :class:`LocaleConfig`; the
aggregation code only ever receives one as a parameter. Two presets ship:
:data:`PT_BR` (the default) and :data:`EN_US`.

Amounts are rendered from ``Decimal`` with exactly two places
(``ROUND_HALF_UP``) and grouped by thousands, e.g. ``R$ 1.234,56`` (the gap
after the symbol is a no-break space) or ``$1,234.56``. Negative values carry
a leading minus before the symbol.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Literal

_CENTS = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class LocaleConfig:
    """Formatting constants for one audience.

    Caption templates take a single ``{date}`` placeholder, filled with the
    output of :func:`format_day_month`. ``timezone`` is the zone aware
    timestamps are shown in; ``None`` means the system local zone.
    """

    name: str
    currency_symbol: str
    symbol_separator: str
    decimal_separator: str
    thousands_separator: str
    date_order: Literal["dmy", "mdy"]
    month_names: tuple[str, ...]
    day_month_template: str
    entries_caption: str
    expenses_caption: str
    total_caption: str
    no_transactions: str
    entries_title: str
    expenses_title: str
    total_title: str
    list_title: str
    greeting: str
    columns: tuple[str, str, str, str]
    unknown_type_notice: str
    timezone: tzinfo | None = None

    def __post_init__(self) -> None:
        if len(self.month_names) != 12:
            raise ValueError(f"LocaleConfig {self.name!r} needs 12 month names")
        if self.decimal_separator == self.thousands_separator:
            raise ValueError(f"LocaleConfig {self.name!r} uses the same decimal and thousands separator")


PT_BR = LocaleConfig(
    name="pt-BR",
    currency_symbol="R$",
    symbol_separator="\u00a0",
    decimal_separator=",",
    thousands_separator=".",
    date_order="dmy",
    month_names=(
        "janeiro",
        "fevereiro",
        "março",
        "abril",
        "maio",
        "junho",
        "julho",
        "agosto",
        "setembro",
        "outubro",
        "novembro",
        "dezembro",
    ),
    day_month_template="{day} de {month}",
    entries_caption="Última entrada dia {date}",
    expenses_caption="Última saída dia {date}",
    total_caption="01 à {date}",
    no_transactions="Não há transações",
    entries_title="Entradas",
    expenses_title="Saídas",
    total_title="Total",
    list_title="Listagem",
    greeting="Olá, {name}",
    columns=("Nome", "Valor", "Categoria", "Data"),
    unknown_type_notice="Tipo desconhecido {value!r} no registro {record_id}; contado como saída",
)

EN_US = LocaleConfig(
    name="en-US",
    currency_symbol="$",
    symbol_separator="",
    decimal_separator=".",
    thousands_separator=",",
    date_order="mdy",
    month_names=(
        "January",
        "February",
        "March",
        "April",
        "May",
        "June",
        "July",
        "August",
        "September",
        "October",
        "November",
        "December",
    ),
    day_month_template="{month} {day}",
    entries_caption="Last entry on {date}",
    expenses_caption="Last exit on {date}",
    total_caption="01 to {date}",
    no_transactions="No transactions",
    entries_title="Entries",
    expenses_title="Expenses",
    total_title="Total",
    list_title="Transactions",
    greeting="Hello, {name}",
    columns=("Name", "Amount", "Category", "Date"),
    unknown_type_notice="Unknown type {value!r} on record {record_id}; counted as an expense",
)

_LOCALES: dict[str, LocaleConfig] = {"pt-br": PT_BR, "en-us": EN_US}


def get_locale(name: str) -> LocaleConfig:
    """Resolve a locale preset by name (``pt-BR``, ``pt_BR``, ``en-US``...)."""

    key = name.strip().replace("_", "-").lower()
    try:
        return _LOCALES[key]
    except KeyError:
        known = ", ".join(sorted(c.name for c in _LOCALES.values()))
        raise ValueError(f"unsupported locale {name!r}; expected one of: {known}") from None


def format_currency(value: Decimal, locale: LocaleConfig) -> str:
    with localcontext() as ctx:
        # Room for every integer digit plus the two cents places.
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        q = value.quantize(_CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if q < 0 else ""
    # Python groups with ',' and uses '.' for decimals; swap both at once.
    digits = f"{q.copy_abs():,.2f}".translate(
        str.maketrans({",": locale.thousands_separator, ".": locale.decimal_separator})
    )
    return f"{sign}{locale.currency_symbol}{locale.symbol_separator}{digits}"


def format_short_date(when: datetime, locale: LocaleConfig) -> str:
    """Two-digit day, month and year in the locale's order (``05/01/24``)."""

    day = f"{when.day:02d}"
    month = f"{when.month:02d}"
    year = f"{when.year % 100:02d}"
    if locale.date_order == "mdy":
        return f"{month}/{day}/{year}"
    return f"{day}/{month}/{year}"


def format_day_month(when: datetime, locale: LocaleConfig) -> str:
    """Day number plus full month name (``10 de janeiro``)."""

    return locale.day_month_template.format(
        day=when.day, month=locale.month_names[when.month - 1]
    )


__all__ = [
    "EN_US",
    "PT_BR",
    "LocaleConfig",
    "format_currency",
    "format_day_month",
    "format_short_date",
    "get_locale",
]
