"""Terminal rendering of the dashboard (``rich``) and its JSON form."""

from __future__ import annotations

import dataclasses
from decimal import Decimal
from typing import Any

from rich.columns import Columns
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .categories import category_name
from .dashboard import DashboardState
from .formatting import PT_BR, LocaleConfig
from .models import POSITIVE, FormattedTransaction, HighlightEntry


def _card(title: str, entry: HighlightEntry, style: str) -> Panel:
    body = Group(
        Text(entry.amount, style=f"bold {style}"),
        Text(entry.last_transaction, style="dim"),
    )
    return Panel(body, title=title, title_align="left", border_style=style, expand=True)


def _amount_cell(tx: FormattedTransaction) -> Text:
    if tx.type == POSITIVE:
        return Text(tx.amount, style="green")
    # Expenses, including records with an unrecognized type.
    return Text(f"- {tx.amount}", style="red")


def build_transactions_table(
    transactions: tuple[FormattedTransaction, ...], *, locale: LocaleConfig = PT_BR
) -> Table:
    name, amount, category, date = locale.columns
    table = Table(title=locale.list_title, title_justify="left", expand=True)
    table.add_column(name)
    table.add_column(amount, justify="right")
    table.add_column(category)
    table.add_column(date, justify="right")
    for tx in transactions:
        table.add_row(
            Text(tx.name), _amount_cell(tx), Text(category_name(tx.category)), Text(tx.date)
        )
    return table


def render_dashboard(
    state: DashboardState,
    *,
    console: Console | None = None,
    locale: LocaleConfig = PT_BR,
    user_name: str | None = None,
) -> None:
    """Print greeting, the three highlight cards and the transaction list."""

    console = console or Console()
    highlights = state.summary.highlights

    if user_name:
        console.print(Text(locale.greeting.format(name=user_name), style="bold"))

    console.print(
        Columns(
            [
                _card(locale.entries_title, highlights.entries, "green"),
                _card(locale.expenses_title, highlights.expenses, "red"),
                _card(locale.total_title, highlights.total, "blue"),
            ],
            equal=True,
            expand=True,
        )
    )

    if state.error:
        console.print(Text(state.error, style="bold red"))

    console.print(build_transactions_table(state.summary.transactions, locale=locale))

    for flag in state.summary.unknown_types:
        console.print(
            Text(
                locale.unknown_type_notice.format(value=flag.value, record_id=flag.record_id),
                style="yellow",
            )
        )


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_jsonable(v) for v in value]
    return value


def state_to_dict(state: DashboardState) -> dict[str, Any]:
    """Plain JSON-serializable view of a dashboard state.

    Decimal totals become plain decimal strings.
    """

    return {
        "error": state.error,
        "summary": _jsonable(dataclasses.asdict(state.summary)),
    }


__all__ = ["build_transactions_table", "render_dashboard", "state_to_dict"]
