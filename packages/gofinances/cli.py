# ruff: noqa: I001
"""CLI for the ``gofinances`` package.

Typer-based console interface over the library: the dashboard, transaction
registration and storage maintenance. The root callback loads a local ``.env``
with ``python-dotenv`` and configures logging before any command runs.
Business logic lives in ``gofinances.dashboard``, ``gofinances.register`` and
``gofinances.storage``; commands only parse options, call into them and turn
failures into an error line on stderr plus exit status 1.
"""

from __future__ import annotations

import dataclasses
import json
import sys
from pathlib import Path

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console

from .categories import CATEGORIES
from .logging_setup import configure_logging
from .settings import Settings, load_settings, open_storage


def _fail(message: str) -> typer.Exit:
    print(f"Error: {message}", file=sys.stderr)
    return typer.Exit(1)


def _settings(locale: str | None = None) -> Settings:
    try:
        settings = load_settings()
        if locale:
            from .formatting import get_locale

            settings = dataclasses.replace(
                settings,
                locale=dataclasses.replace(get_locale(locale), timezone=settings.locale.timezone),
            )
    except ValueError as e:
        raise _fail(f"invalid configuration: {e}") from e
    return settings


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Record income/expense transactions and show the dashboard summary. "
        "Loads settings from the environment and a local .env."
    ),
)


@app.command("dashboard")
def dashboard_cmd(
    user_id: str = typer.Option(..., "--user-id", help="Identity whose transactions are shown."),
    *,
    user_name: str | None = typer.Option(None, help="Name used in the greeting line."),
    locale: str | None = typer.Option(
        None, help="Override GOFINANCES_LOCALE (pt-BR or en-US)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the summary as JSON."),
) -> None:
    """Show highlight cards (entries, expenses, total) and the transaction list."""

    from .dashboard import load_dashboard
    from .render import render_dashboard, state_to_dict

    settings = _settings(locale)
    try:
        storage = open_storage(settings)
        state = load_dashboard(storage, user_id, locale=settings.locale)
    except Exception as e:
        raise _fail(f"failed to load dashboard: {e}") from e

    if as_json:
        typer.echo(json.dumps(state_to_dict(state), ensure_ascii=False, indent=2))
    else:
        render_dashboard(state, console=Console(), locale=settings.locale, user_name=user_name)

    if state.error:
        raise typer.Exit(1)


@app.command("register")
def register_cmd(
    user_id: str = typer.Option(..., "--user-id", help="Identity that owns the transaction."),
    *,
    name: str = typer.Option(..., help="Description of the transaction."),
    amount: str = typer.Option(..., help="Positive amount, e.g. 1250.90."),
    type_: str = typer.Option(
        ..., "--type", help="'positive' for an entry, 'negative' for an expense."
    ),
    category: str | None = typer.Option(
        None, help="Category key or name; prompts interactively when omitted."
    ),
) -> None:
    """Validate and store a new transaction."""

    from .register import register_transaction

    if category is None:
        from .term_ui import select_category

        try:
            category = select_category(CATEGORIES).key
        except (EOFError, KeyboardInterrupt) as e:
            raise _fail("no category selected") from e

    settings = _settings()
    try:
        storage = open_storage(settings)
        record = register_transaction(
            storage,
            user_id,
            name=name,
            amount=amount,
            type=type_,
            category=category,
        )
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise _fail(f"invalid transaction: {problems}") from e
    except Exception as e:
        raise _fail(f"failed to store transaction: {e}") from e

    typer.echo(record["id"])


@app.command("categories")
def categories_cmd() -> None:
    """List the categories accepted by ``register``."""

    for c in CATEGORIES:
        typer.echo(f"{c.key}\t{c.name}")


@app.command("clear")
def clear_cmd(
    user_id: str = typer.Option(..., "--user-id", help="Identity whose transactions are removed."),
    *,
    yes: bool = typer.Option(False, "--yes", help="Do not ask for confirmation."),
) -> None:
    """Remove every stored transaction of a user."""

    from .storage import transactions_key

    if not yes:
        typer.confirm(f"Remove all transactions of {user_id}?", abort=True)

    settings = _settings()
    try:
        open_storage(settings).remove(transactions_key(user_id))
    except Exception as e:
        raise _fail(f"failed to clear transactions: {e}") from e


@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding
    already-set variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


def main() -> None:  # pragma: no cover - console script entry point
    app()


if __name__ == "__main__":  # pragma: no cover
    app()


__all__ = ["app", "main"]
