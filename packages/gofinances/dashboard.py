"""Dashboard loading: storage read plus aggregation, with an empty-state fallback.

Every call recomputes from scratch; refreshing the dashboard is calling
:func:`load_dashboard` again.
"""

from __future__ import annotations

from dataclasses import dataclass

from .aggregate import compute_summary
from .errors import MalformedRecord, StorageDecodeError
from .formatting import PT_BR, LocaleConfig
from .logging_setup import get_logger
from .models import DashboardSummary
from .storage import Storage, load_transactions

_logger = get_logger("gofinances.dashboard")


@dataclass(frozen=True, slots=True)
class DashboardState:
    """What the presentation layer shows.

    ``error`` is set when stored data could not be aggregated; ``summary`` is
    then the empty summary so the screen still renders its cards.
    """

    summary: DashboardSummary
    error: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.summary.transactions


def load_dashboard(
    storage: Storage,
    user_id: str,
    *,
    locale: LocaleConfig = PT_BR,
) -> DashboardState:
    """Read ``user_id``'s transactions and aggregate them for display."""

    try:
        records = load_transactions(storage, user_id)
        summary = compute_summary(records, locale=locale)
    except (MalformedRecord, StorageDecodeError) as exc:
        _logger.error("dashboard:load_failed user=%s error=%s", user_id, exc)
        return DashboardState(summary=compute_summary([], locale=locale), error=str(exc))

    _logger.info(
        "dashboard:loaded user=%s transactions=%d", user_id, len(summary.transactions)
    )
    return DashboardState(summary=summary)


__all__ = ["DashboardState", "load_dashboard"]
