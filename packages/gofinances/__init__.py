"""Public interface for the ``gofinances`` package.

Symbol re-exports only; the CLI (``gofinances.cli``) and terminal rendering
(``gofinances.render``, ``gofinances.term_ui``) are imported on demand.
"""

from .aggregate import compute_summary, last_date_for, parse_record
from .dashboard import DashboardState, load_dashboard
from .errors import MalformedRecord, StorageDecodeError
from .formatting import EN_US, PT_BR, LocaleConfig, get_locale
from .models import (
    NEGATIVE,
    POSITIVE,
    DashboardSummary,
    FormattedTransaction,
    HighlightEntry,
    HighlightSummary,
    NewTransaction,
    Transaction,
    TransactionRecord,
    UnknownCategoryType,
)
from .register import register_transaction
from .storage import (
    FileStorage,
    SqlStorage,
    Storage,
    append_transaction,
    load_transactions,
    save_transactions,
    transactions_key,
)

__all__ = [
    # Aggregation
    "compute_summary",
    "last_date_for",
    "parse_record",
    # Dashboard / registration
    "DashboardState",
    "load_dashboard",
    "register_transaction",
    # Storage
    "Storage",
    "FileStorage",
    "SqlStorage",
    "transactions_key",
    "load_transactions",
    "save_transactions",
    "append_transaction",
    # Errors
    "MalformedRecord",
    "StorageDecodeError",
    # Formatting
    "LocaleConfig",
    "PT_BR",
    "EN_US",
    "get_locale",
    # Models / types
    "POSITIVE",
    "NEGATIVE",
    "TransactionRecord",
    "Transaction",
    "FormattedTransaction",
    "HighlightEntry",
    "HighlightSummary",
    "DashboardSummary",
    "UnknownCategoryType",
    "NewTransaction",
]
