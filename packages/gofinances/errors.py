"""Exceptions raised by ``gofinances`` library code.

Both derive from ``ValueError``: they describe stored data that cannot be
interpreted, not programming errors. Callers that present a dashboard map
them to an empty state (see :func:`gofinances.dashboard.load_dashboard`).
"""

from __future__ import annotations


class MalformedRecord(ValueError):
    """A stored transaction whose ``amount`` or ``date`` cannot be parsed.

    Aborts the aggregation run; no partial totals are produced.
    """

    def __init__(self, record_id: str | None, field: str, detail: str) -> None:
        self.record_id = record_id
        self.field = field
        self.detail = detail
        super().__init__(f"malformed transaction record id={record_id!r} field={field}: {detail}")


class StorageDecodeError(ValueError):
    """A stored value that is not a JSON array of transaction objects."""

    def __init__(self, key: str, detail: str) -> None:
        self.key = key
        self.detail = detail
        super().__init__(f"cannot decode stored value for key {key!r}: {detail}")


__all__ = ["MalformedRecord", "StorageDecodeError"]
