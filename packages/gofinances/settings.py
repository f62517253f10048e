"""Runtime configuration read from the environment.

The CLI loads a local ``.env`` (without overriding existing variables) before
calling :func:`load_settings`, so both sources work.

Variables
---------
``GOFINANCES_DATA_DIR``
    Root directory of the file storage backend. Default: ``./.gofinances``.
``GOFINANCES_STORAGE``
    ``file`` (default) or ``sql``.
``DATABASE_URL``
    SQLAlchemy URL; required when ``GOFINANCES_STORAGE=sql``.
``GOFINANCES_LOCALE``
    ``pt-BR`` (default) or ``en-US``.
``GOFINANCES_TIMEZONE``
    Optional IANA zone (e.g. ``America/Sao_Paulo``) that timestamps are shown
    in. Unset means the system local zone.
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .formatting import LocaleConfig, get_locale
from .storage import FileStorage, SqlStorage, Storage

_BACKENDS = ("file", "sql")


@dataclass(frozen=True, slots=True)
class Settings:
    data_dir: Path
    storage_backend: str
    database_url: str | None
    locale: LocaleConfig


def _data_dir(env: Mapping[str, str]) -> Path:
    root = env.get("GOFINANCES_DATA_DIR")
    if root and root.strip():
        return Path(root).expanduser().resolve()
    return (Path.cwd() / ".gofinances").resolve()


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from ``env`` (``os.environ`` by default).

    Raises ``ValueError`` naming the offending variable on bad values.
    """

    env = os.environ if env is None else env

    backend = (env.get("GOFINANCES_STORAGE") or "file").strip().lower()
    if backend not in _BACKENDS:
        raise ValueError(
            f"GOFINANCES_STORAGE must be one of {', '.join(_BACKENDS)}; got {backend!r}"
        )

    database_url = (env.get("DATABASE_URL") or "").strip() or None
    if backend == "sql" and database_url is None:
        raise ValueError("DATABASE_URL is required when GOFINANCES_STORAGE=sql")

    try:
        locale = get_locale(env.get("GOFINANCES_LOCALE") or "pt-BR")
    except ValueError as exc:
        raise ValueError(f"GOFINANCES_LOCALE: {exc}") from exc

    tz_name = (env.get("GOFINANCES_TIMEZONE") or "").strip()
    if tz_name:
        try:
            locale = dataclasses.replace(locale, timezone=ZoneInfo(tz_name))
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"GOFINANCES_TIMEZONE: unknown time zone {tz_name!r}") from exc

    return Settings(
        data_dir=_data_dir(env),
        storage_backend=backend,
        database_url=database_url,
        locale=locale,
    )


def open_storage(settings: Settings) -> Storage:
    """Return the storage backend selected by ``settings``."""

    if settings.storage_backend == "sql":
        storage = SqlStorage(settings.database_url)
        storage.ensure_schema()
        return storage
    return FileStorage(settings.data_dir)


__all__ = ["Settings", "load_settings", "open_storage"]
