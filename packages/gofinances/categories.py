"""Transaction categories.

The category list is fixed: registration only accepts these keys, while the
aggregator treats the stored ``category`` as a free-form label (older data or
other clients may carry anything).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Category:
    key: str
    name: str


CATEGORIES: tuple[Category, ...] = (
    Category("purchases", "Compras"),
    Category("food", "Alimentação"),
    Category("salary", "Salário"),
    Category("car", "Carro"),
    Category("leisure", "Lazer"),
    Category("studies", "Estudos"),
)


def normalize_name(name: str) -> str:
    """Return a trimmed, single-spaced representation of ``name``."""

    return " ".join(name.strip().split())


def find_category(key_or_name: str) -> Category | None:
    """Look a category up by key or display name, case-insensitively."""

    needle = normalize_name(key_or_name).casefold()
    if not needle:
        return None
    for c in CATEGORIES:
        if needle in (c.key.casefold(), c.name.casefold()):
            return c
    return None


def category_name(key: str) -> str:
    """Display name for ``key``; unknown keys are shown as stored."""

    found = find_category(key) if key else None
    return found.name if found is not None else key


__all__ = ["CATEGORIES", "Category", "category_name", "find_category", "normalize_name"]
