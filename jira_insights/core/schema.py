"""Resolve arbitrary export headers onto canonical issue fields."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

from .column_config import get_aliases


def _candidates(field: str, aliases: Mapping[str, Sequence[str]] | None) -> Sequence[str]:
    if aliases is None:
        return get_aliases(field)
    return aliases.get(field) or [field]


def find_column(
    row: Mapping[str, str],
    field: str,
    aliases: Mapping[str, Sequence[str]] | None = None,
) -> str | None:
    """Return the first non-empty value among the field's ranked aliases.

    Matching is exact and case-sensitive. Values are returned as-is.
    """
    for name in _candidates(field, aliases):
        value = row.get(name)
        if value is not None and value != "":
            return value
    return None


def find_all_column_values(
    row: Mapping[str, str],
    field: str,
    aliases: Mapping[str, Sequence[str]] | None = None,
) -> list[str]:
    """Collect every non-empty value for a field across duplicate-suffixed columns.

    A header matches when it equals an alias or an alias followed by ``_<digits>``.
    Values are trimmed and de-duplicated; order follows the row's columns.
    """
    patterns = [re.compile(rf"{re.escape(name)}(?:_\d+)?") for name in _candidates(field, aliases)]
    values: list[str] = []
    for key, raw in row.items():
        for pattern in patterns:
            if not pattern.fullmatch(key):
                continue
            value = (raw or "").strip()
            if value and value not in values:
                values.append(value)
    return values
