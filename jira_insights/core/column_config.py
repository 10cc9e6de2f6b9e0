"""Load the CSV column alias table from YAML (with fallbacks)."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .config import COLUMN_ALIASES

_CACHE: dict[str, list[str]] | None = None


def _defaults() -> dict[str, list[str]]:
    return {field: list(names) for field, names in COLUMN_ALIASES.items()}


def load_column_aliases(base_path: str | Path | None = None) -> dict[str, list[str]]:
    """Return the alias table, merging ``columns.yaml`` over the built-in one.

    The YAML file may define an ``aliases`` mapping of canonical field to a list
    of header names. Listed fields replace the built-in ranking for that field;
    unlisted fields keep their defaults. Only the default location is cached.
    """
    global _CACHE
    if base_path is None and _CACHE is not None:
        return _CACHE
    base = Path(base_path or Path(__file__).resolve().parent.parent)
    yaml_path = base / "columns.yaml"
    aliases = _defaults()
    if yaml_path.exists():
        try:
            data = yaml.safe_load(yaml_path.read_text(encoding="utf-8")) or {}
            overrides = data.get("aliases") or {}
            for field, names in overrides.items():
                if isinstance(names, list) and names:
                    aliases[str(field)] = [str(n) for n in names]
        except (yaml.YAMLError, OSError, AttributeError) as exc:
            logging.getLogger(__name__).warning("Ignoring unreadable %s: %s", yaml_path, exc)
            aliases = _defaults()
    if base_path is None:
        _CACHE = aliases
    return aliases


def get_aliases(field: str) -> list[str]:
    return load_column_aliases().get(field, [field])
