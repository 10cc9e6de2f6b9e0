"""Dashboard filter predicates applied to the stored issue set."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pandas as pd

ALL = "all"


@dataclass(slots=True)
class DashboardFilters:
    date_start: date | None = None
    date_end: date | None = None
    system: str | None = None
    fix_version: str | None = None
    issue_type: str | None = None


def _is_set(value: str | None) -> bool:
    return value is not None and value != ALL


def apply_dashboard_filters(df: pd.DataFrame, filters: DashboardFilters | None) -> pd.DataFrame:
    """Filter by inclusive resolved-date range and exact system/version/type.

    Issues without a resolved date drop out once either date bound is set.
    """
    if df.empty or filters is None:
        return df
    out = df
    if filters.date_start is not None or filters.date_end is not None:
        if "resolved_date" not in out.columns:
            return out.iloc[0:0].copy()
        resolved = pd.to_datetime(out["resolved_date"], errors="coerce")
        mask = resolved.notna()
        if filters.date_start is not None:
            mask &= resolved >= pd.Timestamp(filters.date_start)
        if filters.date_end is not None:
            mask &= resolved <= pd.Timestamp(filters.date_end)
        out = out[mask]
    for column in ("system", "fix_version", "issue_type"):
        value = getattr(filters, column)
        if _is_set(value) and column in out.columns:
            out = out[out[column] == value]
    return out.copy()
