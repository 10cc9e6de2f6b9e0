"""Per-release aggregation split by lifecycle (open vs closed)."""

from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from jira_insights.core.config import BUG_ISSUE_TYPES, UNDEFINED_SYSTEM_LABEL
from jira_insights.core.lifecycle import ReleaseLookup, classify_releases
from jira_insights.core.normalizers import round_half_up

SUMMARY_COLUMNS = [
    "version",
    "system",
    "total_stories",
    "total_bugs",
    "bug_percentage",
    "first_resolved",
    "last_resolved",
    "duration_days",
    "description",
    "is_open",
]


@dataclass(slots=True)
class VersionKpis:
    total_versions: int = 0
    total_stories: int = 0
    avg_duration_days: float = 0.0


def version_summary(df: pd.DataFrame, lookup: ReleaseLookup) -> pd.DataFrame:
    """One row per fix version with delivery span and bug share.

    ``system`` is taken from the first issue seen for the version. Duration is
    the inclusive day span between the first and last resolved issue.
    """
    if df.empty or "fix_version" not in df.columns:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    work = df[df["fix_version"].notna() & (df["fix_version"] != "")]
    if work.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    partition = classify_releases(work["fix_version"].tolist(), lookup)
    open_set = set(partition.open)
    rows = []
    for version, group in work.groupby("fix_version", sort=False):
        system = group["system"].iloc[0] if "system" in group.columns else None
        issue_types = group["issue_type"] if "issue_type" in group.columns else pd.Series(dtype=object)
        bugs = int(issue_types.fillna("").astype(str).str.lower().isin(BUG_ISSUE_TYPES).sum())
        resolved_raw = group["resolved_date"] if "resolved_date" in group.columns else pd.Series(dtype=object)
        resolved = pd.to_datetime(resolved_raw, errors="coerce").dropna().sort_values()
        first = resolved.iloc[0] if not resolved.empty else None
        last = resolved.iloc[-1] if not resolved.empty else None
        duration = (last - first).days + 1 if first is not None else 0
        stories = len(group)
        rows.append(
            {
                "version": version,
                "system": system if isinstance(system, str) and system else UNDEFINED_SYSTEM_LABEL,
                "total_stories": stories,
                "total_bugs": bugs,
                "bug_percentage": int(round_half_up(bugs / stories * 100)) if stories else 0,
                "first_resolved": first.date().isoformat() if first is not None else None,
                "last_resolved": last.date().isoformat() if last is not None else None,
                "duration_days": duration,
                "description": lookup.get(version) or None,
                "is_open": version in open_set,
            }
        )
    frame = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    # Keep missing dates and descriptions as None regardless of pandas string inference
    for column in ("first_resolved", "last_resolved", "description"):
        frame[column] = pd.Series([row[column] for row in rows], index=frame.index, dtype=object)
    return frame


def version_kpis(summary: pd.DataFrame, *, open_releases: bool) -> VersionKpis:
    if summary.empty:
        return VersionKpis()
    subset = summary[summary["is_open"] == open_releases]
    if subset.empty:
        return VersionKpis()
    return VersionKpis(
        total_versions=len(subset),
        total_stories=int(subset["total_stories"].sum()),
        avg_duration_days=round_half_up(float(subset["duration_days"].mean()), 1),
    )
