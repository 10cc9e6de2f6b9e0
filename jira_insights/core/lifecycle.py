"""Release lifecycle: which fix versions are still open.

A release is open while it has no recorded description (absent, empty, or only
whitespace) and closed once one is recorded. This module is the only place
that rule is written down; dashboards and detail views all go through it so
every KPI agrees on which releases count as done.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from .models import CanonicalIssue, ReleaseRecord

ReleaseLookup = Mapping[str, str | None]
IssueBatch = pd.DataFrame | Iterable[CanonicalIssue | Mapping[str, Any]]


@dataclass(frozen=True, slots=True)
class ReleasePartition:
    names: tuple[str, ...]
    open: tuple[str, ...] = field(default_factory=tuple)

    @property
    def closed(self) -> tuple[str, ...]:
        open_set = set(self.open)
        return tuple(n for n in self.names if n not in open_set)


def release_lookup(records: Iterable[ReleaseRecord]) -> dict[str, str | None]:
    return {r.name: r.description for r in records}


def is_open(name: str, lookup: ReleaseLookup) -> bool:
    description = lookup.get(name)
    return description is None or not str(description).strip()


def classify_releases(names: Iterable[str], lookup: ReleaseLookup) -> ReleasePartition:
    """Partition distinct release names into open and closed.

    ``closed`` is derived as the set difference, never by a second predicate.
    """
    distinct: list[str] = []
    for name in names:
        if name and name not in distinct:
            distinct.append(name)
    return ReleasePartition(
        names=tuple(distinct),
        open=tuple(n for n in distinct if is_open(n, lookup)),
    )


def _fix_version(issue: Any) -> str | None:
    if isinstance(issue, Mapping):
        return issue.get("fix_version")
    return getattr(issue, "fix_version", None)


def filter_to_closed_only(issues: IssueBatch, open_names: Iterable[str]) -> pd.DataFrame | list[Any]:
    """Drop issues attributed to an open release.

    Issues without a fix version are kept. Accepts a DataFrame (returns a
    filtered copy) or a sequence of issues/mappings (returns a list).
    """
    open_set = set(open_names)
    if isinstance(issues, pd.DataFrame):
        if issues.empty or "fix_version" not in issues.columns:
            return issues.copy()
        return issues[~issues["fix_version"].isin(open_set)].copy()
    return [i for i in issues if not _fix_version(i) or _fix_version(i) not in open_set]


def _distinct_fix_versions(issues: IssueBatch) -> list[str]:
    if isinstance(issues, pd.DataFrame):
        if issues.empty or "fix_version" not in issues.columns:
            return []
        return [v for v in issues["fix_version"].dropna().unique().tolist() if v]
    return [v for v in (_fix_version(i) for i in issues) if v]


def open_versions_and_filter(
    issues: IssueBatch, lookup: ReleaseLookup
) -> tuple[pd.DataFrame | list[Any], list[str]]:
    """Classify the batch's fix versions and drop issues in open releases.

    Returns ``(closed_only_issues, open_versions)``.
    """
    if not isinstance(issues, pd.DataFrame):
        issues = list(issues)
    partition = classify_releases(_distinct_fix_versions(issues), lookup)
    filtered = filter_to_closed_only(issues, partition.open)
    logging.getLogger(__name__).info(
        "Open releases removed from calculations: %s issues kept of %s, %s open releases",
        len(filtered),
        len(issues),
        len(partition.open),
    )
    return filtered, list(partition.open)
