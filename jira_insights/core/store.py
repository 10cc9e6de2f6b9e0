"""Storage collaborator contract and an in-memory implementation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict
from datetime import datetime
from typing import Any, Protocol

import pandas as pd
import pytz

from .config import ISSUE_CORE_COLUMNS, TIMEZONE
from .models import CanonicalIssue, ReleaseRecord


class StoreError(RuntimeError):
    """A single read or write against the store failed."""


class IssueStore(Protocol):
    def existing_issue_keys(self, keys: Iterable[str]) -> set[str]: ...

    def insert_issue(self, issue: CanonicalIssue) -> None: ...

    def update_issue(self, issue: CanonicalIssue) -> None: ...

    def get_release(self, name: str) -> ReleaseRecord | None: ...

    def insert_release(self, release: ReleaseRecord) -> None: ...

    def update_release(self, release: ReleaseRecord) -> None: ...

    def release_descriptions(self, names: Iterable[str] | None = None) -> dict[str, str | None]: ...

    def record_import(self, filename: str, total_rows: int) -> None: ...

    def issues_frame(self) -> pd.DataFrame: ...


class InMemoryStore:
    """Dict-backed store keyed by ``issue_key`` and release ``name``."""

    def __init__(self):
        self._tz = pytz.timezone(TIMEZONE)
        self.issues: dict[str, dict[str, Any]] = {}
        self.releases: dict[str, ReleaseRecord] = {}
        self.imports: list[dict[str, Any]] = []

    def _now(self) -> datetime:
        return datetime.now(self._tz)

    # ------------------ Issues ------------------
    def existing_issue_keys(self, keys: Iterable[str]) -> set[str]:
        return {k for k in keys if k in self.issues}

    def insert_issue(self, issue: CanonicalIssue) -> None:
        if issue.issue_key in self.issues:
            raise StoreError(f"duplicate key value violates unique constraint: {issue.issue_key}")
        self.issues[issue.issue_key] = {**asdict(issue), "imported_at": self._now()}

    def update_issue(self, issue: CanonicalIssue) -> None:
        if issue.issue_key not in self.issues:
            raise StoreError(f"no issue with key {issue.issue_key}")
        self.issues[issue.issue_key] = {**asdict(issue), "imported_at": self._now()}

    def issues_frame(self) -> pd.DataFrame:
        columns = [*ISSUE_CORE_COLUMNS, "imported_at"]
        # Text columns stay object dtype so missing values remain None
        df = pd.DataFrame(list(self.issues.values()), columns=columns, dtype=object)
        for col in ("lead_time_days", "original_estimate", "time_spent"):
            df[col] = pd.to_numeric(df[col], errors="coerce")
        return df

    # ------------------ Releases ------------------
    def get_release(self, name: str) -> ReleaseRecord | None:
        return self.releases.get(name)

    def insert_release(self, release: ReleaseRecord) -> None:
        if release.name in self.releases:
            raise StoreError(f"duplicate key value violates unique constraint: {release.name}")
        self.releases[release.name] = release

    def update_release(self, release: ReleaseRecord) -> None:
        if release.name not in self.releases:
            raise StoreError(f"no release named {release.name}")
        self.releases[release.name] = release

    def release_descriptions(self, names: Iterable[str] | None = None) -> dict[str, str | None]:
        if names is None:
            return {name: r.description for name, r in self.releases.items()}
        return {n: self.releases[n].description for n in names if n in self.releases}

    def record_import(self, filename: str, total_rows: int) -> None:
        self.imports.append({"filename": filename, "total_rows": total_rows, "imported_at": self._now()})
