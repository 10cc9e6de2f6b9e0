"""Domain data models for normalized Jira issues, releases, and import runs."""

from __future__ import annotations

from dataclasses import dataclass, field

RawRow = dict[str, str]


@dataclass(frozen=True, slots=True)
class CanonicalIssue:
    issue_key: str
    summary: str | None = None
    issue_type: str | None = None
    status: str | None = None
    project: str | None = None
    system: str | None = None
    fix_version: str | None = None
    # ISO calendar dates (YYYY-MM-DD)
    created_date: str | None = None
    resolved_date: str | None = None
    lead_time_days: int | None = None
    # Hours
    original_estimate: float | None = None
    time_spent: float | None = None
    parent_key: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseRecord:
    name: str
    description: str | None = None


@dataclass(slots=True)
class MappingResult:
    issues: list[CanonicalIssue] = field(default_factory=list)
    # One per row dropped for a missing issue key
    errors: list[str] = field(default_factory=list)
    # Advisory only; never reduce the issue count
    warnings: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ImportResult:
    # Records handed to the store; unmappable rows are only in errors
    total_rows: int = 0
    inserted: int = 0
    updated: int = 0
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors
