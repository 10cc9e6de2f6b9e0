"""Mapping parsed CSV rows into CanonicalIssue and ReleaseRecord instances."""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Iterable, Sequence
from dataclasses import asdict

import pandas as pd

from .config import ISSUE_CORE_COLUMNS, RELEASE_DESCRIPTION_HEADER, RELEASE_NAME_HEADER
from .models import CanonicalIssue, MappingResult, RawRow, ReleaseRecord
from .normalizers import (
    calculate_lead_time,
    extract_system_from_summary,
    highest_version,
    parse_date,
    parse_time_value,
)
from .schema import find_all_column_values, find_column

logger = logging.getLogger(__name__)


def _row_number(index: int) -> int:
    # Header is line 1 of the file, so the first data row is reported as 2
    return index + 2


def _parse_date_field(raw: str | None, label: str, row_number: int, warnings: list[str]) -> str | None:
    parsed = parse_date(raw)
    if raw and parsed is None:
        message = f"Row {row_number}: invalid {label} date: {raw}"
        warnings.append(message)
        logger.warning(message)
    return parsed


def _parse_time_field(raw: str | None, label: str, row_number: int, warnings: list[str]) -> float | None:
    parsed = parse_time_value(raw)
    if raw and raw.strip() and parsed is None:
        message = f"Row {row_number}: invalid {label}: {raw}"
        warnings.append(message)
        logger.warning(message)
    return parsed


def map_row(row: RawRow, row_number: int, warnings: list[str]) -> CanonicalIssue | None:
    """Map one row, or return ``None`` when it has no issue key.

    Soft field problems are appended to ``warnings`` and never drop the row.
    """
    issue_key = find_column(row, "issue_key")
    if not issue_key or not issue_key.strip():
        return None

    created_date = _parse_date_field(find_column(row, "created_date"), "created", row_number, warnings)
    resolved_date = _parse_date_field(find_column(row, "resolved_date"), "resolved", row_number, warnings)

    # An export may list several fix versions; only the highest is kept
    fix_version = highest_version(find_all_column_values(row, "fix_version"))

    # The bracket tag in the summary is the source of truth for the system,
    # not the component/custom field columns
    summary = find_column(row, "summary")

    return CanonicalIssue(
        issue_key=issue_key.strip(),
        summary=summary,
        issue_type=find_column(row, "issue_type"),
        status=find_column(row, "status"),
        project=find_column(row, "project"),
        system=extract_system_from_summary(summary),
        fix_version=fix_version,
        created_date=created_date,
        resolved_date=resolved_date,
        lead_time_days=calculate_lead_time(created_date, resolved_date),
        original_estimate=_parse_time_field(
            find_column(row, "original_estimate"), "original estimate", row_number, warnings
        ),
        time_spent=_parse_time_field(find_column(row, "time_spent"), "time spent", row_number, warnings),
        parent_key=find_column(row, "parent_key"),
    )


def map_rows(rows: Sequence[RawRow]) -> MappingResult:
    """Map parsed rows into canonical issues.

    Rows without an issue key are reported in ``errors`` and skipped, so
    ``len(result.issues) + len(result.errors) == len(rows)`` always holds.
    """
    result = MappingResult()
    for index, row in enumerate(rows):
        row_number = _row_number(index)
        issue = map_row(row, row_number, result.warnings)
        if issue is None:
            result.errors.append(f"Row {row_number}: issue key not found")
            continue
        result.issues.append(issue)
    logger.debug(
        "Mapped %s rows: %s issues, %s errors, %s warnings",
        len(rows),
        len(result.issues),
        len(result.errors),
        len(result.warnings),
    )
    return result


def _header_lookup(row: RawRow) -> dict[str, str]:
    # Spreadsheet tools may save accented headers decomposed (NFD)
    return {unicodedata.normalize("NFC", key): key for key in row}


def missing_release_headers(rows: Sequence[RawRow]) -> list[str]:
    if not rows:
        return [RELEASE_NAME_HEADER, RELEASE_DESCRIPTION_HEADER]
    present = _header_lookup(rows[0])
    return [h for h in (RELEASE_NAME_HEADER, RELEASE_DESCRIPTION_HEADER) if h not in present]


def map_release_rows(rows: Sequence[RawRow]) -> tuple[list[ReleaseRecord], list[str]]:
    """Map a release-description export into ``ReleaseRecord`` pairs.

    A blank description is stored as ``None`` (the release stays open).
    """
    releases: list[ReleaseRecord] = []
    errors: list[str] = []
    for index, row in enumerate(rows):
        headers = _header_lookup(row)
        name = (row.get(headers.get(RELEASE_NAME_HEADER, RELEASE_NAME_HEADER)) or "").strip()
        description = (row.get(headers.get(RELEASE_DESCRIPTION_HEADER, RELEASE_DESCRIPTION_HEADER)) or "").strip()
        if not name:
            errors.append(f"Row {_row_number(index)}: empty {RELEASE_NAME_HEADER}")
            continue
        releases.append(ReleaseRecord(name=name, description=description or None))
    return releases, errors


def issues_to_dataframe(issues: Iterable[CanonicalIssue]) -> pd.DataFrame:
    rows = [asdict(i) for i in issues]
    df = pd.DataFrame(rows, columns=list(ISSUE_CORE_COLUMNS), dtype=object)
    for col in ("lead_time_days", "original_estimate", "time_spent"):
        df[col] = pd.to_numeric(df[col], errors="coerce")
    return df
