"""ImportService: orchestrates CSV parsing, mapping, and per-row upserts."""

from __future__ import annotations

import logging
from collections.abc import Callable

import pandas as pd

from jira_insights.analytics.segments.filters import DashboardFilters, apply_dashboard_filters

from .config import RELEASE_DESCRIPTION_HEADER, RELEASE_NAME_HEADER, SETTINGS
from .csv_parser import parse_csv
from .lifecycle import open_versions_and_filter
from .mappers import map_release_rows, map_rows, missing_release_headers
from .models import ImportResult
from .store import IssueStore, StoreError

ProgressCallback = Callable[[str, int | None, int | None], None]


class ImportAbortedError(RuntimeError):
    """The whole import run was rejected before any row was written."""


class ReleaseSchemaError(ImportAbortedError):
    """A release-description CSV lacks its required headers."""


class ImportService:
    """Runs import jobs against a store.

    Rows are written sequentially in input order. Each upsert succeeds or fails
    on its own; a failure is recorded and the run moves on, with no retry and no
    rollback of earlier rows. The existing-key snapshot is taken once per run, so
    concurrent imports of overlapping keys must be serialized by the caller.
    """

    def __init__(self, store: IssueStore):
        self.store = store
        self._logger = logging.getLogger(__name__)

    @staticmethod
    def _as_text(payload: str | bytes) -> str:
        if isinstance(payload, bytes):
            return payload.decode(SETTINGS.csv_encoding)
        return payload

    def _report(self, progress: ProgressCallback | None, message: str, current: int, total: int) -> None:
        if progress is None:
            return
        if current == total or current % max(SETTINGS.progress_every, 1) == 0:
            progress(message, current, total)

    # ------------------ Issues ------------------
    def import_issues(
        self,
        text: str | bytes,
        filename: str | None = None,
        *,
        progress: ProgressCallback | None = None,
    ) -> ImportResult:
        rows = parse_csv(self._as_text(text))
        if not rows:
            raise ImportAbortedError("The CSV file contains no data to import")

        mapped = map_rows(rows)
        if not mapped.issues:
            raise ImportAbortedError("No valid issue found; check that the CSV has an issue key column")

        result = ImportResult(total_rows=len(mapped.issues), warnings=list(mapped.warnings))
        result.errors.extend(mapped.errors)
        issues = mapped.issues
        existing = self.store.existing_issue_keys([i.issue_key for i in issues])

        if progress:
            progress("Importing issues", 0, len(issues))
        for idx, issue in enumerate(issues, start=1):
            if issue.issue_key in existing:
                try:
                    self.store.update_issue(issue)
                    result.updated += 1
                except StoreError as exc:
                    self._record_failure(result, "update", issue.issue_key, exc)
            else:
                try:
                    self.store.insert_issue(issue)
                    result.inserted += 1
                except StoreError as exc:
                    self._record_failure(result, "insert", issue.issue_key, exc)
            self._report(progress, "Importing issues", idx, len(issues))

        self.store.record_import(filename or "upload.csv", len(issues))
        self._logger.info(
            "Issue import %s: %s inserted, %s updated, %s errors",
            filename or "(unnamed)",
            result.inserted,
            result.updated,
            len(result.errors),
        )
        return result

    # ------------------ Releases ------------------
    def import_releases(self, text: str | bytes, *, progress: ProgressCallback | None = None) -> ImportResult:
        rows = parse_csv(self._as_text(text))
        if not rows:
            raise ImportAbortedError("The CSV file contains no data to import")
        missing = missing_release_headers(rows)
        if missing:
            raise ReleaseSchemaError(
                f"The CSV must contain the columns {RELEASE_NAME_HEADER} and {RELEASE_DESCRIPTION_HEADER}"
                f" (missing: {', '.join(missing)})"
            )

        releases, errors = map_release_rows(rows)
        result = ImportResult(total_rows=len(releases), errors=errors)
        if progress:
            progress("Importing releases", 0, len(releases))
        for idx, release in enumerate(releases, start=1):
            action = "look up"
            try:
                if self.store.get_release(release.name) is not None:
                    action = "update"
                    self.store.update_release(release)
                    result.updated += 1
                else:
                    action = "insert"
                    self.store.insert_release(release)
                    result.inserted += 1
            except StoreError as exc:
                self._record_failure(result, action, release.name, exc)
            self._report(progress, "Importing releases", idx, len(releases))

        self._logger.info(
            "Release import: %s inserted, %s updated, %s errors",
            result.inserted,
            result.updated,
            len(result.errors),
        )
        return result

    # ------------------ Analytics access ------------------
    def closed_release_issues(self, filters: DashboardFilters | None = None) -> tuple[pd.DataFrame, list[str]]:
        """Stored issues after host filters, minus those in open releases."""
        df = apply_dashboard_filters(self.store.issues_frame(), filters)
        lookup = self.store.release_descriptions()
        return open_versions_and_filter(df, lookup)

    # ------------------ Internal Helpers ------------------
    def _record_failure(self, result: ImportResult, action: str, key: str, exc: Exception) -> None:
        message = f"Failed to {action} {key}: {exc}"
        result.errors.append(message)
        self._logger.warning(message)
