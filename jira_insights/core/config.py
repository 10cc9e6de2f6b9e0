"""Central configuration, constants, and shared column definitions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

# =============================================================================
# Locale Settings
# =============================================================================
TIMEZONE = "America/Sao_Paulo"

# =============================================================================
# Jira CSV Column Aliases
# Ranked: the first alias with a non-empty value wins for single-value lookups.
# Covers Portuguese and English exports and several export-tool vintages.
# =============================================================================
COLUMN_ALIASES: dict[str, list[str]] = {
    "issue_key": [
        "Chave da item",
        "Chave do item",
        "Issue Key",
        "Issue key",
        "Key",
        "key",
        "Issue ID",
        "issue_key",
    ],
    "summary": ["Resumo", "Summary", "summary", "Título", "Title", "Description"],
    "issue_type": [
        "Tipo de item",
        "Tipo do item",
        "Issue Type",
        "Issue type",
        "Type",
        "type",
        "issue_type",
        "Tipo",
    ],
    "status": ["Status", "status", "Estado", "State"],
    "project": ["Project", "project", "Projeto", "Project Key", "Project key"],
    "fix_version": [
        "Versões corrigidas",
        "Fix Version",
        "Fix version",
        "Fix Version/s",
        "Versão",
        "Version",
        "fix_version",
    ],
    "created_date": ["Criado", "Created", "created", "Created Date", "Data de Criação", "created_date"],
    "resolved_date": [
        "Resolvido",
        "Resolved",
        "resolved",
        "Resolved Date",
        "Resolution Date",
        "Data de Resolução",
        "resolved_date",
    ],
    # Kept for lookups only; the stored system comes from the summary tag.
    "system": [
        "Campo personalizado (Núcleo)",
        "Núcleo",
        "System",
        "system",
        "Sistema",
        "Component",
        "Components",
    ],
    "original_estimate": ["Σ da Estimativa Original", "Original Estimate", "Estimativa Original", "original_estimate"],
    "time_spent": ["Σ de Tempo Gasto", "Time Spent", "Tempo Gasto", "time_spent"],
    "parent_key": ["Chave pai", "Parent Key", "parent_key"],
}

# =============================================================================
# Release Description CSV
# =============================================================================
RELEASE_NAME_HEADER = "RELEASE"
RELEASE_DESCRIPTION_HEADER = "DESCRIÇÃO"

# =============================================================================
# Field Normalization
# =============================================================================
# Historical system renamings collapse to one canonical spelling
SYSTEM_ALIASES: dict[str, str] = {
    "Tesouraria Nacional": "Tesouraria",
    "Rebaixa de Preços": "Rebaixa de Preço",
    "Automação CD": "Sorter",
}

# Three-letter month names (Portuguese and English) -> month number
MONTH_ABBREVIATIONS: dict[str, int] = {
    "Jan": 1,
    "Fev": 2,
    "Feb": 2,
    "Mar": 3,
    "Abr": 4,
    "Apr": 4,
    "Mai": 5,
    "May": 5,
    "Jun": 6,
    "Jul": 7,
    "Ago": 8,
    "Aug": 8,
    "Set": 9,
    "Sep": 9,
    "Out": 10,
    "Oct": 10,
    "Nov": 11,
    "Dez": 12,
    "Dec": 12,
}

TWO_DIGIT_YEAR_BASE = 2000
WORKDAY_HOURS = 8.0
# Bare numbers above this are read as seconds (Jira's raw time tracking unit)
SECONDS_THRESHOLD = 1000.0

# =============================================================================
# Analytics
# =============================================================================
UNDEFINED_SYSTEM_LABEL = "Not defined"
BUG_ISSUE_TYPES: frozenset[str] = frozenset({"bug"})

ISSUE_CORE_COLUMNS: Sequence[str] = (
    "issue_key",
    "summary",
    "issue_type",
    "status",
    "project",
    "system",
    "fix_version",
    "created_date",
    "resolved_date",
    "lead_time_days",
    "original_estimate",
    "time_spent",
    "parent_key",
)


@dataclass(slots=True)
class AppSettings:
    csv_encoding: str = "utf-8-sig"
    # Emit a progress callback every N rows during imports
    progress_every: int = 5


SETTINGS = AppSettings()
