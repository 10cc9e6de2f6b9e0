import unicodedata

from jira_insights.core.csv_parser import parse_csv
from jira_insights.core.mappers import issues_to_dataframe, map_release_rows, map_rows, missing_release_headers
from jira_insights.core.models import ReleaseRecord

PT_EXPORT = (
    "Resumo,Chave do item,Tipo de item,Status,Criado,Resolvido,Versões corrigidas,Versões corrigidas,"
    "Campo personalizado (Núcleo),Σ da Estimativa Original,Σ de Tempo Gasto,Chave pai\n"
    "[Tesouraria Nacional] Cancelamento,TES-1,História,Concluído,1/1/24 09:00,5/Jan/24 18:00,"
    "Tesouraria 2.9.0,Tesouraria 2.10.0,Outro Sistema,7200,1h 30m,TES-0\n"
    "Sem sistema,TES-2,Bug,Em andamento,02/01/2024,,,,,,,\n"
)


def test_map_portuguese_export():
    result = map_rows(parse_csv(PT_EXPORT))
    assert result.errors == []
    assert result.warnings == []
    first, second = result.issues

    assert first.issue_key == "TES-1"
    assert first.summary == "[Tesouraria Nacional] Cancelamento"
    assert first.system == "Tesouraria"
    assert first.issue_type == "História"
    assert first.fix_version == "Tesouraria 2.10.0"
    assert first.created_date == "2024-01-01"
    assert first.resolved_date == "2024-01-05"
    assert first.lead_time_days == 4
    assert first.original_estimate == 2.0
    assert first.time_spent == 1.5
    assert first.parent_key == "TES-0"

    assert second.system is None
    assert second.fix_version is None
    assert second.created_date == "2024-01-02"
    assert second.resolved_date is None
    assert second.lead_time_days is None
    assert second.parent_key is None


def test_duplicate_fix_version_columns_keep_highest():
    rows = [{"Chave do item": "X-1", "Versões corrigidas": "1.0", "Versões corrigidas_2": "1.2"}]
    result = map_rows(rows)
    assert result.issues[0].fix_version == "1.2"


def test_missing_key_is_structural_error():
    rows = [
        {"Issue key": "A-1", "Summary": "ok"},
        {"Issue key": "", "Summary": "no key"},
        {"Summary": "no key column"},
        {"Issue key": " A-4 ", "Summary": "padded"},
    ]
    result = map_rows(rows)
    assert [i.issue_key for i in result.issues] == ["A-1", "A-4"]
    assert result.errors == ["Row 3: issue key not found", "Row 4: issue key not found"]
    assert len(result.issues) + len(result.errors) == len(rows)


def test_invalid_dates_only_warn():
    rows = [{"Issue key": "A-1", "Created": "ontem", "Resolved": "31/02/2024"}]
    result = map_rows(rows)
    assert len(result.issues) == 1
    assert result.issues[0].created_date is None
    assert result.issues[0].lead_time_days is None
    assert result.warnings == [
        "Row 2: invalid created date: ontem",
        "Row 2: invalid resolved date: 31/02/2024",
    ]
    assert result.errors == []


def test_invalid_time_values_only_warn():
    rows = [{"Issue key": "A-1", "Time Spent": "soon", "Original Estimate": "abc"}]
    result = map_rows(rows)
    issue = result.issues[0]
    assert issue.time_spent is None and issue.original_estimate is None
    assert result.warnings == [
        "Row 2: invalid original estimate: abc",
        "Row 2: invalid time spent: soon",
    ]
    assert result.errors == []


def test_resolved_before_created_has_no_lead_time():
    rows = [{"Issue key": "A-1", "Created": "2024-01-05", "Resolved": "2024-01-01"}]
    issue = map_rows(rows).issues[0]
    assert issue.resolved_date == "2024-01-01"
    assert issue.lead_time_days is None


def test_system_column_is_ignored():
    rows = [{"Issue key": "A-1", "Summary": "No tag", "System": "Sorter"}]
    assert map_rows(rows).issues[0].system is None


def test_total_count_invariant_on_empty_input():
    result = map_rows([])
    assert result.issues == [] and result.errors == []


def test_release_rows():
    rows = parse_csv("RELEASE,DESCRIÇÃO\nV1,\nV2,Shipped\n,orphan\n V3 ,   \n")
    assert missing_release_headers(rows) == []
    releases, errors = map_release_rows(rows)
    assert releases == [
        ReleaseRecord("V1", None),
        ReleaseRecord("V2", "Shipped"),
        ReleaseRecord("V3", None),
    ]
    assert errors == ["Row 4: empty RELEASE"]


def test_release_headers_accept_decomposed_accents():
    decomposed = unicodedata.normalize("NFD", "DESCRI\u00c7\u00c3O")
    rows = parse_csv(f"RELEASE,{decomposed}\nV9,Done\n")
    assert missing_release_headers(rows) == []
    releases, _ = map_release_rows(rows)
    assert releases == [ReleaseRecord("V9", "Done")]


def test_release_headers_missing():
    rows = parse_csv("Name,Description\nV1,x\n")
    assert missing_release_headers(rows) == ["RELEASE", "DESCRIÇÃO"]


def test_issues_to_dataframe_columns():
    result = map_rows(parse_csv(PT_EXPORT))
    df = issues_to_dataframe(result.issues)
    assert list(df.columns)[0] == "issue_key"
    assert len(df) == 2
    assert df.loc[0, "lead_time_days"] == 4
