import pytest

from jira_insights.core.normalizers import (
    calculate_lead_time,
    compare_versions,
    extract_system_from_summary,
    extract_version_numbers,
    highest_version,
    normalize_system_name,
    parse_date,
    parse_time_value,
    round_half_up,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("17/12/25 10:11", "2025-12-17"),
        ("1/2/24 9:05", "2024-02-01"),
        ("15/Jan/24 10:30", "2024-01-15"),
        ("3/Mai/24 09:00", "2024-05-03"),
        ("3/May/2024 09:00", "2024-05-03"),
        ("10/Dez/23 23:59", "2023-12-10"),
        ("10/Oct/23 11:15 PM", "2023-10-10"),
        ("2024-03-07", "2024-03-07"),
        ("2024-03-07T14:22:10", "2024-03-07"),
        ("05/01/2024", "2024-01-05"),
        ("  05/01/2024  ", "2024-01-05"),
    ],
)
def test_parse_date_formats(raw, expected):
    assert parse_date(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [None, "", "   ", "not a date", "31/02/24 10:00", "30/Fev/2024 10:00", "15/Xyz/24 10:00", "31/02/2024", "2024-13-45"],
)
def test_parse_date_rejects_invalid(raw):
    assert parse_date(raw) is None


def test_parse_date_is_idempotent_on_its_output():
    for raw in ("17/12/25 10:11", "3/Mai/24 09:00", "05/01/2024"):
        once = parse_date(raw)
        assert parse_date(once) == once


def test_lead_time():
    assert calculate_lead_time("2024-01-01", "2024-01-05") == 4
    assert calculate_lead_time("2024-01-05", "2024-01-05") == 0
    assert calculate_lead_time("2024-01-05", "2024-01-01") is None
    assert calculate_lead_time(None, "2024-01-01") is None
    assert calculate_lead_time("garbage", "2024-01-01") is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1h 30m", 1.5),
        ("30m 1h", 1.5),
        ("7200", 2.0),
        ("4", 4),
        ("2.5", 2.5),
        ("1000", 1000),
        ("2d 4h", 20.0),
        ("1D", 8.0),
        ("45M", 0.75),
        ("  3h ", 3.0),
        ("4050", 1.13),
    ],
)
def test_parse_time_value(raw, expected):
    assert parse_time_value(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "abc", "0h", "-5"])
def test_parse_time_value_rejects(raw):
    assert parse_time_value(raw) is None


def test_system_normalization():
    assert normalize_system_name("  Tesouraria Nacional ") == "Tesouraria"
    assert normalize_system_name("Automação CD") == "Sorter"
    assert normalize_system_name("Fábrica") == "Fábrica"
    assert normalize_system_name(None) is None
    assert normalize_system_name("  ") is None


def test_system_from_summary():
    assert extract_system_from_summary("[Rebaixa de Preços] Ajustar filtro") == "Rebaixa de Preço"
    assert extract_system_from_summary("[ GP Conect ] Home") == "GP Conect"
    assert extract_system_from_summary("Ajustar [Tesouraria]") is None
    assert extract_system_from_summary("[] vazio") is None
    assert extract_system_from_summary(None) is None


def test_version_numbers():
    assert extract_version_numbers("Release 1.2.3") == [1, 2, 3]
    assert extract_version_numbers("GP Conect 2.7.1") == [2, 7, 1]
    assert extract_version_numbers("Backlog") == [0]


def test_compare_versions_is_numeric():
    assert compare_versions("Release 2.10.0", "Release 2.9.0") > 0
    assert compare_versions("1.2", "1.2.0") == 0
    assert compare_versions("1.2", "1.2.1") < 0
    assert compare_versions("Backlog", "0.0.1") < 0
    # Pre-release suffixes without digits tie with the plain release
    assert compare_versions("2.0.0-beta", "2.0.0") == 0


def test_highest_version():
    assert highest_version(["1.0", "1.2", "1.10"]) == "1.10"
    assert highest_version(["v1.2", "1.2.0"]) == "v1.2"
    assert highest_version(["", "Backlog"]) == "Backlog"
    assert highest_version([]) is None


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(12.5) == 13
    assert round_half_up(1.125, 2) == 1.13
    assert round_half_up(7.25, 1) == 7.3
    assert round_half_up(2.4) == 2
