"""Line-oriented CSV parsing for Jira exports.

Jira's CSV exports repeat a header once per value for multi-valued fields
(e.g. several "Fix Version/s" columns). Generic CSV readers either reject or
silently overwrite those, so rows here are built with positional suffixes
(``name``, ``name_2``, ``name_3``, ...) that the schema resolver can still
match by prefix.
"""

from __future__ import annotations

import re

from .models import RawRow

_LINE_BREAK = re.compile(r"\r?\n")


def parse_csv_line(line: str) -> list[str]:
    """Split one line into trimmed fields, honoring double-quote enclosure.

    A quote toggles quoted mode, ``""`` inside quotes is a literal quote and a
    comma inside quotes is data.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    fields.append("".join(current).strip())
    return fields


def _unique_headers(raw_headers: list[str]) -> list[str]:
    counts: dict[str, int] = {}
    headers: list[str] = []
    for header in raw_headers:
        name = header.strip()
        if name not in counts:
            counts[name] = 1
            headers.append(name)
        else:
            counts[name] += 1
            headers.append(f"{name}_{counts[name]}")
    return headers


def parse_csv(text: str) -> list[RawRow]:
    """Parse raw CSV text into header -> value rows.

    Blank lines are discarded. Fewer than two remaining lines (header plus at
    least one data line) yields an empty list.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    lines = [line for line in _LINE_BREAK.split(text) if line.strip()]
    if len(lines) < 2:
        return []

    headers = _unique_headers(parse_csv_line(lines[0]))
    rows: list[RawRow] = []
    for line in lines[1:]:
        values = parse_csv_line(line)
        if not values or (len(values) == 1 and values[0] == ""):
            continue
        rows.append({header: (values[idx] if idx < len(values) else "") for idx, header in enumerate(headers)})
    return rows
