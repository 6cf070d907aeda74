from __future__ import annotations

import re
from dataclasses import dataclass

LINE_BREAK_PATTERN = re.compile(r"\r?\n")


@dataclass(frozen=True)
class ParsedTable:
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]


def tokenize_row(line: str) -> list[str]:
    """Split one delimited line into trimmed fields.

    A double quote toggles quoted mode, ``""`` inside quoted mode is a literal
    quote, and commas only separate fields outside quoted mode.
    """

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    index = 0
    length = len(line)

    while index < length:
        char = line[index]
        if char == '"':
            if in_quotes and index + 1 < length and line[index + 1] == '"':
                current.append('"')
                index += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        index += 1

    fields.append("".join(current).strip())
    return fields


def _fit_to_width(row: list[str], width: int) -> tuple[str, ...]:
    if len(row) < width:
        row = row + [""] * (width - len(row))
    return tuple(row[:width])


def parse_csv(text: str) -> ParsedTable:
    lines = [line for line in LINE_BREAK_PATTERN.split(text) if line.strip()]
    if not lines:
        return ParsedTable(headers=(), rows=())

    headers = tuple(tokenize_row(lines[0]))
    width = len(headers)
    rows = tuple(_fit_to_width(tokenize_row(line), width) for line in lines[1:])
    return ParsedTable(headers=headers, rows=rows)
