"""
SQL Statement Splitter

FLOW OVERVIEW
- split_sql_statements(sql)
  • Walk the script once, tracking quoted strings, quoted identifiers,
    dollar-quoted bodies and comments; split only on top-level semicolons.
  • Drop chunks that are empty or comment-only; strip leading comment lines.
- statement_summary(statement, width) → one-line preview for log output.
"""

import re
from typing import List


_DOLLAR_TAG = re.compile(r'\$[A-Za-z_][A-Za-z0-9_]*\$|\$\$')


def split_sql_statements(sql: str) -> List[str]:
    """
    Split a SQL script into statements.

    Args:
        sql: The script text

    Returns:
        Statements in order, trimmed, without the terminating semicolon
    """
    statements = []
    current = []
    i = 0
    length = len(sql)

    while i < length:
        char = sql[i]
        nxt = sql[i + 1] if i + 1 < length else ''

        if char == '-' and nxt == '-':
            end = sql.find('\n', i)
            end = length if end == -1 else end
            current.append(sql[i:end])
            i = end
            continue

        if char == '/' and nxt == '*':
            end = sql.find('*/', i + 2)
            end = length if end == -1 else end + 2
            current.append(sql[i:end])
            i = end
            continue

        if char in ("'", '"'):
            end = _find_closing_quote(sql, i, char)
            current.append(sql[i:end])
            i = end
            continue

        if char == '$':
            match = _DOLLAR_TAG.match(sql, i)
            if match:
                tag = match.group(0)
                close = sql.find(tag, match.end())
                end = length if close == -1 else close + len(tag)
                current.append(sql[i:end])
                i = end
                continue

        if char == ';':
            _flush(current, statements)
            current = []
            i += 1
            continue

        current.append(char)
        i += 1

    _flush(current, statements)
    return statements


def _find_closing_quote(sql: str, start: int, quote: str) -> int:
    """Index just past the quote closing the one at `start`; doubled quotes are escapes."""
    i = start + 1
    length = len(sql)
    while i < length:
        if sql[i] == quote:
            if i + 1 < length and sql[i + 1] == quote:
                i += 2
                continue
            return i + 1
        i += 1
    return length


def _flush(parts: List[str], statements: List[str]) -> None:
    statement = _strip_leading_comments(''.join(parts))
    if statement:
        statements.append(statement)


def _strip_leading_comments(chunk: str) -> str:
    text = chunk.strip()
    while text:
        if text.startswith('--'):
            newline = text.find('\n')
            text = '' if newline == -1 else text[newline + 1:].strip()
        elif text.startswith('/*'):
            end = text.find('*/')
            text = '' if end == -1 else text[end + 2:].strip()
        else:
            break
    return text


def statement_summary(statement: str, width: int = 80) -> str:
    """First line of a statement, truncated to `width` characters."""
    first_line = statement.strip().splitlines()[0] if statement.strip() else ''
    if len(first_line) > width:
        return first_line[:width - 3] + '...'
    return first_line
