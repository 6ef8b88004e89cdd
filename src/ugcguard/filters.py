# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Pattern-based content filters: control characters, SQL metacharacters, whitespace."""

from __future__ import annotations

import re

# C0 controls except \t \n \r, plus DEL
_CONTROL_CHAR_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

# Applied in this order. Heuristic only; persistence uses bound parameters.
# It also strips ordinary punctuation ("don't", "50%").
_SQL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(?:SELECT|INSERT|UPDATE|DELETE|DROP|CREATE|ALTER|EXEC|EXECUTE)\b", re.IGNORECASE),
    re.compile(r"--|#|/\*|\*/"),
    re.compile(r"''|'|;|--|\||%|\*"),
)

_WHITESPACE_RUN_RE = re.compile(r"\s+")
_INLINE_SPACE_RE = re.compile(r"[ \t]+")
_EXCESS_NEWLINES_RE = re.compile(r"\n{3,}")


def remove_control_characters(value: str, issues: list[str] | None = None) -> str:
    value, n = _CONTROL_CHAR_RE.subn("", value)
    if n and issues is not None:
        issues.append("Removed control characters")
    return value


def remove_sql_patterns(value: str, issues: list[str]) -> str:
    """Strip SQL keywords, comment markers and injection characters."""
    matched = False
    for pattern in _SQL_PATTERNS:
        value, n = pattern.subn("", value)
        matched = matched or n > 0
    if matched:
        issues.append("Removed potential SQL injection patterns")
    return value


def normalize_whitespace(value: str, issues: list[str] | None = None) -> str:
    """Collapse every whitespace run to one space and trim."""
    result = _WHITESPACE_RUN_RE.sub(" ", value).strip()
    if result != value and issues is not None:
        issues.append("Normalized whitespace")
    return result


def normalize_paragraphs(value: str, issues: list[str] | None = None) -> str:
    """Collapse spaces/tabs, keep line breaks but at most two in a row."""
    result = _INLINE_SPACE_RE.sub(" ", value)
    result = _EXCESS_NEWLINES_RE.sub("\n\n", result)
    if result != value and issues is not None:
        issues.append("Normalized whitespace")
    return result
