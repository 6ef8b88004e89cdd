# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Structural strippers: script blocks, event handlers, dangerous tags, ``javascript:``.

Each remover is a single regex pass over the input and appends at most one
issue per pass (one per tag type for dangerous tags) when it changed
something. None of them iterate to a fixpoint, so nested constructs such as
``<scr<script></script>ipt>`` can leave residue that later passes handle.
"""

from __future__ import annotations

import re

# <script ...> ... </script>, non-greedy body, any attributes
_SCRIPT_BLOCK_RE = re.compile(r"<script\b[^>]*>.*?</script\s*>", re.IGNORECASE | re.DOTALL)
_SCRIPT_CLOSE_RE = re.compile(r"</script\s*>", re.IGNORECASE)

# on<event>= with a quoted or bare value; "on" must not continue a word.
# Leading whitespace matches only from the start of its run.
_EVENT_HANDLER_RE = re.compile(
    r"""(?:(?<!\s)\s+|(?<![\w\s-]))on\w+\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'>]+)""",
    re.IGNORECASE,
)

DANGEROUS_TAGS: tuple[str, ...] = ("iframe", "object", "embed", "applet", "meta", "link", "style", "base", "form")

_DANGEROUS_BLOCK_RES: tuple[tuple[str, re.Pattern[str], re.Pattern[str], re.Pattern[str]], ...] = tuple(
    (
        tag,
        re.compile(rf"<{tag}\b[^>]*>.*?</{tag}\s*>", re.IGNORECASE | re.DOTALL),
        re.compile(rf"</{tag}\s*>", re.IGNORECASE),
        # void elements (<meta>, <base>, ...) and unbalanced leftovers
        re.compile(rf"</?{tag}\b[^>]*>", re.IGNORECASE),
    )
    for tag in DANGEROUS_TAGS
)

_JAVASCRIPT_RE = re.compile(r"javascript:", re.IGNORECASE)

_ANY_TAG_RE = re.compile(r"<[^>]*>")


def _block_end(value: str, close_re: re.Pattern[str]) -> int:
    """Index just past the last closing tag; no block ends later."""
    end = 0
    for m in close_re.finditer(value):
        end = m.end()
    return end


def _subn_before(pattern: re.Pattern[str], value: str, end: int) -> tuple[str, int]:
    # Openers past *end* cannot match; scanning them is quadratic
    head, n = pattern.subn("", value[:end])
    return head + value[end:], n


def remove_script_tags(value: str, issues: list[str]) -> str:
    """Remove whole ``<script>`` blocks including their body."""
    value, n = _subn_before(_SCRIPT_BLOCK_RE, value, _block_end(value, _SCRIPT_CLOSE_RE))
    if n:
        issues.append("Removed script tags")
    return value


def remove_event_handlers(value: str, issues: list[str]) -> str:
    """Remove inline ``on*=`` event-handler attributes."""
    value, n = _EVENT_HANDLER_RE.subn("", value)
    if n:
        issues.append("Removed event handlers")
    return value


def remove_dangerous_tags(value: str, issues: list[str]) -> str:
    """Remove iframe/object/embed/applet/meta/link/style/base/form tags.

    Balanced pairs go with their content; stray or void tags of the same name
    go on their own. One issue per tag type.
    """
    for tag, block_re, close_re, lone_re in _DANGEROUS_BLOCK_RES:
        if tag not in value.lower():
            continue
        value, n_blocks = _subn_before(block_re, value, _block_end(value, close_re))
        value, n_lone = _subn_before(lone_re, value, value.rfind(">") + 1)
        if n_blocks or n_lone:
            issues.append(f"Removed {tag} tags")
    return value


def remove_javascript_protocol(value: str, issues: list[str]) -> str:
    """Remove every ``javascript:`` token, wherever it appears."""
    value, n = _JAVASCRIPT_RE.subn("", value)
    if n:
        issues.append("Removed javascript: protocol")
    return value


def strip_all_tags(value: str, issues: list[str] | None = None) -> str:
    """Remove every ``<...>`` without looking at tag identity."""
    value, n = _subn_before(_ANY_TAG_RE, value, value.rfind(">") + 1)
    if n and issues is not None:
        issues.append("Removed HTML tags")
    return value
