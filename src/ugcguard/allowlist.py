# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Allowlist tag/attribute filter.

A single forward scan over the input recognises ``<name ...>`` and
``</name ...>`` tokens (name = ASCII letter followed by ASCII letters or
digits, then a non-word character). Tags whose lower-cased name is not
allowed are dropped and reported; allowed tags keep only allowed
``name=value`` attributes. Text between tags is copied verbatim.

Not a parser: nesting is not tracked and unbalanced markup is filtered per
token. The scan is linear in the input length; once no ``>`` is left in the
input, the remainder is copied as text.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

# name=value pairs inside one tag token (bounded by the token length)
_ATTRIBUTE_RE = re.compile(
    r"""(?<!\s)\s+([a-z][a-z0-9:-]*)\s*=\s*("[^"]*"|'[^']*'|[^\s"'>]+)""",
    re.IGNORECASE,
)

# Attributes whose value is navigated to or loaded by the browser
_URL_ATTRIBUTES = frozenset({"href", "src", "action", "formaction", "xlink:href"})
_UNSAFE_SCHEME_RE = re.compile(r"^(?:javascript|vbscript|data):", re.IGNORECASE)
_SCHEME_NOISE_RE = re.compile(r"[\x00-\x20]+")


def _is_ascii_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_ascii_alnum(ch: str) -> bool:
    return _is_ascii_letter(ch) or ("0" <= ch <= "9")


def _scan_tag_name(value: str, lt: int) -> tuple[str, int] | None:
    """Return (name, index after name) if a tag name starts after ``<`` at *lt*."""
    n = len(value)
    i = lt + 1
    if i < n and value[i] == "/":
        i += 1
    if i >= n or not _is_ascii_letter(value[i]):
        return None
    start = i
    while i < n and _is_ascii_alnum(value[i]):
        i += 1
    # word boundary after the name
    if i < n and value[i] == "_":
        return None
    return value[start:i], i


def _unquote(raw: str) -> str:
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in "\"'":
        return raw[1:-1]
    return raw


def _has_unsafe_scheme(raw_value: str) -> bool:
    return bool(_UNSAFE_SCHEME_RE.match(_SCHEME_NOISE_RE.sub("", _unquote(raw_value))))


def filter_attributes(tag: str, allowed_attributes: frozenset[str]) -> str:
    """Drop every ``name=value`` pair from *tag* whose name is not allowed.

    Allowed URL-bearing attributes with a script-capable scheme are dropped too.
    """

    def _keep_or_drop(m: re.Match[str]) -> str:
        name = m.group(1).lower()
        if name not in allowed_attributes:
            return ""
        if name in _URL_ATTRIBUTES and _has_unsafe_scheme(m.group(2)):
            return ""
        return m.group(0)

    return _ATTRIBUTE_RE.sub(_keep_or_drop, tag)


def filter_tags(
    value: str,
    allowed_tags: Iterable[str],
    allowed_attributes: Iterable[str],
    issues: list[str],
) -> str:
    """Keep only allowed tags, and only allowed attributes on them.

    Each dropped tag token appends ``"Removed disallowed tag: {name}"``;
    attribute removal is silent.
    """
    tags = frozenset(t.lower() for t in allowed_tags)
    attributes = frozenset(a.lower() for a in allowed_attributes)

    out: list[str] = []
    pos = 0
    n = len(value)
    while pos < n:
        lt = value.find("<", pos)
        if lt < 0:
            break
        scanned = _scan_tag_name(value, lt)
        if scanned is None:
            out.append(value[pos : lt + 1])
            pos = lt + 1
            continue
        name, after_name = scanned
        gt = value.find(">", after_name)
        if gt < 0:
            # no closing bracket anywhere ahead: nothing further can be a tag
            break
        out.append(value[pos:lt])
        token = value[lt : gt + 1]
        if name.lower() in tags:
            out.append(filter_attributes(token, attributes))
        else:
            issues.append(f"Removed disallowed tag: {name}")
        pos = gt + 1
    out.append(value[pos:])
    return "".join(out)
