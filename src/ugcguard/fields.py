# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Field-type sanitization strategies.

Every strategy has the signature ``(value, options, issues) -> str`` and
composes the primitives in a fixed order. Passes are not commutative:
encoding entities before stripping tags would keep the tag text.
*options* is always fully resolved.

Rejection (URL, EMAIL) returns ``""`` after appending the reason.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from urllib.parse import urlsplit

from ugcguard.allowlist import filter_tags
from ugcguard.entities import encode_entities
from ugcguard.filters import (
    normalize_paragraphs,
    normalize_whitespace,
    remove_control_characters,
    remove_sql_patterns,
)
from ugcguard.options import FieldType, SanitizationLevel, SanitizationOptions
from ugcguard.strippers import (
    remove_dangerous_tags,
    remove_event_handlers,
    remove_javascript_protocol,
    remove_script_tags,
    strip_all_tags,
)

Strategy = Callable[[str, SanitizationOptions, list[str]], str]


def _encode(value: str, issues: list[str]) -> str:
    encoded = encode_entities(value)
    if encoded != value:
        issues.append("Encoded HTML entities")
    return encoded


# ── Markup-bearing text ──────────────────────────────────────────────


def sanitize_text(value: str, options: SanitizationOptions, issues: list[str]) -> str:
    """Plain text: band names, titles. No markup survives."""
    value = remove_script_tags(value, issues)
    value = strip_all_tags(value, issues)
    if options.level == SanitizationLevel.STRICT or not options.allow_html_entities:
        value = _encode(value, issues)
    value = remove_control_characters(value, issues)
    value = remove_sql_patterns(value, issues)
    return normalize_whitespace(value, issues)


def sanitize_description(value: str, options: SanitizationOptions, issues: list[str]) -> str:
    """Bios and descriptions: no markup, paragraph breaks kept."""
    value = remove_script_tags(value, issues)
    value = remove_event_handlers(value, issues)
    value = strip_all_tags(value, issues)
    if not options.allow_html_entities:
        value = _encode(value, issues)
    value = remove_sql_patterns(value, issues)
    return normalize_paragraphs(value, issues)


def sanitize_rich_text(value: str, options: SanitizationOptions, issues: list[str]) -> str:
    """Formatted content restricted to the allowed tags and attributes."""
    value = remove_script_tags(value, issues)
    value = remove_event_handlers(value, issues)
    value = remove_dangerous_tags(value, issues)
    if options.allowed_tags:
        return filter_tags(value, options.allowed_tags, options.allowed_attributes or (), issues)
    return strip_all_tags(value, issues)


def sanitize_html(value: str, options: SanitizationOptions, issues: list[str]) -> str:
    """Raw HTML from trusted authors. Denylist only, no tag allowlisting."""
    value = remove_script_tags(value, issues)
    value = remove_event_handlers(value, issues)
    value = remove_dangerous_tags(value, issues)
    return remove_javascript_protocol(value, issues)


# ── URLs ─────────────────────────────────────────────────────────────

# Browsers drop leading C0/space and any tab or newline before reading the scheme
_SCHEME_NOISE_RE = re.compile(r"^[\x00-\x20]+|[\t\n\r]")
_JAVASCRIPT_SCHEME_RE = re.compile(r"^javascript:", re.IGNORECASE)
_DATA_SCHEME_RE = re.compile(r"^data:", re.IGNORECASE)
_EXPLICIT_SCHEME_RE = re.compile(r"^([a-z][a-z0-9+.-]*)://", re.IGNORECASE)

_URL_SPECIAL_CHARS = str.maketrans({"<": "%3C", ">": "%3E", '"': "%22", "'": "%27"})

# Schemes whose URLs browsers parse with backslash as a path separator
_SPECIAL_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})


def _browser_form(value: str) -> str:
    """*value* with backslashes read as slashes where a browser would."""
    scheme, sep, _ = value.partition(":")
    if sep and scheme.lower() in _SPECIAL_SCHEMES:
        return value.replace("\\", "/")
    return value


def _domain_allowed(hostname: str, allowed_domains: tuple[str, ...]) -> bool:
    return any(hostname == d or hostname.endswith("." + d) for d in allowed_domains)


def sanitize_url(value: str, options: SanitizationOptions, issues: list[str]) -> str:
    """Validate scheme and host, then percent-encode ``< > " '``."""
    value = value.strip()
    scheme_text = _SCHEME_NOISE_RE.sub("", value)

    if _JAVASCRIPT_SCHEME_RE.match(scheme_text):
        issues.append("Blocked javascript: protocol in URL")
        return ""

    if options.level == SanitizationLevel.STRICT and _DATA_SCHEME_RE.match(scheme_text):
        issues.append("Blocked data: protocol in URL")
        return ""

    if options.allowed_protocols:
        m = _EXPLICIT_SCHEME_RE.match(value)
        if m:
            protocol = m.group(1).lower()
            if protocol not in options.allowed_protocols:
                issues.append(f"Protocol '{protocol}' not allowed")
                return ""

    if options.allowed_domains:
        try:
            parts = urlsplit(_browser_form(value))
            hostname = parts.hostname
        except ValueError:
            hostname = None
            parts = None
        if parts is None or not parts.scheme or not hostname:
            issues.append("Invalid URL format")
            return ""
        hostname = hostname.lower()
        if not _domain_allowed(hostname, options.allowed_domains):
            issues.append(f"Domain '{hostname}' not allowed")
            return ""

    encoded = value.translate(_URL_SPECIAL_CHARS)
    if encoded != value:
        issues.append("Encoded URL special characters")
    return encoded


# ── Identifiers ──────────────────────────────────────────────────────

_EMAIL_INVALID_CHARS_RE = re.compile(r"[^a-z0-9@._+-]")
_EMAIL_SHAPE_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def sanitize_email(value: str, options: SanitizationOptions, issues: list[str]) -> str:
    value = value.lower().strip()
    cleaned = _EMAIL_INVALID_CHARS_RE.sub("", value)
    if cleaned != value:
        issues.append("Removed invalid email characters")
    if cleaned.count("@") != 1 or not _EMAIL_SHAPE_RE.match(cleaned):
        issues.append("Invalid email format")
        return ""
    return cleaned


_PATH_SEPARATORS_RE = re.compile(r"[/\\]")
_FILENAME_SPECIAL_RE = re.compile(r'[<>:"|?*\x00-\x1f]')
_LEADING_DOTS_RE = re.compile(r"^\.+")
_FILENAME_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_filename(value: str, options: SanitizationOptions, issues: list[str]) -> str:
    """Reduce to a single path component of ``[A-Za-z0-9._-]`` with at most one dot."""
    original = value
    value = value.strip()
    value = _PATH_SEPARATORS_RE.sub("", value)
    value = _FILENAME_SPECIAL_RE.sub("", value)
    value = _LEADING_DOTS_RE.sub("", value)
    value = _FILENAME_UNSAFE_RE.sub("_", value)

    parts = value.split(".")
    if len(parts) > 2:
        extension = parts.pop()
        value = f"{'_'.join(parts)}.{extension}"

    if not value or value == ".":
        value = "file"

    if value != original.strip():
        issues.append("Sanitized filename")
    return value


_SLUG_SPACES_RE = re.compile(r"\s+")
_SLUG_INVALID_RE = re.compile(r"[^a-z0-9-]")
_SLUG_HYPHENS_RE = re.compile(r"-+")


def sanitize_slug(value: str, options: SanitizationOptions, issues: list[str]) -> str:
    original = value
    value = value.lower().strip()
    value = _SLUG_SPACES_RE.sub("-", value)
    value = _SLUG_INVALID_RE.sub("", value)
    value = _SLUG_HYPHENS_RE.sub("-", value)
    value = value.strip("-")
    if value != original.strip():
        issues.append("Normalized slug")
    return value


# ── Search ───────────────────────────────────────────────────────────

_REGEX_META_RE = re.compile(r"[.*+?^${}()|\[\]\\]")


def sanitize_search(value: str, options: SanitizationOptions, issues: list[str]) -> str:
    value = value.strip()
    value = strip_all_tags(value, issues)
    value = remove_sql_patterns(value, issues)
    if options.level == SanitizationLevel.STRICT:
        escaped = _REGEX_META_RE.sub(r"\\\g<0>", value)
        if escaped != value:
            issues.append("Escaped regex metacharacters")
        value = escaped
    return value


STRATEGIES: dict[FieldType, Strategy] = {
    FieldType.TEXT: sanitize_text,
    FieldType.DESCRIPTION: sanitize_description,
    FieldType.RICH_TEXT: sanitize_rich_text,
    FieldType.HTML: sanitize_html,
    FieldType.URL: sanitize_url,
    FieldType.EMAIL: sanitize_email,
    FieldType.FILENAME: sanitize_filename,
    FieldType.SLUG: sanitize_slug,
    FieldType.SEARCH: sanitize_search,
}
