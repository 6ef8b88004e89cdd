# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""HTML entity codec for the six markup-significant characters.

``decode_entities(encode_entities(s)) == s`` for every ``s``. Encoding is not
idempotent: text that already contains entities gets its ``&`` re-encoded.
"""

from __future__ import annotations

import re

# Order matters: "&" first, or later replacements get double-encoded
_ENCODE_ORDER: tuple[tuple[str, str], ...] = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#x27;"),
    ("/", "&#x2F;"),
)

_DECODE_MAP = {entity: char for char, entity in _ENCODE_ORDER}
_ENTITY_RE = re.compile("|".join(re.escape(entity) for _, entity in _ENCODE_ORDER))

_SIGNIFICANT = frozenset(char for char, _ in _ENCODE_ORDER)


def encode_entities(value: str) -> str:
    """Replace ``& < > " ' /`` with their HTML entities."""
    if not _SIGNIFICANT.intersection(value):
        return value
    for char, entity in _ENCODE_ORDER:
        value = value.replace(char, entity)
    return value


def decode_entities(value: str) -> str:
    """Exact inverse of :func:`encode_entities` (single pass)."""
    if "&" not in value:
        return value
    return _ENTITY_RE.sub(lambda m: _DECODE_MAP[m.group(0)], value)
