# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""ugcguard: server-side sanitization for user-generated content.

Turns untrusted strings (band and video metadata, search queries, uploaded
filenames, bios) into values safe to persist, render and query:

- sanitize(): one value, strategy chosen by field type, audited result
- sanitize_batch(): a mapping of named values, each sanitized independently
- PRESETS: named option sets for common fields (NAME, YOUTUBE_URL, ...)
"""

from __future__ import annotations

from ugcguard.engine import is_clean, sanitize, sanitize_batch
from ugcguard.errors import OptionsError, UgcGuardError, UncleanInputError
from ugcguard.options import (
    DEFAULT_OPTIONS,
    FieldType,
    SanitizationLevel,
    SanitizationOptions,
    SanitizationResult,
    resolve_options,
)
from ugcguard.presets import PRESETS, get_preset, options_for, youtube_url

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_OPTIONS",
    "PRESETS",
    "FieldType",
    "OptionsError",
    "SanitizationLevel",
    "SanitizationOptions",
    "SanitizationResult",
    "UgcGuardError",
    "UncleanInputError",
    "get_preset",
    "is_clean",
    "options_for",
    "resolve_options",
    "sanitize",
    "sanitize_batch",
    "youtube_url",
]
