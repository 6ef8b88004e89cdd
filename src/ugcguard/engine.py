# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Sanitization dispatcher and batch wrapper.

``sanitize`` is the single entry point. Step order is fixed:

1. ``None`` short-circuits to an empty, unmodified result
2. stringify
3. resolve options against ``DEFAULT_OPTIONS``
4. run the field-type strategy, collecting issues
5. apply ``custom_sanitizer``; a hook that raises rejects the value
6. trim
7. truncate to ``max_length``
8. compare with the stringified input and package the result

Stateless and synchronous; safe to call from any number of threads.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ugcguard.fields import STRATEGIES
from ugcguard.options import (
    FieldType,
    OptionsLike,
    SanitizationResult,
    resolve_options,
)

logger = logging.getLogger(__name__)

_EMPTY_RESULT = SanitizationResult(value="", modified=False)


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def sanitize(value: Any, options: OptionsLike = None) -> SanitizationResult:
    """Sanitize *value* for the field type selected by *options*.

    *options* may be a ``SanitizationOptions``, a mapping of option names, a
    preset name or ``None``. Never raises for input values; rejection is an
    empty ``value`` with the reason in ``issues``.
    """
    if value is None:
        return _EMPTY_RESULT

    original = _stringify(value)
    opts = resolve_options(options)
    field_type = opts.field_type or FieldType.TEXT
    issues: list[str] = []

    sanitized = STRATEGIES[field_type](original, opts, issues)

    if opts.custom_sanitizer is not None:
        try:
            hooked = opts.custom_sanitizer(sanitized)
        except Exception:
            logger.warning("Custom sanitizer failed for %s input", field_type.value, exc_info=True)
            issues.append("Custom sanitizer failed")
            hooked = ""
        else:
            if hooked != sanitized:
                issues.append("Applied custom sanitizer")
        sanitized = hooked

    if opts.trim:
        sanitized = sanitized.strip()

    if opts.max_length and len(sanitized) > opts.max_length:
        sanitized = sanitized[: opts.max_length]
        issues.append(f"Truncated to {opts.max_length} characters")

    modified = sanitized != original
    if modified or issues:
        _log_outcome(field_type, sanitized, issues)

    return SanitizationResult(
        value=sanitized,
        modified=modified,
        issues=tuple(issues),
        original=original if modified else None,
    )


def _log_outcome(field_type: FieldType, sanitized: str, issues: list[str]) -> None:
    # Never log the value itself: it is untrusted and may be personal data
    if sanitized == "" and issues:
        logger.info("Rejected %s input: %s", field_type.value, "; ".join(issues))
    elif logger.isEnabledFor(logging.DEBUG):
        logger.debug("Sanitized %s input: %s", field_type.value, "; ".join(issues) or "trimmed")


def sanitize_batch(
    values: Mapping[str, Any],
    options_by_key: Mapping[str, OptionsLike] | None = None,
) -> dict[str, SanitizationResult]:
    """Sanitize each entry of *values* independently.

    Keys missing from *options_by_key* use the defaults. Every key is
    processed; one rejected value does not affect the others.
    """
    options_by_key = options_by_key or {}
    return {key: sanitize(value, options_by_key.get(key)) for key, value in values.items()}


def is_clean(value: Any, options: OptionsLike = None) -> bool:
    """True when sanitizing *value* would leave it unchanged."""
    return not sanitize(value, options).modified
