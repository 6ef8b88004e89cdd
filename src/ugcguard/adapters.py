# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Callers of the engine: record walker, query parameters, clean-input validation.

Field options are declared explicitly: a record type is described by a
plain mapping of field name to options, built once and passed in. The
walker recurses by itself and calls the engine only at string leaves.

Pydantic models use the same options through ``typing.Annotated``::

    class BandIn(BaseModel):
        name: Annotated[str, sanitizing("NAME")]
        slug: Annotated[str, require_clean("SLUG")]
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import AfterValidator, BeforeValidator, ValidationInfo

from ugcguard.config import load_settings
from ugcguard.engine import sanitize
from ugcguard.errors import UncleanInputError
from ugcguard.options import OptionsLike, SanitizationLevel, SanitizationOptions, coerce_options
from ugcguard.presets import get_preset

logger = logging.getLogger(__name__)

# ── Record walker ────────────────────────────────────────────────────


class RecordSanitizer:
    """Sanitize the string leaves of a nested record using per-field options.

    Keys of nested mappings are looked up in the same *field_options* map.
    Items of a list inherit the options of the key that holds the list.
    Keys without an entry use *default_options* (engine defaults if ``None``).
    *log_modifications* defaults to ``UGCGUARD_LOG_MODIFICATIONS``.
    """

    def __init__(
        self,
        field_options: Mapping[str, OptionsLike],
        default_options: OptionsLike = None,
        *,
        log_modifications: bool | None = None,
    ) -> None:
        # Resolve names and mappings up front so bad config fails at construction
        self._field_options: dict[str, SanitizationOptions] = {
            key: coerce_options(opts) for key, opts in field_options.items()
        }
        self._default = coerce_options(default_options)
        if log_modifications is None:
            log_modifications = load_settings().log_modifications
        self._log_modifications = log_modifications

    def options_for(self, key: str | None) -> SanitizationOptions:
        if key is None:
            return self._default
        return self._field_options.get(key, self._default)

    def sanitize(self, record: Any) -> Any:
        """Return a sanitized copy of *record*; the input is not mutated."""
        return self._walk(record, None, ())

    def _walk(self, node: Any, key: str | None, path: tuple[str, ...]) -> Any:
        if isinstance(node, str):
            result = sanitize(node, self.options_for(key))
            if result.modified and self._log_modifications:
                logger.debug("Sanitized field %s: %s", ".".join(path) or "<root>", "; ".join(result.issues))
            return result.value
        if isinstance(node, Mapping):
            return {k: self._walk(v, str(k), (*path, str(k))) for k, v in node.items()}
        if isinstance(node, (list, tuple)):
            items = [self._walk(item, key, (*path, str(i))) for i, item in enumerate(node)]
            return items if isinstance(node, list) else tuple(items)
        return node


# ── Query parameters ─────────────────────────────────────────────────


def sanitize_query_params(params: Mapping[str, Any], preset: str | None = None) -> dict[str, Any]:
    """Apply one preset to every string query value (and strings inside list values).

    *preset* defaults to ``UGCGUARD_QUERY_PRESET`` (SEARCH).
    """
    options = get_preset(preset or load_settings().query_preset)
    cleaned: dict[str, Any] = {}
    for name, value in params.items():
        if isinstance(value, str):
            cleaned[name] = _sanitize_param(name, value, options)
        elif isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
            cleaned[name] = [_sanitize_param(name, v, options) if isinstance(v, str) else v for v in value]
        else:
            cleaned[name] = value
    return cleaned


def _sanitize_param(name: str, value: str, options: SanitizationOptions) -> str:
    result = sanitize(value, options)
    if result.modified:
        logger.debug("Sanitized query parameter: %s", name)
    return result.value


# ── Clean-input validation ───────────────────────────────────────────


def unclean_message(field: str, issues: Sequence[str]) -> str:
    if issues:
        return f"{field} contains invalid content: {', '.join(issues)}"
    return f"{field} contains potentially unsafe content"


def check_clean(
    value: Any,
    options: OptionsLike = None,
    *,
    field: str = "value",
    message: str | None = None,
) -> None:
    """Raise ``UncleanInputError`` if sanitizing *value* would change it.

    ``None`` passes: presence is the caller's concern.
    """
    if value is None:
        return
    result = sanitize(value, options)
    if result.modified:
        raise UncleanInputError(
            message or unclean_message(field, result.issues),
            field=field,
            issues=result.issues,
        )


def require_clean(options: OptionsLike = None, *, message: str | None = None) -> AfterValidator:
    """Pydantic validator that rejects input the engine would modify."""
    resolved = coerce_options(options)

    def _validate(value: Any, info: ValidationInfo) -> Any:
        check_clean(value, resolved, field=info.field_name or "value", message=message)
        return value

    return AfterValidator(_validate)


def sanitizing(options: OptionsLike = None) -> BeforeValidator:
    """Pydantic validator that replaces string input with its sanitized value."""
    resolved = coerce_options(options)

    def _transform(value: Any) -> Any:
        if isinstance(value, str):
            return sanitize(value, resolved).value
        return value

    return BeforeValidator(_transform)


# ── Named validators ─────────────────────────────────────────────────


def sanitized_string(options: OptionsLike = None, *, message: str | None = None) -> AfterValidator:
    """``require_clean`` with moderate, trimmed text as the base options."""
    base = SanitizationOptions(level=SanitizationLevel.MODERATE, trim=True)
    return require_clean(base.overlay(coerce_options(options)), message=message)


def band_name(*, message: str = "Band name contains invalid characters") -> AfterValidator:
    return require_clean(
        SanitizationOptions(level=SanitizationLevel.STRICT, max_length=255, trim=True, allow_html_entities=False),
        message=message,
    )


def video_title(*, message: str = "Video title contains invalid content") -> AfterValidator:
    return require_clean(
        SanitizationOptions(level=SanitizationLevel.MODERATE, max_length=500, trim=True, allow_html_entities=True),
        message=message,
    )


def description(*, message: str = "Description contains invalid content") -> AfterValidator:
    return require_clean(
        SanitizationOptions(level=SanitizationLevel.MODERATE, max_length=5000, trim=True, allow_html_entities=True),
        message=message,
    )


def search_query(*, message: str = "Search query contains invalid characters") -> AfterValidator:
    return require_clean(
        SanitizationOptions(level=SanitizationLevel.MODERATE, max_length=500, trim=True, allow_html_entities=False),
        message=message,
    )
