# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Sanitization options, results and the options resolver.

Options are immutable values. A partial ``SanitizationOptions`` leaves
fields as ``None``; ``resolve_options`` fills every unset field from a
defaults object. Collections are replaced wholesale, never unioned.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ugcguard.errors import OptionsError


class SanitizationLevel(StrEnum):
    """How aggressively entity encoding and tag removal apply."""

    STRICT = "strict"
    MODERATE = "moderate"
    PERMISSIVE = "permissive"


class FieldType(StrEnum):
    """Semantic category of a string input; selects the strategy."""

    TEXT = "text"
    DESCRIPTION = "description"
    RICH_TEXT = "rich_text"
    URL = "url"
    EMAIL = "email"
    SEARCH = "search"
    FILENAME = "filename"
    SLUG = "slug"
    HTML = "html"


def _ordered_set(values: Iterable[str]) -> tuple[str, ...]:
    """Lower-case and deduplicate while keeping first-seen order."""
    if isinstance(values, str):
        values = (values,)
    seen: dict[str, None] = {}
    for v in values:
        key = str(v).strip().lower()
        if key:
            seen.setdefault(key, None)
    return tuple(seen)


@dataclass(frozen=True, slots=True)
class SanitizationOptions:
    """Configuration for one sanitize call. ``None`` means "use the default"."""

    level: SanitizationLevel | None = None
    field_type: FieldType | None = None
    max_length: int | None = None  # 0 = unlimited
    trim: bool | None = None
    allow_html_entities: bool | None = None
    allowed_tags: tuple[str, ...] | None = None
    allowed_attributes: tuple[str, ...] | None = None
    allowed_protocols: tuple[str, ...] | None = None
    allowed_domains: tuple[str, ...] | None = None
    custom_sanitizer: Callable[[str], str] | None = None

    def __post_init__(self) -> None:
        # Normalise on construction so every consumer sees the same shape
        if self.level is not None and not isinstance(self.level, SanitizationLevel):
            object.__setattr__(self, "level", _coerce_enum(SanitizationLevel, self.level, "level"))
        if self.field_type is not None and not isinstance(self.field_type, FieldType):
            object.__setattr__(self, "field_type", _coerce_enum(FieldType, self.field_type, "field_type"))
        if self.max_length is not None:
            if isinstance(self.max_length, bool) or not isinstance(self.max_length, int):
                raise OptionsError(f"max_length must be an integer, got {self.max_length!r}")
            if self.max_length < 0:
                raise OptionsError(f"max_length must be non-negative, got {self.max_length}")
        for name in ("allowed_tags", "allowed_attributes", "allowed_protocols", "allowed_domains"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, _ordered_set(value))
        if self.custom_sanitizer is not None and not callable(self.custom_sanitizer):
            raise OptionsError("custom_sanitizer must be callable")

    def replace(self, **changes: Any) -> SanitizationOptions:
        """Return a copy with *changes* applied."""
        unknown = set(changes) - _FIELD_NAMES
        if unknown:
            raise OptionsError(f"Unknown option(s): {', '.join(sorted(unknown))}")
        return dataclasses.replace(self, **changes)

    def overlay(self, other: SanitizationOptions) -> SanitizationOptions:
        """Return a copy where every field set on *other* wins."""
        changes = {f: getattr(other, f) for f in _FIELD_NAMES if getattr(other, f) is not None}
        return dataclasses.replace(self, **changes) if changes else self


_FIELD_NAMES = frozenset(f.name for f in dataclasses.fields(SanitizationOptions))


def _coerce_enum(enum_cls: type[StrEnum], value: Any, name: str) -> Any:
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise OptionsError(f"Invalid {name} {value!r} (expected one of: {allowed})") from None


DEFAULT_OPTIONS = SanitizationOptions(
    level=SanitizationLevel.MODERATE,
    field_type=FieldType.TEXT,
    max_length=0,
    trim=True,
    allow_html_entities=False,
    allowed_tags=(),
    allowed_attributes=(),
    allowed_protocols=("http", "https"),
    allowed_domains=(),
)


@dataclass(frozen=True, slots=True)
class SanitizationResult:
    """Outcome of a single sanitize call."""

    value: str
    modified: bool
    issues: tuple[str, ...] = ()
    original: str | None = None

    @property
    def rejected(self) -> bool:
        """True when the engine refused the input (empty value with a reason)."""
        return self.value == "" and bool(self.issues)

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form; ``issues``/``original`` only when present."""
        out: dict[str, Any] = {"value": self.value, "modified": self.modified}
        if self.issues:
            out["issues"] = list(self.issues)
        if self.original is not None:
            out["original"] = self.original
        return out


OptionsLike = SanitizationOptions | Mapping[str, Any] | str | None


def coerce_options(options: OptionsLike) -> SanitizationOptions:
    """Turn a mapping, preset name or ``None`` into a (partial) ``SanitizationOptions``."""
    if options is None:
        return SanitizationOptions()
    if isinstance(options, SanitizationOptions):
        return options
    if isinstance(options, str):
        from ugcguard.presets import get_preset

        return get_preset(options)
    if isinstance(options, Mapping):
        unknown = set(options) - _FIELD_NAMES
        if unknown:
            raise OptionsError(f"Unknown option(s): {', '.join(sorted(map(str, unknown)))}")
        return SanitizationOptions(**options)
    raise OptionsError(f"Unsupported options type: {type(options).__name__}")


def resolve_options(
    options: OptionsLike = None,
    defaults: SanitizationOptions = DEFAULT_OPTIONS,
) -> SanitizationOptions:
    """Fill every unset field of *options* from *defaults*.

    Field-level override only: a supplied ``allowed_tags`` replaces the
    default tuple entirely.
    """
    return defaults.overlay(coerce_options(options))
