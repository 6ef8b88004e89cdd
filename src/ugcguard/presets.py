# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Named, immutable option sets for common user-generated-content fields."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any

from ugcguard.errors import OptionsError
from ugcguard.options import FieldType, SanitizationLevel, SanitizationOptions

# Band names, user names, titles
NAME = SanitizationOptions(
    level=SanitizationLevel.STRICT,
    field_type=FieldType.TEXT,
    max_length=255,
    trim=True,
    allow_html_entities=False,
)

# Descriptions, bios, about text. No tags, entities are fine.
DESCRIPTION = SanitizationOptions(
    level=SanitizationLevel.MODERATE,
    field_type=FieldType.DESCRIPTION,
    max_length=5000,
    trim=True,
    allow_html_entities=True,
    allowed_tags=(),
)

RICH_TEXT = SanitizationOptions(
    level=SanitizationLevel.MODERATE,
    field_type=FieldType.RICH_TEXT,
    max_length=50000,
    trim=True,
    allow_html_entities=True,
    allowed_tags=("p", "br", "strong", "em", "u", "ol", "ul", "li", "a", "h1", "h2", "h3"),
    allowed_attributes=("href", "title", "target", "rel"),
)

YOUTUBE_URL = SanitizationOptions(
    level=SanitizationLevel.STRICT,
    field_type=FieldType.URL,
    trim=True,
    allowed_protocols=("http", "https"),
    allowed_domains=("youtube.com", "youtu.be", "www.youtube.com", "m.youtube.com"),
)

URL = SanitizationOptions(
    level=SanitizationLevel.STRICT,
    field_type=FieldType.URL,
    trim=True,
    allowed_protocols=("http", "https"),
)

SEARCH = SanitizationOptions(
    level=SanitizationLevel.MODERATE,
    field_type=FieldType.SEARCH,
    max_length=500,
    trim=True,
    allow_html_entities=False,
)

FILENAME = SanitizationOptions(
    level=SanitizationLevel.STRICT,
    field_type=FieldType.FILENAME,
    max_length=255,
    trim=True,
    allow_html_entities=False,
)

SLUG = SanitizationOptions(
    level=SanitizationLevel.STRICT,
    field_type=FieldType.SLUG,
    max_length=255,
    trim=True,
    allow_html_entities=False,
)

EMAIL = SanitizationOptions(
    level=SanitizationLevel.STRICT,
    field_type=FieldType.EMAIL,
    max_length=255,
    trim=True,
    allow_html_entities=False,
)

PRESETS: MappingProxyType[str, SanitizationOptions] = MappingProxyType(
    {
        "NAME": NAME,
        "DESCRIPTION": DESCRIPTION,
        "RICH_TEXT": RICH_TEXT,
        "YOUTUBE_URL": YOUTUBE_URL,
        "URL": URL,
        "SEARCH": SEARCH,
        "FILENAME": FILENAME,
        "SLUG": SLUG,
        "EMAIL": EMAIL,
    }
)

# Preset each field type starts from when built through options_for()
_FIELD_TYPE_PRESETS: dict[FieldType, SanitizationOptions] = {
    FieldType.TEXT: NAME,
    FieldType.DESCRIPTION: DESCRIPTION,
    FieldType.RICH_TEXT: RICH_TEXT,
    FieldType.URL: URL,
    FieldType.EMAIL: EMAIL,
    FieldType.SEARCH: SEARCH,
    FieldType.FILENAME: FILENAME,
    FieldType.SLUG: SLUG,
    FieldType.HTML: SanitizationOptions(level=SanitizationLevel.PERMISSIVE, field_type=FieldType.HTML),
}


def get_preset(name: str) -> SanitizationOptions:
    """Look up a preset by name (case-insensitive)."""
    try:
        return PRESETS[name.strip().upper()]
    except KeyError:
        raise OptionsError(f"Unknown preset {name!r} (expected one of: {', '.join(PRESETS)})") from None


def options_for(field_type: FieldType | str, **overrides: Any) -> SanitizationOptions:
    """Options for a field of *field_type*: its preset, *overrides*, and the field type forced."""
    ft = field_type if isinstance(field_type, FieldType) else SanitizationOptions(field_type=field_type).field_type
    base = _FIELD_TYPE_PRESETS[ft]
    return base.replace(**overrides).replace(field_type=ft)


def youtube_url(**overrides: Any) -> SanitizationOptions:
    """YOUTUBE_URL preset with *overrides*, still a URL field."""
    return YOUTUBE_URL.replace(**overrides).replace(field_type=FieldType.URL)
