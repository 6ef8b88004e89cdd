# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Runtime settings from ``UGCGUARD_*`` environment variables.

Only ambient behaviour is configurable (logging, adapter defaults). The
sanitization rules themselves are code: options and presets.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from ugcguard.presets import PRESETS

logger = logging.getLogger(__name__)

_TRUTHY = ("1", "true", "yes")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class Settings:
    log_level: str = "INFO"
    json_logs: bool = False
    log_modifications: bool = False
    query_preset: str = "SEARCH"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read settings from *environ* (``os.environ`` by default)."""
    env = os.environ if environ is None else environ

    level = env.get("UGCGUARD_LOG_LEVEL", "").strip().upper()
    if level not in _LOG_LEVELS:
        level = "INFO"

    json_logs = env.get("UGCGUARD_LOG_JSON", "").strip().lower() in _TRUTHY
    log_modifications = env.get("UGCGUARD_LOG_MODIFICATIONS", "").strip().lower() in _TRUTHY

    query_preset = env.get("UGCGUARD_QUERY_PRESET", "").strip().upper() or "SEARCH"
    if query_preset not in PRESETS:
        logger.warning("Unknown UGCGUARD_QUERY_PRESET %r, using SEARCH", query_preset)
        query_preset = "SEARCH"

    return Settings(
        log_level=level,
        json_logs=json_logs,
        log_modifications=log_modifications,
        query_preset=query_preset,
    )
