# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import ugcguard  # noqa: F401
except ImportError:
    raise ImportError("ugcguard is not installed. Run: pip install -e '.[dev]'") from None

import pytest

from ugcguard.options import resolve_options


@pytest.fixture
def issues() -> list[str]:
    """Fresh issue list for calling passes directly."""
    return []


@pytest.fixture
def resolved():
    """Build fully resolved options from keyword overrides."""

    def _resolve(**overrides):
        return resolve_options(overrides)

    return _resolve
