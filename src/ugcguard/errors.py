# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""ugcguard exception hierarchy.

The sanitization engine never raises for input values: rejection is an
empty result value plus an issue. These exceptions cover the two places
where raising is the contract: invalid configuration, and the validation
adapter that turns "input was not already clean" into an error.
"""

from __future__ import annotations


class UgcGuardError(Exception):
    """Base exception for all ugcguard errors."""


class OptionsError(UgcGuardError, ValueError):
    """Sanitization options could not be resolved (unknown preset, bad key or value)."""


class UncleanInputError(UgcGuardError, ValueError):
    """Input failed a clean-input check (sanitizing it would have changed it)."""

    def __init__(self, message: str, *, field: str = "value", issues: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.field = field
        self.issues = issues
