# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Log output for ugcguard: sanitization outcomes as console lines or JSON.

The engine and adapters log rejections and modifications through stdlib
``logging`` with field types and issue texts only. ``configure`` renders
those records with structlog, using ConsoleRenderer on a terminal and
JSONRenderer for log shippers, and redacts event keys that could hold the
untrusted value itself.
"""

from __future__ import annotations

import logging
import sys

import structlog

from ugcguard.config import Settings

# Event keys that could carry raw user input
_UNTRUSTED_KEYS = ("value", "original", "input", "raw")


def drop_untrusted_fields(logger: object, method_name: str, event_dict: dict) -> dict:
    """structlog processor: redact keys that could hold unsanitized input."""
    for key in _UNTRUSTED_KEYS:
        if key in event_dict:
            event_dict[key] = "[redacted]"
    return event_dict


def configure(*, json_output: bool = False, level: str = "INFO") -> None:
    """Configure structlog with stdlib bridge.

    Args:
        json_output: True for JSON lines, False for human-readable console output.
        level: Root logger level (default INFO).
    """
    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        drop_untrusted_fields,
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def configure_from_settings(settings: Settings, *, verbose: bool = False) -> None:
    """Configure logging from ``Settings``; *verbose* forces DEBUG."""
    configure(json_output=settings.json_logs, level="DEBUG" if verbose else settings.log_level)
