# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""ugcguard CLI: try sanitization rules from the shell.

Usage:
    python -m ugcguard.cli sanitize VALUE [--preset NAME] [--field-type TYPE] [--level LEVEL]
    python -m ugcguard.cli sanitize - < input.txt
    python -m ugcguard.cli presets
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from typing import Any

from ugcguard.config import load_settings
from ugcguard.engine import sanitize
from ugcguard.errors import UgcGuardError
from ugcguard.logging_config import configure_from_settings
from ugcguard.options import FieldType, SanitizationLevel, SanitizationOptions
from ugcguard.presets import PRESETS, get_preset

EXIT_REJECTED = 2


def _options_to_dict(options: SanitizationOptions) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in dataclasses.fields(options):
        name, value = f.name, getattr(options, f.name)
        if value is None or name == "custom_sanitizer":
            continue
        out[name] = list(value) if isinstance(value, tuple) else value
    return out


def build_options(args: argparse.Namespace) -> SanitizationOptions:
    """Preset (if any) overlaid with the explicit flags."""
    base = get_preset(args.preset) if args.preset else SanitizationOptions()
    changes: dict[str, Any] = {}
    if args.field_type:
        changes["field_type"] = args.field_type
    if args.level:
        changes["level"] = args.level
    if args.max_length is not None:
        changes["max_length"] = args.max_length
    if args.allow_entities:
        changes["allow_html_entities"] = True
    if args.no_trim:
        changes["trim"] = False
    if args.allowed_tag:
        changes["allowed_tags"] = args.allowed_tag
    if args.allowed_attribute:
        changes["allowed_attributes"] = args.allowed_attribute
    if args.allowed_protocol:
        changes["allowed_protocols"] = args.allowed_protocol
    if args.allowed_domain:
        changes["allowed_domains"] = args.allowed_domain
    return base.replace(**changes) if changes else base


def cmd_sanitize(args: argparse.Namespace) -> int:
    """Sanitize one value and print the result as JSON."""
    value = sys.stdin.read() if args.value == "-" else args.value
    result = sanitize(value, build_options(args))
    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    if args.fail_on_reject and result.rejected:
        return EXIT_REJECTED
    return 0


def cmd_presets(args: argparse.Namespace) -> int:
    """Print every preset as JSON."""
    data = {name: _options_to_dict(opts) for name, opts in PRESETS.items()}
    print(json.dumps(data, ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ugcguard CLI",
        prog="python -m ugcguard.cli",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_sanitize = subparsers.add_parser("sanitize", help="Sanitize a value and print the result")
    p_sanitize.add_argument("value", help="Value to sanitize ('-' reads stdin)")
    p_sanitize.add_argument("--preset", type=str.upper, choices=list(PRESETS), help="Start from a named preset")
    p_sanitize.add_argument("--field-type", choices=[f.value for f in FieldType])
    p_sanitize.add_argument("--level", choices=[lv.value for lv in SanitizationLevel])
    p_sanitize.add_argument("--max-length", type=int, metavar="N", help="Truncate to N characters (0 = unlimited)")
    p_sanitize.add_argument("--allow-entities", action="store_true", help="Do not entity-encode HTML characters")
    p_sanitize.add_argument("--no-trim", action="store_true", help="Keep leading/trailing whitespace")
    p_sanitize.add_argument("--allowed-tag", action="append", metavar="TAG")
    p_sanitize.add_argument("--allowed-attribute", action="append", metavar="ATTR")
    p_sanitize.add_argument("--allowed-protocol", action="append", metavar="SCHEME")
    p_sanitize.add_argument("--allowed-domain", action="append", metavar="DOMAIN")
    p_sanitize.add_argument(
        "--fail-on-reject",
        action="store_true",
        help=f"Exit with status {EXIT_REJECTED} when the value is rejected",
    )

    subparsers.add_parser("presets", help="List the named presets")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_from_settings(load_settings(), verbose=args.verbose)

    commands = {
        "sanitize": cmd_sanitize,
        "presets": cmd_presets,
    }
    try:
        code = commands[args.command](args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
    except UgcGuardError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
