#!/usr/bin/env python3
# Copyright 2026 Firefly Software Solutions Inc
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Composite Fingerprint CLI.

Usage:
    composite-fp generate [--browser] [--json]   # Print a fresh fingerprint
    composite-fp compare LEFT RIGHT [--explain]  # Score two fingerprints
    composite-fp version [--json]                # Show version information

LEFT and RIGHT may be JSON text of a fingerprint or component record, a bare
identifier, or ``@path`` to read either from a file.

Examples:
    composite-fp generate --json > baseline.json
    composite-fp compare @baseline.json "$(composite-fp generate --json)"
    composite-fp generate --browser --url https://example.com
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import platform
import sys
from pathlib import Path
from typing import Any, List, Optional

from composite_fingerprint.api import explain, generate
from composite_fingerprint.config import get_settings
from composite_fingerprint.exceptions import BrowserSessionError
from composite_fingerprint.models import Fingerprint
from composite_fingerprint.utils.logger import configure_logging


def get_version() -> str:
    """Get the package version."""
    import composite_fingerprint
    return getattr(composite_fingerprint, "__version__", "unknown")


def _run_async(coro: Any) -> Any:
    """Run an async coroutine from sync context."""
    return asyncio.run(coro)


async def _generate_in_browser(args: argparse.Namespace) -> Fingerprint:
    # Imported here so headless use doesn't require Playwright
    from composite_fingerprint.signals.browser import BrowserSession

    settings = get_settings()
    async with BrowserSession(
        settings=settings,
        browser_type=args.browser_type,
        headless=not args.headed,
        url=args.url,
    ) as signals:
        return await generate(signals=signals, settings=settings)


def cmd_generate(args: argparse.Namespace) -> int:
    """Generate and print a fingerprint."""
    try:
        if args.browser:
            fingerprint = _run_async(_generate_in_browser(args))
        else:
            fingerprint = _run_async(generate())
    except BrowserSessionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(fingerprint.to_dict(), indent=2))
    else:
        print(f"Fingerprint ID: {fingerprint.identifier}")
        print(f"Components: {json.dumps(fingerprint.components.to_dict(), indent=2)}")
    return 0


def read_argument(value: str) -> str:
    """Resolve ``@path`` arguments to the file contents."""
    if value.startswith("@") and len(value) > 1:
        return Path(value[1:]).expanduser().read_text(encoding="utf-8").strip()
    return value


def cmd_compare(args: argparse.Namespace) -> int:
    """Compare two fingerprints and print the score."""
    try:
        left = read_argument(args.left)
        right = read_argument(args.right)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: cannot read input: {e}", file=sys.stderr)
        return 1

    result = explain(left, right)

    if args.explain:
        print(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        print(f"{result.score:.4f}")
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    """Show version information."""
    version = get_version()

    if args.json:
        info = {
            "composite_fingerprint": version,
            "python": platform.python_version(),
            "platform": platform.system(),
            "architecture": platform.machine(),
        }
        print(json.dumps(info, indent=2))
    else:
        print(f"Composite Fingerprint {version}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="composite-fp",
        description="Composite device fingerprints with fuzzy comparison",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  generate    Collect signals and print a fingerprint
  compare     Score the similarity of two fingerprints
  version     Show version information
""",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=os.environ.get("COMPOSITE_FP_LOG_LEVEL", "WARNING").upper(),
        help="Set logging level (default: WARNING)",
    )
    parser.add_argument(
        "--human-readable", "--human",
        action="store_true",
        default=os.environ.get("COMPOSITE_FP_LOG_FORMAT", "json").lower() == "human",
        help="Use human-readable log format instead of JSON",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # generate command
    generate_parser = subparsers.add_parser("generate", help="Generate a fingerprint")
    generate_parser.add_argument(
        "--browser",
        action="store_true",
        help="Collect signals in a Playwright browser instead of the host",
    )
    generate_parser.add_argument(
        "--browser-type",
        choices=["chromium", "firefox", "webkit"],
        default=None,
        help="Browser to launch with --browser (default: from settings)",
    )
    generate_parser.add_argument(
        "--url",
        default=None,
        help="Page to run the browser probes in (default: from settings)",
    )
    generate_parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window",
    )
    generate_parser.add_argument(
        "--json", "-j",
        action="store_true",
        help="Output a single JSON document",
    )
    generate_parser.set_defaults(func=cmd_generate)

    # compare command
    compare_parser = subparsers.add_parser("compare", help="Compare two fingerprints")
    compare_parser.add_argument("left", help="Fingerprint, record, identifier or @file")
    compare_parser.add_argument("right", help="Fingerprint, record, identifier or @file")
    compare_parser.add_argument(
        "--explain",
        action="store_true",
        help="Print the per-field breakdown as JSON",
    )
    compare_parser.set_defaults(func=cmd_compare)

    # version command
    version_parser = subparsers.add_parser("version", help="Show version information")
    version_parser.add_argument(
        "--json", "-j",
        action="store_true",
        help="Output in JSON format",
    )
    version_parser.set_defaults(func=cmd_version)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(level=args.log_level, human_readable=args.human_readable)

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(0)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
