#!/usr/bin/env python3
"""http-compile — compile the HTTP extension elements of a source document.

Loads a .wxs document, compiles every UrlReservation it contains, prints
diagnostics to stderr and, when there were no errors, one JSON object per
emitted row and reference to stdout.

Configuration (CLI args take precedence over env vars):
    --platform   Target platform (env: HTTP_EXT_PLATFORM,  default: "x86")
    --log-level  Logging level   (env: HTTP_EXT_LOG_LEVEL, default: "WARNING")

Exit status:
    0  compiled without errors
    1  compile errors were reported
    2  the document could not be loaded

Usage:
    bin/http-compile.py Product.wxs
    bin/http-compile.py --platform arm Product.wxs
    HTTP_EXT_PLATFORM=x64 bin/http-compile.py Product.wxs
"""

import argparse
import json
import logging
import os
import sys

from http_extension.host import DocumentLoadError, compile_document, load_document
from http_extension.session import CompilationSession
from http_extension.types import Platform

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments with environment variable fallbacks.

    Args:
        argv: Argument list to parse. If None, reads from sys.argv[1:]. Pass an
              explicit list in tests to avoid relying on sys.argv patching.

    Returns:
        Parsed namespace with .source, .platform, .log_level.
    """
    parser = argparse.ArgumentParser(
        prog="http-compile",
        description="Compile HTTP extension elements of a source document.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Environment variables:\n"
            "  HTTP_EXT_PLATFORM   Target platform (default: 'x86')\n"
            "  HTTP_EXT_LOG_LEVEL  Logging level   (default: 'WARNING')\n"
        ),
    )
    parser.add_argument("source", help="Path of the source document to compile")
    parser.add_argument(
        "--platform",
        default=os.environ.get("HTTP_EXT_PLATFORM", Platform.X86.value),
        choices=[p.value for p in Platform],
        help="Target platform (env: HTTP_EXT_PLATFORM, default: 'x86')",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("HTTP_EXT_LOG_LEVEL", "WARNING").upper(),
        choices=_LOG_LEVELS,
        help="Logging level (env: HTTP_EXT_LOG_LEVEL, default: 'WARNING')",
    )
    return parser.parse_args(argv)


def render_output(session: CompilationSession) -> list[str]:
    """JSON lines for every emitted row, then every reference."""
    lines = [
        json.dumps({"table": row.table, "row": list(row.as_row())})
        for row in session.rows
    ]
    lines.extend(
        json.dumps({"reference": {"table": ref.table, "name": ref.name}})
        for ref in session.references
    )
    return lines


def main(argv: list[str] | None = None) -> int:
    """Compile args.source and report. Returns the process exit status."""
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        root = load_document(args.source)
    except DocumentLoadError as exc:
        print(f"http-compile: {exc}", file=sys.stderr)
        return 2

    session = CompilationSession(platform=Platform(args.platform))
    compile_document(root, session)
    logger.info(
        "Compiled %s for %s: %d rows, %d messages",
        args.source,
        args.platform,
        len(session.rows),
        len(session.messages),
    )

    for message in session.messages:
        print(str(message), file=sys.stderr)

    if session.encountered_error:
        return 1

    for line in render_output(session):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
