"""Logging bootstrap for the dyadt engine and CLI.

The verifier logs `evidence_checked` (debug) and `claim_verified` (info)
events, plus a warning when a custom checker raises. Everything goes to
stderr: `dyadt check --json` and `dyadt report --json` print reports on
stdout and callers parse them. `DYADT_LOG_LEVEL` and `DYADT_LOG_JSON` feed
the two arguments of `configure_logging` through `VerifierConfig`.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

_LOG_CONFIGURED = False


def configure_logging(level: str = "WARNING", json_logs: bool = False) -> None:
    """Configure stdlib logging and structlog once per process.

    Logs go to stderr so command output on stdout stays machine-readable.
    """
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return

    normalized = str(level or "WARNING").upper()
    log_level = getattr(logging, normalized, logging.WARNING)

    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stderr)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    _LOG_CONFIGURED = True
