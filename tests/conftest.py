from __future__ import annotations

from dyadt.logging_setup import configure_logging

# Keep engine logs off stdout so CLI output can be parsed.
configure_logging(level="WARNING")
