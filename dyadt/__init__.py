from dyadt.claim_source import ClaimFileSource
from dyadt.config import VerifierConfig, parse_bool
from dyadt.errors import CheckerError, ClaimLoadError
from dyadt.logging_setup import configure_logging
from dyadt.verify import CheckerRegistry, Verifier, aggregate_verdicts, extract_json_path

__all__ = [
    "CheckerError",
    "CheckerRegistry",
    "ClaimFileSource",
    "ClaimLoadError",
    "Verifier",
    "VerifierConfig",
    "aggregate_verdicts",
    "configure_logging",
    "extract_json_path",
    "parse_bool",
]
