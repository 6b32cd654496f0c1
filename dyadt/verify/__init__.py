"""
Evidence verification engine.

This module checks claimed actions against observable evidence on the machine
and folds the per-item verdicts into a claim-level verdict.

Example:
    >>> from dyadt.verify import Verifier
    >>> from dyadt_contracts import Claim, FileWithHashEvidence
    >>> claim = Claim.new("Built the release archive").with_evidence(
    ...     FileWithHashEvidence(path="dist/app.tar.gz", sha256="9f86d081..."),
    ... )
    >>> report = Verifier().verify(claim)
    >>> if not report.overall_verdict.is_trustworthy():
    ...     print(report.summary())
"""

from dyadt.verify.aggregate import aggregate_verdicts
from dyadt.verify.json_path import (
    PathStep,
    extract_json_path,
    json_values_equal,
    parse_json_path,
)
from dyadt.verify.process import ExecResult, run_command, run_git
from dyadt.verify.registry import CheckerRegistry
from dyadt.verify.verifier import Verifier

__all__ = [
    # Aggregation
    "aggregate_verdicts",
    # JSON path
    "PathStep",
    "extract_json_path",
    "json_values_equal",
    "parse_json_path",
    # Processes
    "ExecResult",
    "run_command",
    "run_git",
    # Registry
    "CheckerRegistry",
    # Verifier
    "Verifier",
]
