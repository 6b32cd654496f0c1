"""
Evidence verification engine.

The Verifier runs the real-world check behind each evidence item (stat a
file, hash it, run a process, ask git, read the environment, or call a
registered custom checker) and folds the per-item verdicts into one
claim-level verdict.

Both public operations are total: every failure is reported as a Verdict
plus a detail string, never raised.
"""

from __future__ import annotations

import json
import os
import re
import stat
from datetime import datetime, timezone
from typing import assert_never

import structlog

from dyadt.config import VerifierConfig
from dyadt.verify.aggregate import aggregate_verdicts
from dyadt.verify.json_path import extract_json_path, json_values_equal
from dyadt.verify.process import ExecResult, run_command, run_git
from dyadt.verify.registry import CheckerRegistry
from dyadt_contracts import (
    Claim,
    CommandSucceedsEvidence,
    CustomChecker,
    CustomEvidence,
    DirectoryExistsEvidence,
    EnvVarEqualsEvidence,
    EvidenceResult,
    EvidenceSpec,
    FileContainsEvidence,
    FileExistsEvidence,
    FileJsonPathEvidence,
    FileMatchesRegexEvidence,
    FileModifiedAfterEvidence,
    FileWithHashEvidence,
    GitBranchExistsEvidence,
    GitCleanEvidence,
    GitCommitExistsEvidence,
    Verdict,
    VerificationReport,
    parse_timestamp,
    sha256_file,
)

logger = structlog.get_logger(__name__)

Outcome = tuple[Verdict, str | None]

_DECISIVE_VERDICTS = frozenset({Verdict.CONFIRMED, Verdict.REFUTED, Verdict.UNVERIFIABLE})


class Verifier:
    """
    Checks claims against the state of the machine.

    The only state a Verifier holds is its checker registry and config, so
    one instance can verify any number of claims, including from several
    threads at once as long as nobody registers checkers meanwhile.

    Example:
        >>> verifier = Verifier()
        >>> claim = Claim.new("Wrote the config").with_evidence(
        ...     FileExistsEvidence(path="/etc/myapp/config.toml")
        ... )
        >>> report = verifier.verify(claim)
        >>> report.overall_verdict
        <Verdict.CONFIRMED: 'Confirmed'>
    """

    def __init__(
        self,
        registry: CheckerRegistry | None = None,
        config: VerifierConfig | None = None,
    ) -> None:
        """
        Initialize a Verifier.

        Args:
            registry: Custom checkers available to `Custom` evidence
            config: Engine settings (git executable, default repository)
        """
        self._registry = registry if registry is not None else CheckerRegistry()
        self._config = config or VerifierConfig()

    @property
    def registry(self) -> CheckerRegistry:
        return self._registry

    def register_checker(self, name: str, checker: CustomChecker) -> None:
        """
        Register a predicate for `Custom` evidence named `name`.

        The checker receives the evidence parameters and returns Confirmed,
        Refuted or Unverifiable; raising marks the item Unverifiable.
        """
        self._registry.register(name, checker)

    def verify(self, claim: Claim) -> VerificationReport:
        """
        Verify every evidence item of a claim and aggregate the verdicts.

        Args:
            claim: The claim to verify

        Returns:
            Report with one result per evidence item, in input order. A claim
            without evidence is Unverifiable.
        """
        if not claim.evidence:
            logger.info("claim_without_evidence", claim_id=claim.id)
            return VerificationReport(
                claim=claim,
                evidence_results=(),
                overall_verdict=Verdict.UNVERIFIABLE,
                verified_at=datetime.now(timezone.utc),
            )

        evidence_results = tuple(self.check_evidence(spec) for spec in claim.evidence)
        overall_verdict = aggregate_verdicts(result.verdict for result in evidence_results)
        logger.info(
            "claim_verified",
            claim_id=claim.id,
            evidence_count=len(evidence_results),
            verdict=overall_verdict.value,
        )
        return VerificationReport(
            claim=claim,
            evidence_results=evidence_results,
            overall_verdict=overall_verdict,
            verified_at=datetime.now(timezone.utc),
        )

    def check_evidence(self, spec: EvidenceSpec) -> EvidenceResult:
        """
        Check a single evidence item.

        Args:
            spec: Evidence item to check

        Returns:
            Result echoing `spec` with its verdict and detail
        """
        verdict, details = self._dispatch(spec)
        logger.debug("evidence_checked", kind=spec.type, verdict=verdict.value, details=details)
        return EvidenceResult(spec=spec, verdict=verdict, details=details)

    def _dispatch(self, spec: EvidenceSpec) -> Outcome:
        if isinstance(spec, FileExistsEvidence):
            return self._check_file_exists(spec)
        elif isinstance(spec, FileWithHashEvidence):
            return self._check_file_hash(spec)
        elif isinstance(spec, FileContainsEvidence):
            return self._check_file_contains(spec)
        elif isinstance(spec, FileMatchesRegexEvidence):
            return self._check_file_regex(spec)
        elif isinstance(spec, FileJsonPathEvidence):
            return self._check_file_json_path(spec)
        elif isinstance(spec, DirectoryExistsEvidence):
            return self._check_directory_exists(spec)
        elif isinstance(spec, CommandSucceedsEvidence):
            return self._check_command(spec)
        elif isinstance(spec, GitCleanEvidence):
            return self._check_git_clean(spec)
        elif isinstance(spec, GitCommitExistsEvidence):
            return self._check_git_commit(spec)
        elif isinstance(spec, GitBranchExistsEvidence):
            return self._check_git_branch(spec)
        elif isinstance(spec, FileModifiedAfterEvidence):
            return self._check_modified_after(spec)
        elif isinstance(spec, EnvVarEqualsEvidence):
            return self._check_env_var(spec)
        elif isinstance(spec, CustomEvidence):
            return self._check_custom(spec)
        else:
            assert_never(spec)

    # -------------------------------------------------------------------------
    # Filesystem
    # -------------------------------------------------------------------------

    def _check_file_exists(self, spec: FileExistsEvidence) -> Outcome:
        # Any stat failure counts as "not there".
        try:
            os.stat(spec.path)
        except (OSError, ValueError):
            return Verdict.REFUTED, f"File not found: {spec.path}"
        return Verdict.CONFIRMED, f"File exists: {spec.path}"

    def _check_directory_exists(self, spec: DirectoryExistsEvidence) -> Outcome:
        try:
            is_dir = stat.S_ISDIR(os.stat(spec.path).st_mode)
        except (OSError, ValueError):
            is_dir = False
        if is_dir:
            return Verdict.CONFIRMED, f"Directory exists: {spec.path}"
        return Verdict.REFUTED, f"Directory not found: {spec.path}"

    def _check_file_hash(self, spec: FileWithHashEvidence) -> Outcome:
        try:
            actual_hash = sha256_file(spec.path)
        except (OSError, ValueError) as exc:
            return Verdict.REFUTED, f"Cannot read file: {exc}"
        if actual_hash == spec.sha256:
            return Verdict.CONFIRMED, "Hash matches"
        return Verdict.REFUTED, f"Hash mismatch: expected {spec.sha256}, got {actual_hash}"

    def _check_file_contains(self, spec: FileContainsEvidence) -> Outcome:
        contents, error = _read_text(spec.path)
        if contents is None:
            return Verdict.REFUTED, error
        if spec.substring in contents:
            return Verdict.CONFIRMED, "Substring found"
        return Verdict.REFUTED, "Substring not found"

    def _check_file_regex(self, spec: FileMatchesRegexEvidence) -> Outcome:
        try:
            pattern = re.compile(spec.pattern)
        except re.error as exc:
            return Verdict.UNVERIFIABLE, f"Invalid regex pattern {spec.pattern!r}: {exc}"
        contents, error = _read_text(spec.path)
        if contents is None:
            return Verdict.REFUTED, error
        if pattern.search(contents) is not None:
            return Verdict.CONFIRMED, "Pattern matched"
        return Verdict.REFUTED, "Pattern not found"

    def _check_file_json_path(self, spec: FileJsonPathEvidence) -> Outcome:
        contents, error = _read_text(spec.path)
        if contents is None:
            return Verdict.REFUTED, error
        try:
            document = json.loads(contents)
        except (ValueError, RecursionError) as exc:
            return Verdict.REFUTED, f"Invalid JSON in {spec.path}: {exc}"
        found, actual = extract_json_path(document, spec.json_path)
        if not found:
            return Verdict.REFUTED, f"JSON path not found: {spec.json_path}"
        if json_values_equal(actual, spec.expected):
            return Verdict.CONFIRMED, f"JSON path {spec.json_path} matches"
        return Verdict.REFUTED, (
            f"JSON path {spec.json_path} mismatch: expected {_render(spec.expected)}, "
            f"got {_render(actual)}"
        )

    def _check_modified_after(self, spec: FileModifiedAfterEvidence) -> Outcome:
        try:
            threshold = parse_timestamp(spec.after)
        except ValueError:
            return Verdict.UNVERIFIABLE, f"Invalid timestamp: {spec.after}"
        try:
            mtime_ns = os.stat(spec.path).st_mtime_ns
        except (FileNotFoundError, NotADirectoryError):
            return Verdict.REFUTED, f"File not found: {spec.path}"
        except (OSError, ValueError) as exc:
            return Verdict.UNVERIFIABLE, f"Cannot read modification time: {exc}"
        modified_at = datetime.fromtimestamp(mtime_ns / 1_000_000_000, tz=timezone.utc)
        if modified_at > threshold:
            return Verdict.CONFIRMED, f"Modified at {modified_at.isoformat()}"
        return Verdict.REFUTED, (
            f"Modified at {modified_at.isoformat()}, not after {threshold.isoformat()}"
        )

    # -------------------------------------------------------------------------
    # Processes
    # -------------------------------------------------------------------------

    def _check_command(self, spec: CommandSucceedsEvidence) -> Outcome:
        try:
            result = run_command([spec.command, *spec.args])
        except (OSError, ValueError) as exc:
            return Verdict.REFUTED, f"Command error: {exc}"
        if result.succeeded:
            return Verdict.CONFIRMED, "Command succeeded"
        return Verdict.REFUTED, f"Command failed with exit code: {result.returncode}"

    def _git(self, args: list[str], repo_path: str | None) -> ExecResult | str:
        repo = repo_path or self._config.default_repo_path or "."
        try:
            return run_git(args, repo_path=repo, git_executable=self._config.git_executable)
        except (OSError, ValueError) as exc:
            return f"Cannot run {self._config.git_executable}: {exc}"

    def _check_git_clean(self, spec: GitCleanEvidence) -> Outcome:
        result = self._git(["status", "--porcelain"], spec.repo_path)
        if isinstance(result, str):
            return Verdict.UNVERIFIABLE, result
        if not result.succeeded:
            return Verdict.REFUTED, f"git status failed: {result.detail()}"
        changes = [line for line in result.stdout.splitlines() if line.strip()]
        if not changes:
            return Verdict.CONFIRMED, "Working tree clean"
        return Verdict.REFUTED, f"Working tree has {len(changes)} uncommitted change(s)"

    def _check_git_commit(self, spec: GitCommitExistsEvidence) -> Outcome:
        result = self._git(["cat-file", "-e", f"{spec.commit}^{{commit}}"], spec.repo_path)
        if isinstance(result, str):
            return Verdict.UNVERIFIABLE, result
        if result.succeeded:
            return Verdict.CONFIRMED, f"Commit exists: {spec.commit}"
        return Verdict.REFUTED, f"Commit not found: {spec.commit}"

    def _check_git_branch(self, spec: GitBranchExistsEvidence) -> Outcome:
        result = self._git(
            ["rev-parse", "--verify", "--quiet", f"refs/heads/{spec.branch}"], spec.repo_path
        )
        if isinstance(result, str):
            return Verdict.UNVERIFIABLE, result
        if result.succeeded:
            return Verdict.CONFIRMED, f"Branch exists: {spec.branch}"
        return Verdict.REFUTED, f"Branch not found: {spec.branch}"

    # -------------------------------------------------------------------------
    # Environment and custom checks
    # -------------------------------------------------------------------------

    def _check_env_var(self, spec: EnvVarEqualsEvidence) -> Outcome:
        actual = os.environ.get(spec.name)
        if actual is None:
            return Verdict.REFUTED, f"Environment variable not set: {spec.name}"
        if actual == spec.value:
            return Verdict.CONFIRMED, f"Environment variable {spec.name} matches"
        return Verdict.REFUTED, f"Environment variable {spec.name} has a different value"

    def _check_custom(self, spec: CustomEvidence) -> Outcome:
        checker = self._registry.get(spec.name)
        if checker is None:
            return Verdict.UNVERIFIABLE, f"No checker registered for: {spec.name}"
        try:
            verdict = checker(dict(spec.params))
        except Exception as exc:  # noqa: BLE001
            logger.warning("custom_checker_failed", checker=spec.name, error=str(exc))
            return Verdict.UNVERIFIABLE, str(exc) or type(exc).__name__
        if not isinstance(verdict, Verdict) or verdict not in _DECISIVE_VERDICTS:
            return Verdict.UNVERIFIABLE, (
                f"Checker {spec.name} returned {verdict!r}; expected Confirmed, "
                "Refuted or Unverifiable"
            )
        return verdict, None


def _read_text(path: str) -> tuple[str | None, str]:
    try:
        with open(path, encoding="utf-8", newline="") as handle:
            return handle.read(), ""
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        return None, f"Cannot read file: {exc}"


def _render(value: object) -> str:
    return json.dumps(value, default=str, ensure_ascii=False)
