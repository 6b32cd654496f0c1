from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Iterable
from typing import assert_never

from dyadt.claim_source import ClaimFileSource
from dyadt.config import VerifierConfig
from dyadt.errors import ClaimLoadError
from dyadt.logging_setup import configure_logging
from dyadt.verify import Verifier
from dyadt_contracts import (
    Claim,
    ClaimVerifier,
    CommandSucceedsEvidence,
    CustomEvidence,
    DirectoryExistsEvidence,
    EnvVarEqualsEvidence,
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
    evidence_to_dict,
    report_to_dict,
    sha256_file,
)

EXIT_CONFIRMED = 0
EXIT_REFUTED = 1
EXIT_UNDECIDED = 2
EXIT_ERROR = 3

_ICONS: dict[Verdict, str] = {
    Verdict.CONFIRMED: "✓",
    Verdict.REFUTED: "✗",
    Verdict.INCONCLUSIVE: "?",
    Verdict.UNVERIFIABLE: "⊘",
}

# Higher is worse.
_SEVERITY: dict[Verdict, int] = {
    Verdict.REFUTED: 3,
    Verdict.INCONCLUSIVE: 2,
    Verdict.UNVERIFIABLE: 1,
    Verdict.CONFIRMED: 0,
}


def verdict_to_exit_code(verdict: Verdict) -> int:
    if verdict == Verdict.CONFIRMED:
        return EXIT_CONFIRMED
    if verdict == Verdict.REFUTED:
        return EXIT_REFUTED
    return EXIT_UNDECIDED


def worst_verdict(verdicts: Iterable[Verdict]) -> Verdict:
    worst = Verdict.CONFIRMED
    for verdict in verdicts:
        if _SEVERITY[verdict] > _SEVERITY[worst]:
            worst = verdict
    return worst


def describe_evidence(spec: EvidenceSpec) -> str:
    if isinstance(spec, FileExistsEvidence):
        return f"File exists: {spec.path}"
    if isinstance(spec, FileWithHashEvidence):
        return f"File hash: {spec.path}"
    if isinstance(spec, FileContainsEvidence):
        return f"File contains '{spec.substring}': {spec.path}"
    if isinstance(spec, FileMatchesRegexEvidence):
        return f"File matches /{spec.pattern}/: {spec.path}"
    if isinstance(spec, FileJsonPathEvidence):
        return f"JSON {spec.json_path} == {json.dumps(spec.expected, default=str)}: {spec.path}"
    if isinstance(spec, DirectoryExistsEvidence):
        return f"Directory exists: {spec.path}"
    if isinstance(spec, CommandSucceedsEvidence):
        return f"Command succeeds: {' '.join([spec.command, *spec.args])}"
    if isinstance(spec, GitCleanEvidence):
        return f"Git tree clean: {spec.repo_path or '.'}"
    if isinstance(spec, GitCommitExistsEvidence):
        return f"Git commit exists: {spec.commit}"
    if isinstance(spec, GitBranchExistsEvidence):
        return f"Git branch exists: {spec.branch}"
    if isinstance(spec, FileModifiedAfterEvidence):
        return f"Modified after {spec.after}: {spec.path}"
    if isinstance(spec, EnvVarEqualsEvidence):
        return f"Env var equals: {spec.name}"
    if isinstance(spec, CustomEvidence):
        return f"Custom check: {spec.name}"
    assert_never(spec)


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False, default=str))


def _print_report(report: VerificationReport) -> None:
    print(report.summary())
    if report.claim.source is not None:
        print(f"  Source: {report.claim.source}")
    for result in report.evidence_results:
        print(f"  {_ICONS[result.verdict]} {describe_evidence(result.spec)}")
        if result.details is not None:
            print(f"      {result.details}")


def _build_verifier() -> ClaimVerifier:
    return Verifier(config=VerifierConfig.from_env())


def _cmd_check(args: argparse.Namespace) -> int:
    try:
        claim = ClaimFileSource(args.claim_file).load_claim()
    except ClaimLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR
    report = _build_verifier().verify(claim)
    if args.json:
        _print_json(report_to_dict(report))
    else:
        _print_report(report)
    return verdict_to_exit_code(report.overall_verdict)


def _cmd_verify(args: argparse.Namespace) -> int:
    claim = Claim.new(
        f"Path exists: {args.path}",
        evidence=[FileExistsEvidence(path=args.path)],
        source="dyadt-cli",
    )
    report = _build_verifier().verify(claim)
    if args.json:
        _print_json(report_to_dict(report))
    else:
        _print_report(report)
    return verdict_to_exit_code(report.overall_verdict)


def _cmd_hash(args: argparse.Namespace) -> int:
    try:
        digest = sha256_file(args.file)
    except OSError as exc:
        print(f"Error reading {args.file}: {exc}", file=sys.stderr)
        return EXIT_ERROR
    spec = evidence_to_dict(FileWithHashEvidence(path=args.file, sha256=digest))
    if args.json:
        _print_json(spec)
    else:
        print(digest)
        print("\nEvidence spec:")
        print(json.dumps(spec))
    return 0


def _cmd_report(args: argparse.Namespace) -> int:
    try:
        claims = ClaimFileSource(args.claims_file).load_claims()
    except ClaimLoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR
    verifier = _build_verifier()
    reports = [verifier.verify(claim) for claim in claims]
    overall = worst_verdict(report.overall_verdict for report in reports)

    if args.json:
        _print_json(
            {
                "reports": [report_to_dict(report) for report in reports],
                "overall_verdict": overall.value,
            }
        )
    else:
        print("Verification Report")
        print("===================\n")
        for report in reports:
            _print_report(report)
            print()
        print("-------------------")
        print(f"Overall: {overall.value}")
    return verdict_to_exit_code(overall)


def _add_output_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json", action="store_true", help="Print structured JSON output")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dyadt",
        description="Did you actually do that? Verify claimed actions against reality.",
        epilog="Exit codes: 0 confirmed, 1 refuted, 2 inconclusive/unverifiable, 3 error.",
    )
    parser.add_argument("--log-level", default=None, help="Log level (default: DYADT_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Verify a claim from a JSON/YAML file")
    check_parser.add_argument("claim_file")
    _add_output_args(check_parser)
    check_parser.set_defaults(func=_cmd_check)

    verify_parser = subparsers.add_parser("verify", help="Quick check that a path exists")
    verify_parser.add_argument("path")
    _add_output_args(verify_parser)
    verify_parser.set_defaults(func=_cmd_verify)

    hash_parser = subparsers.add_parser("hash", help="Print a file's SHA-256 and evidence spec")
    hash_parser.add_argument("file")
    _add_output_args(hash_parser)
    hash_parser.set_defaults(func=_cmd_hash)

    report_parser = subparsers.add_parser("report", help="Verify a list of claims")
    report_parser.add_argument("claims_file")
    _add_output_args(report_parser)
    report_parser.set_defaults(func=_cmd_report)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = VerifierConfig.from_env()
    configure_logging(level=args.log_level or config.log_level, json_logs=config.json_logs)
    exit_code = args.func(args)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
