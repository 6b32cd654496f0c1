"""
Data model for claim verification.

A claim pairs a human description with the evidence that would be observable
on the machine if the claimed action really happened. Evidence kinds form a
closed discriminated union; every variant carries its tag in the `type` field:

- `FileExists`, `DirectoryExists`: path presence
- `FileWithHash`, `FileContains`, `FileMatchesRegex`, `FileJsonPath`: file content
- `FileModifiedAfter`: file metadata
- `CommandSucceeds`: process exit status
- `GitClean`, `GitCommitExists`, `GitBranchExists`: version-control state
- `EnvVarEquals`: process environment
- `Custom`: user-registered predicate
"""

from __future__ import annotations

import hashlib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Literal, Union

# =============================================================================
# Verdict
# =============================================================================


class Verdict(str, Enum):
    """Outcome of a single check or of a whole claim."""

    CONFIRMED = "Confirmed"
    REFUTED = "Refuted"
    INCONCLUSIVE = "Inconclusive"
    UNVERIFIABLE = "Unverifiable"

    def is_trustworthy(self) -> bool:
        return self is Verdict.CONFIRMED


# =============================================================================
# Discriminated Union Evidence Types
# =============================================================================


@dataclass(frozen=True)
class FileExistsEvidence:
    """A file (or any filesystem entry) should exist at `path`."""

    path: str
    type: Literal["FileExists"] = field(default="FileExists", init=False, repr=False)


@dataclass(frozen=True)
class FileWithHashEvidence:
    """A file should exist with the given SHA-256 content digest."""

    path: str
    sha256: str
    """Hex-encoded digest, compared case-sensitively."""

    type: Literal["FileWithHash"] = field(default="FileWithHash", init=False, repr=False)


@dataclass(frozen=True)
class FileContainsEvidence:
    """A text file should contain `substring` somewhere."""

    path: str
    substring: str
    type: Literal["FileContains"] = field(default="FileContains", init=False, repr=False)


@dataclass(frozen=True)
class FileMatchesRegexEvidence:
    """A text file should contain a match for `pattern`."""

    path: str
    pattern: str
    type: Literal["FileMatchesRegex"] = field(default="FileMatchesRegex", init=False, repr=False)


@dataclass(frozen=True)
class FileJsonPathEvidence:
    """A JSON file should hold `expected` at `json_path`."""

    path: str
    json_path: str
    """Dotted/bracketed path, e.g. `.dependencies.items[0]`."""

    expected: Any
    """Any JSON value."""

    type: Literal["FileJsonPath"] = field(default="FileJsonPath", init=False, repr=False)


@dataclass(frozen=True)
class DirectoryExistsEvidence:
    path: str
    type: Literal["DirectoryExists"] = field(default="DirectoryExists", init=False, repr=False)


@dataclass(frozen=True)
class CommandSucceedsEvidence:
    """A command should exit with status 0. Arguments are never shell-expanded."""

    command: str
    args: tuple[str, ...] = ()
    type: Literal["CommandSucceeds"] = field(default="CommandSucceeds", init=False, repr=False)


@dataclass(frozen=True)
class GitCleanEvidence:
    """The working tree at `repo_path` (default: cwd) has no pending changes."""

    repo_path: str | None = None
    type: Literal["GitClean"] = field(default="GitClean", init=False, repr=False)


@dataclass(frozen=True)
class GitCommitExistsEvidence:
    commit: str
    repo_path: str | None = None
    type: Literal["GitCommitExists"] = field(default="GitCommitExists", init=False, repr=False)


@dataclass(frozen=True)
class GitBranchExistsEvidence:
    branch: str
    repo_path: str | None = None
    type: Literal["GitBranchExists"] = field(default="GitBranchExists", init=False, repr=False)


@dataclass(frozen=True)
class FileModifiedAfterEvidence:
    """A file's last-modified time should be strictly later than `after`."""

    path: str
    after: str
    """Threshold timestamp (ISO 8601). Naive values are read as UTC."""

    type: Literal["FileModifiedAfter"] = field(
        default="FileModifiedAfter", init=False, repr=False
    )


@dataclass(frozen=True)
class EnvVarEqualsEvidence:
    name: str
    value: str
    type: Literal["EnvVarEquals"] = field(default="EnvVarEquals", init=False, repr=False)


@dataclass(frozen=True)
class CustomEvidence:
    """Evidence checked by a predicate registered under `name`."""

    name: str
    params: Mapping[str, str] = field(default_factory=dict)
    type: Literal["Custom"] = field(default="Custom", init=False, repr=False)

    def __post_init__(self) -> None:
        # Read-only copy; the caller's dict may change later.
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))


# Discriminated union of all evidence types
EvidenceSpec = Union[
    FileExistsEvidence,
    FileWithHashEvidence,
    FileContainsEvidence,
    FileMatchesRegexEvidence,
    FileJsonPathEvidence,
    DirectoryExistsEvidence,
    CommandSucceedsEvidence,
    GitCleanEvidence,
    GitCommitExistsEvidence,
    GitBranchExistsEvidence,
    FileModifiedAfterEvidence,
    EnvVarEqualsEvidence,
    CustomEvidence,
]

# =============================================================================
# Claim
# =============================================================================


def generate_claim_id(description: str, created_at: datetime) -> str:
    """
    Derive a short claim identifier.

    Hashes the description together with the creation time (whole Unix
    seconds, 8-byte little-endian) and keeps the first 8 bytes of the digest.

    Args:
        description: Claim description
        created_at: Claim creation time

    Returns:
        16-character hex identifier
    """
    hasher = hashlib.sha256()
    hasher.update(description.encode("utf-8"))
    hasher.update(int(created_at.timestamp()).to_bytes(8, "little", signed=True))
    return hasher.digest()[:8].hex()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Claim:
    """An assertion that some action happened, with the evidence to check it."""

    id: str
    description: str
    timestamp: datetime
    evidence: tuple[EvidenceSpec, ...] = ()
    source: str | None = None

    @classmethod
    def new(
        cls,
        description: str,
        evidence: tuple[EvidenceSpec, ...] | list[EvidenceSpec] = (),
        source: str | None = None,
        timestamp: datetime | None = None,
    ) -> Claim:
        created_at = timestamp or utc_now()
        return cls(
            id=generate_claim_id(description, created_at),
            description=description,
            timestamp=created_at,
            evidence=tuple(evidence),
            source=source,
        )

    def with_evidence(self, evidence: EvidenceSpec) -> Claim:
        return replace(self, evidence=(*self.evidence, evidence))

    def with_source(self, source: str) -> Claim:
        return replace(self, source=source)


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class EvidenceResult:
    """Outcome of checking one evidence item."""

    spec: EvidenceSpec
    """The evidence item this result answers, echoed unchanged."""

    verdict: Verdict
    details: str | None = None


_SUMMARY_ICONS: dict[Verdict, str] = {
    Verdict.CONFIRMED: "✓",
    Verdict.REFUTED: "✗",
    Verdict.INCONCLUSIVE: "?",
    Verdict.UNVERIFIABLE: "⊘",
}


@dataclass(frozen=True)
class VerificationReport:
    """Claim-level outcome: one result per evidence item plus the aggregate."""

    claim: Claim
    evidence_results: tuple[EvidenceResult, ...]
    overall_verdict: Verdict
    verified_at: datetime

    def summary(self) -> str:
        icon = _SUMMARY_ICONS[self.overall_verdict]
        return f"[{icon}] {self.claim.description} - {self.overall_verdict.value}"
