"""
Structured (JSON-compatible) encoding for the claim data model.

Evidence items are encoded as tagged objects::

    {"type": "FileWithHash", "spec": {"path": "out.bin", "sha256": "ab12..."}}

Decoding is strict about tags and required fields and lenient about unknown
payload keys, so `evidence_from_dict(evidence_to_dict(x)) == x` for every
evidence kind.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any, Callable

from dyadt_contracts.models import (
    Claim,
    CommandSucceedsEvidence,
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
    VerificationReport,
    generate_claim_id,
    utc_now,
)


class EvidenceFormatError(ValueError):
    """Raised when structured input does not describe a valid claim or evidence item."""


# =============================================================================
# Timestamps
# =============================================================================


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(raw: str) -> datetime:
    """
    Parse an ISO 8601 / RFC 3339 timestamp.

    A trailing `Z` is accepted, and values without an offset are taken as UTC.

    Raises:
        ValueError: If `raw` is not a valid timestamp
    """
    parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# =============================================================================
# Field helpers
# =============================================================================


def _require_str(payload: Mapping[str, Any], key: str, kind: str) -> str:
    if key not in payload:
        raise EvidenceFormatError(f"{kind}: missing required field '{key}'")
    value = payload[key]
    if not isinstance(value, str):
        raise EvidenceFormatError(f"{kind}: field '{key}' must be a string")
    return value


def _optional_str(payload: Mapping[str, Any], key: str, kind: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise EvidenceFormatError(f"{kind}: field '{key}' must be a string")
    return value


def _str_list(payload: Mapping[str, Any], key: str, kind: str) -> tuple[str, ...]:
    value = payload.get(key, [])
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise EvidenceFormatError(f"{kind}: field '{key}' must be a list of strings")
    return tuple(value)


def _str_map(payload: Mapping[str, Any], key: str, kind: str) -> dict[str, str]:
    value = payload.get(key, {})
    if value is None:
        return {}
    if not isinstance(value, Mapping) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        raise EvidenceFormatError(f"{kind}: field '{key}' must map strings to strings")
    return dict(value)


# =============================================================================
# Evidence
# =============================================================================


def _with_repo_path(payload: dict[str, Any], repo_path: str | None) -> dict[str, Any]:
    if repo_path is not None:
        payload["repo_path"] = repo_path
    return payload


def evidence_to_dict(spec: EvidenceSpec) -> dict[str, Any]:
    """Encode one evidence item as `{"type": ..., "spec": {...}}`."""
    payload: dict[str, Any]
    if isinstance(spec, FileExistsEvidence):
        payload = {"path": spec.path}
    elif isinstance(spec, FileWithHashEvidence):
        payload = {"path": spec.path, "sha256": spec.sha256}
    elif isinstance(spec, FileContainsEvidence):
        payload = {"path": spec.path, "substring": spec.substring}
    elif isinstance(spec, FileMatchesRegexEvidence):
        payload = {"path": spec.path, "pattern": spec.pattern}
    elif isinstance(spec, FileJsonPathEvidence):
        payload = {"path": spec.path, "json_path": spec.json_path, "expected": spec.expected}
    elif isinstance(spec, DirectoryExistsEvidence):
        payload = {"path": spec.path}
    elif isinstance(spec, CommandSucceedsEvidence):
        payload = {"command": spec.command, "args": list(spec.args)}
    elif isinstance(spec, GitCleanEvidence):
        payload = _with_repo_path({}, spec.repo_path)
    elif isinstance(spec, GitCommitExistsEvidence):
        payload = _with_repo_path({"commit": spec.commit}, spec.repo_path)
    elif isinstance(spec, GitBranchExistsEvidence):
        payload = _with_repo_path({"branch": spec.branch}, spec.repo_path)
    elif isinstance(spec, FileModifiedAfterEvidence):
        payload = {"path": spec.path, "after": spec.after}
    elif isinstance(spec, EnvVarEqualsEvidence):
        payload = {"name": spec.name, "value": spec.value}
    elif isinstance(spec, CustomEvidence):
        payload = {"name": spec.name, "params": dict(spec.params)}
    else:
        raise TypeError(f"Unsupported evidence object: {spec!r}")
    return {"type": spec.type, "spec": payload}


def _json_value(value: Any, where: str) -> Any:
    """Coerce a decoded value to plain JSON types.

    YAML loaders produce dates for unquoted timestamps; those become the ISO
    strings a JSON document would hold. Anything else outside the JSON data
    model is rejected.
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Mapping):
        result: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise EvidenceFormatError(f"{where}: object keys must be strings, got {key!r}")
            result[key] = _json_value(item, where)
        return result
    if isinstance(value, (list, tuple)):
        return [_json_value(item, where) for item in value]
    raise EvidenceFormatError(f"{where}: {type(value).__name__} is not a JSON value")


def _parse_file_json_path(payload: Mapping[str, Any]) -> FileJsonPathEvidence:
    if "expected" not in payload:
        raise EvidenceFormatError("FileJsonPath: missing required field 'expected'")
    return FileJsonPathEvidence(
        path=_require_str(payload, "path", "FileJsonPath"),
        json_path=_require_str(payload, "json_path", "FileJsonPath"),
        expected=_json_value(payload["expected"], "FileJsonPath.expected"),
    )


_EVIDENCE_PARSERS: dict[str, Callable[[Mapping[str, Any]], EvidenceSpec]] = {
    "FileExists": lambda p: FileExistsEvidence(path=_require_str(p, "path", "FileExists")),
    "FileWithHash": lambda p: FileWithHashEvidence(
        path=_require_str(p, "path", "FileWithHash"),
        sha256=_require_str(p, "sha256", "FileWithHash"),
    ),
    "FileContains": lambda p: FileContainsEvidence(
        path=_require_str(p, "path", "FileContains"),
        substring=_require_str(p, "substring", "FileContains"),
    ),
    "FileMatchesRegex": lambda p: FileMatchesRegexEvidence(
        path=_require_str(p, "path", "FileMatchesRegex"),
        pattern=_require_str(p, "pattern", "FileMatchesRegex"),
    ),
    "FileJsonPath": _parse_file_json_path,
    "DirectoryExists": lambda p: DirectoryExistsEvidence(
        path=_require_str(p, "path", "DirectoryExists")
    ),
    "CommandSucceeds": lambda p: CommandSucceedsEvidence(
        command=_require_str(p, "command", "CommandSucceeds"),
        args=_str_list(p, "args", "CommandSucceeds"),
    ),
    "GitClean": lambda p: GitCleanEvidence(repo_path=_optional_str(p, "repo_path", "GitClean")),
    "GitCommitExists": lambda p: GitCommitExistsEvidence(
        commit=_require_str(p, "commit", "GitCommitExists"),
        repo_path=_optional_str(p, "repo_path", "GitCommitExists"),
    ),
    "GitBranchExists": lambda p: GitBranchExistsEvidence(
        branch=_require_str(p, "branch", "GitBranchExists"),
        repo_path=_optional_str(p, "repo_path", "GitBranchExists"),
    ),
    "FileModifiedAfter": lambda p: FileModifiedAfterEvidence(
        path=_require_str(p, "path", "FileModifiedAfter"),
        after=_require_str(p, "after", "FileModifiedAfter"),
    ),
    "EnvVarEquals": lambda p: EnvVarEqualsEvidence(
        name=_require_str(p, "name", "EnvVarEquals"),
        value=_require_str(p, "value", "EnvVarEquals"),
    ),
    "Custom": lambda p: CustomEvidence(
        name=_require_str(p, "name", "Custom"),
        params=_str_map(p, "params", "Custom"),
    ),
}


def evidence_from_dict(data: Mapping[str, Any]) -> EvidenceSpec:
    """
    Decode one tagged evidence object.

    Args:
        data: Mapping with a `type` tag and a `spec` payload

    Returns:
        The matching evidence dataclass

    Raises:
        EvidenceFormatError: If the tag is unknown or the payload is malformed
    """
    if not isinstance(data, Mapping):
        raise EvidenceFormatError("Evidence entry must be an object.")
    kind = data.get("type")
    if not isinstance(kind, str):
        raise EvidenceFormatError("Evidence entry must carry a string 'type' tag.")
    parser = _EVIDENCE_PARSERS.get(kind)
    if parser is None:
        raise EvidenceFormatError(f"Unknown evidence type: {kind}")
    payload = data.get("spec", {})
    if not isinstance(payload, Mapping):
        raise EvidenceFormatError(f"{kind}: 'spec' must be an object")
    return parser(payload)


# =============================================================================
# Claim
# =============================================================================


def claim_to_dict(claim: Claim) -> dict[str, Any]:
    return {
        "id": claim.id,
        "description": claim.description,
        "timestamp": format_timestamp(claim.timestamp),
        "evidence": [evidence_to_dict(spec) for spec in claim.evidence],
        "source": claim.source,
    }


def claim_from_dict(data: Mapping[str, Any]) -> Claim:
    """
    Decode a claim object.

    `id` and `timestamp` are optional: a missing timestamp defaults to now,
    and a missing id is derived from the description and timestamp.

    Raises:
        EvidenceFormatError: If the claim or any of its evidence is malformed
    """
    if not isinstance(data, Mapping):
        raise EvidenceFormatError("Claim must be an object.")
    description = _require_str(data, "description", "Claim")

    raw_timestamp = data.get("timestamp")
    if raw_timestamp is None:
        timestamp = utc_now()
    elif isinstance(raw_timestamp, datetime):
        # YAML loaders hand back datetimes for unquoted timestamps
        timestamp = raw_timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
    elif isinstance(raw_timestamp, str):
        try:
            timestamp = parse_timestamp(raw_timestamp)
        except ValueError as exc:
            raise EvidenceFormatError(f"Claim: invalid timestamp {raw_timestamp!r}") from exc
    else:
        raise EvidenceFormatError("Claim: field 'timestamp' must be a string")

    evidence_payload = data.get("evidence")
    if not isinstance(evidence_payload, list):
        raise EvidenceFormatError("Claim: field 'evidence' must be a list")

    claim_id = _optional_str(data, "id", "Claim") or generate_claim_id(description, timestamp)
    return Claim(
        id=claim_id,
        description=description,
        timestamp=timestamp,
        evidence=tuple(evidence_from_dict(item) for item in evidence_payload),
        source=_optional_str(data, "source", "Claim"),
    )


# =============================================================================
# Results (output only)
# =============================================================================


def result_to_dict(result: EvidenceResult) -> dict[str, Any]:
    return {
        "spec": evidence_to_dict(result.spec),
        "verdict": result.verdict.value,
        "details": result.details,
    }


def report_to_dict(report: VerificationReport) -> dict[str, Any]:
    return {
        "claim": claim_to_dict(report.claim),
        "evidence_results": [result_to_dict(result) for result in report.evidence_results],
        "overall_verdict": report.overall_verdict.value,
        "verified_at": format_timestamp(report.verified_at),
    }
