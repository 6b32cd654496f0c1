from dyadt_contracts.hashing import sha256_bytes, sha256_file
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
    Verdict,
    VerificationReport,
    generate_claim_id,
)
from dyadt_contracts.protocols import ClaimVerifier, CustomChecker, EvidenceChecker
from dyadt_contracts.serialization import (
    EvidenceFormatError,
    claim_from_dict,
    claim_to_dict,
    evidence_from_dict,
    evidence_to_dict,
    format_timestamp,
    parse_timestamp,
    report_to_dict,
    result_to_dict,
)

__all__ = [
    "Claim",
    "ClaimVerifier",
    "CommandSucceedsEvidence",
    "CustomChecker",
    "CustomEvidence",
    "DirectoryExistsEvidence",
    "EnvVarEqualsEvidence",
    "EvidenceChecker",
    "EvidenceFormatError",
    "EvidenceResult",
    "EvidenceSpec",
    "FileContainsEvidence",
    "FileExistsEvidence",
    "FileJsonPathEvidence",
    "FileMatchesRegexEvidence",
    "FileModifiedAfterEvidence",
    "FileWithHashEvidence",
    "GitBranchExistsEvidence",
    "GitCleanEvidence",
    "GitCommitExistsEvidence",
    "Verdict",
    "VerificationReport",
    "claim_from_dict",
    "claim_to_dict",
    "evidence_from_dict",
    "evidence_to_dict",
    "format_timestamp",
    "generate_claim_id",
    "parse_timestamp",
    "report_to_dict",
    "result_to_dict",
    "sha256_bytes",
    "sha256_file",
]
