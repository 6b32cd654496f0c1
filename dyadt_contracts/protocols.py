from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from dyadt_contracts.models import Claim, EvidenceResult, EvidenceSpec, Verdict, VerificationReport


class CustomChecker(Protocol):
    def __call__(self, params: Mapping[str, str]) -> Verdict: ...


class EvidenceChecker(Protocol):
    def check_evidence(self, spec: EvidenceSpec) -> EvidenceResult: ...


class ClaimVerifier(EvidenceChecker, Protocol):
    def verify(self, claim: Claim) -> VerificationReport: ...
