"""Tests for claim-level verdict aggregation."""

from __future__ import annotations

import itertools
from pathlib import Path

import pytest

from dyadt.verify import Verifier, aggregate_verdicts
from dyadt_contracts import (
    Claim,
    CustomEvidence,
    FileExistsEvidence,
    Verdict,
)

C = Verdict.CONFIRMED
R = Verdict.REFUTED
U = Verdict.UNVERIFIABLE


class TestAggregateVerdicts:
    """Tests for aggregate_verdicts function."""

    def test_empty_is_unverifiable(self) -> None:
        assert aggregate_verdicts([]) == U

    @pytest.mark.parametrize(
        ("verdicts", "expected"),
        [
            ([C], C),
            ([C, C, C], C),
            ([R], R),
            ([C, C, R], R),
            ([U, U, R], R),
            ([C, U, R], R),
            ([U], U),
            ([U, U], U),
            ([C, U], Verdict.INCONCLUSIVE),
            ([U, C, C], Verdict.INCONCLUSIVE),
        ],
    )
    def test_precedence(self, verdicts: list[Verdict], expected: Verdict) -> None:
        assert aggregate_verdicts(verdicts) == expected

    def test_single_refutation_outweighs_many_confirmations(self) -> None:
        assert aggregate_verdicts([C] * 50 + [R] + [U] * 50) == R

    def test_order_independent(self) -> None:
        verdicts = [C, U, C, R]
        outcomes = {aggregate_verdicts(order) for order in itertools.permutations(verdicts)}
        assert outcomes == {R}
        mixed = [C, U, U]
        outcomes = {aggregate_verdicts(order) for order in itertools.permutations(mixed)}
        assert outcomes == {Verdict.INCONCLUSIVE}

    def test_accepts_generators(self) -> None:
        assert aggregate_verdicts(v for v in (C, C)) == C


class TestClaimAggregation:
    """Aggregation observed through Verifier.verify."""

    def test_confirmed_plus_unregistered_custom_is_inconclusive(self, tmp_path: Path) -> None:
        claim = Claim.new(
            "Partly checkable",
            evidence=[
                FileExistsEvidence(path=str(tmp_path)),
                CustomEvidence(name="not_registered"),
            ],
        )
        report = Verifier().verify(claim)
        assert [r.verdict for r in report.evidence_results] == [C, U]
        assert report.overall_verdict == Verdict.INCONCLUSIVE

    def test_shuffled_evidence_keeps_verdict(self, tmp_path: Path) -> None:
        evidence = [
            FileExistsEvidence(path=str(tmp_path)),
            FileExistsEvidence(path=str(tmp_path / "missing")),
            CustomEvidence(name="not_registered"),
        ]
        verifier = Verifier()
        verdicts = {
            verifier.verify(Claim.new("x", evidence=order)).overall_verdict
            for order in itertools.permutations(evidence)
        }
        assert verdicts == {R}

    def test_single_items_never_inconclusive(self, tmp_path: Path) -> None:
        verifier = Verifier()
        for spec in (
            FileExistsEvidence(path=str(tmp_path)),
            FileExistsEvidence(path=str(tmp_path / "missing")),
            CustomEvidence(name="not_registered"),
        ):
            assert verifier.check_evidence(spec).verdict != Verdict.INCONCLUSIVE
