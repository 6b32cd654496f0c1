"""
Claim-level verdict aggregation.

The fold is a precedence rule, not an average:

1. every item Confirmed      -> Confirmed
2. any item Refuted          -> Refuted
3. every item Unverifiable   -> Unverifiable
4. otherwise                 -> Inconclusive

It only depends on the multiset of verdicts, so evidence order and parallel
checking never change the outcome. An empty result set is Unverifiable.
"""

from __future__ import annotations

from collections.abc import Iterable

from dyadt_contracts import Verdict


def aggregate_verdicts(verdicts: Iterable[Verdict]) -> Verdict:
    """
    Fold per-item verdicts into one claim-level verdict.

    Args:
        verdicts: Per-evidence verdicts in any order

    Returns:
        The aggregate verdict
    """
    seen = set(verdicts)
    if not seen:
        return Verdict.UNVERIFIABLE
    if seen == {Verdict.CONFIRMED}:
        return Verdict.CONFIRMED
    if Verdict.REFUTED in seen:
        return Verdict.REFUTED
    if seen == {Verdict.UNVERIFIABLE}:
        return Verdict.UNVERIFIABLE
    return Verdict.INCONCLUSIVE
