"""
ATYTW Engine — Ranking

Candidates are ordered by a fixed chain of tie-break rules. Each rule
compares one attribute with its own tolerance band: values closer than the
tolerance are a tie and fall through to the next rule.

    1. atytw            descending   0.001
    2. liquidity score  descending   0.05
    3. stability score  descending   0.05
    4. duration         ascending    exact (missing = 10y)

Python's sort is stable, so candidates tied on every rule keep their input
order and re-ranking the same list gives the same result.
"""

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Callable, List, Optional, Sequence

from atytw_engine.config import (
    ATYTW_TOLERANCE,
    DEFAULT_DURATION,
    LIQUIDITY_TOLERANCE,
    STABILITY_TOLERANCE,
)
from atytw_engine.logging_config import setup_logger
from atytw_engine.models import RankedBond

logger = setup_logger(__name__)


@dataclass(frozen=True)
class TieBreakRule:
    """One link of the comparator chain."""
    name: str
    key: Callable[[RankedBond], float]
    tolerance: float = 0.0
    descending: bool = True

    def compare(self, a: RankedBond, b: RankedBond) -> int:
        """Negative if ``a`` ranks ahead of ``b``, positive if behind, 0 on a tie."""
        va, vb = self.key(a), self.key(b)
        if abs(va - vb) <= self.tolerance:
            return 0
        if self.descending:
            return -1 if va > vb else 1
        return -1 if va < vb else 1


def _duration_or_default(candidate: RankedBond) -> float:
    duration = candidate.duration
    return DEFAULT_DURATION if duration is None else duration


DEFAULT_RULES: Sequence[TieBreakRule] = (
    TieBreakRule("atytw", lambda c: c.atytw, ATYTW_TOLERANCE),
    TieBreakRule("liquidity", lambda c: c.liquidity_score, LIQUIDITY_TOLERANCE),
    TieBreakRule("stability", lambda c: c.stability_score, STABILITY_TOLERANCE),
    TieBreakRule("duration", _duration_or_default, 0.0, descending=False),
)


def compare_candidates(
    a: RankedBond,
    b: RankedBond,
    rules: Sequence[TieBreakRule] = DEFAULT_RULES,
) -> int:
    """First rule that separates the two decides."""
    for rule in rules:
        result = rule.compare(a, b)
        if result:
            return result
    return 0


def within_duration(candidate: RankedBond, max_duration: Optional[float]) -> bool:
    """Bonds without a duration always pass."""
    if max_duration is None:
        return True
    duration = candidate.duration
    return duration is None or duration <= max_duration


class RankingEngine:
    """Filter, sort and number a list of scored candidates."""

    def __init__(self, rules: Sequence[TieBreakRule] = DEFAULT_RULES):
        self.rules = tuple(rules)

    def rank(
        self,
        candidates: Sequence[RankedBond],
        max_duration: Optional[float] = None,
    ) -> List[RankedBond]:
        filtered = [c for c in candidates if within_duration(c, max_duration)]

        ordered = sorted(
            filtered,
            key=cmp_to_key(lambda a, b: compare_candidates(a, b, self.rules)),
        )

        ranked = [c.model_copy(update={"rank": i + 1}) for i, c in enumerate(ordered)]

        logger.info(
            f"Ranked {len(ranked)} of {len(candidates)} candidates"
            + (f" (max duration {max_duration:g}y)" if max_duration is not None else "")
        )
        return ranked
