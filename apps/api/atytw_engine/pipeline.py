"""
ATYTW Engine — Screening & Ranking Pipeline

bonds + TaxProfile
  -> screen_candidates (UserSettings)
  -> build_ranked_candidates (ATYTW, stability, liquidity per bond)
  -> RankingEngine.rank (global sort, runs after every bond is scored)

Per-bond work reads only the bond and the shared read-only tables, so it
can be fanned out over a thread pool. ``executor.map`` keeps input order,
which keeps ranking deterministic.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import List, Optional, Sequence

from atytw_engine.config import MAX_WORKERS, RATING_SCORES
from atytw_engine.core import ATYTWCalculator
from atytw_engine.logging_config import setup_logger
from atytw_engine.models import Bond, RankedBond, TaxProfile, UserSettings
from atytw_engine.ranking import RankingEngine
from atytw_engine.scoring import LiquidityScorer, StabilityScorer

logger = setup_logger(__name__)

RATING_ORDER = list(RATING_SCORES.keys())


# ─────────────────────────────────────────────
# Screening
# ─────────────────────────────────────────────

def meets_rating_floor(rating: Optional[str], floor: Optional[str]) -> bool:
    """Unrated bonds pass; bonds rated off the AAA..BBB- scale fail a set floor."""
    if not floor:
        return True
    floor = floor.upper()
    if floor not in RATING_ORDER:
        logger.warning(f"Unknown rating floor '{floor}'; floor ignored")
        return True
    if not rating:
        return True
    if rating.upper() not in RATING_ORDER:
        return False
    return RATING_ORDER.index(rating.upper()) <= RATING_ORDER.index(floor)


def _market_price(bond: Bond) -> float:
    latest = bond.latest_market_data
    if latest is not None and latest.price is not None:
        return latest.price
    return bond.price


def screen_candidates(bonds: Sequence[Bond], settings: Optional[UserSettings]) -> List[Bond]:
    """Apply the investor's screening preferences.

    The duration ceiling is left to ``RankingEngine.rank``.
    """
    if settings is None:
        return list(bonds)

    allowed_sectors = {s.lower() for s in settings.sectors}
    kept: List[Bond] = []
    for bond in bonds:
        if not meets_rating_floor(bond.rating_bucket, settings.rating_floor):
            continue
        if settings.price_floor is not None and _market_price(bond) < settings.price_floor:
            continue
        if settings.exclude_callable and bond.callable:
            continue
        if allowed_sectors and bond.sector and bond.sector.lower() not in allowed_sectors:
            continue
        kept.append(bond)

    logger.debug(f"Screening kept {len(kept)} of {len(bonds)} bonds")
    return kept


# ─────────────────────────────────────────────
# Scoring & ranking
# ─────────────────────────────────────────────

class BondRankingPipeline:
    """Wires the calculator, scorers and ranking engine together."""

    def __init__(
        self,
        calculator: Optional[ATYTWCalculator] = None,
        stability_scorer: Optional[StabilityScorer] = None,
        liquidity_scorer: Optional[LiquidityScorer] = None,
        ranking_engine: Optional[RankingEngine] = None,
        max_workers: Optional[int] = None,
    ):
        self.calculator = calculator or ATYTWCalculator()
        self.stability_scorer = stability_scorer or StabilityScorer()
        self.liquidity_scorer = liquidity_scorer or LiquidityScorer()
        self.ranking_engine = ranking_engine or RankingEngine()
        self.max_workers = max_workers or MAX_WORKERS

    def score_bond(self, bond: Bond, profile: TaxProfile, as_of: Optional[date] = None) -> RankedBond:
        """Unranked candidate for one bond."""
        result = self.calculator.compute(bond, profile, as_of=as_of)
        stability = self.stability_scorer.score(bond)
        liquidity = self.liquidity_scorer.score(bond, as_of=as_of)
        return RankedBond(
            bond=bond,
            atytw=result.atytw,
            pre_tax_ytw=result.pre_tax_ytw,
            stability_score=stability.score,
            liquidity_score=liquidity.score,
            explanation=result.explanation,
        )

    def build_ranked_candidates(
        self,
        bonds: Sequence[Bond],
        profile: TaxProfile,
        as_of: Optional[date] = None,
    ) -> List[RankedBond]:
        as_of = as_of or date.today()
        if self.max_workers <= 1 or len(bonds) < 2:
            return [self.score_bond(b, profile, as_of) for b in bonds]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(lambda b: self.score_bond(b, profile, as_of), bonds))

    def run(
        self,
        bonds: Sequence[Bond],
        profile: TaxProfile,
        settings: Optional[UserSettings] = None,
        as_of: Optional[date] = None,
    ) -> List[RankedBond]:
        """Screen, score and rank ``bonds`` for one investor."""
        screened = screen_candidates(bonds, settings)
        candidates = self.build_ranked_candidates(screened, profile, as_of=as_of)
        max_duration = settings.max_duration if settings is not None else None
        return self.ranking_engine.rank(candidates, max_duration=max_duration)


def rank_bonds(
    bonds: Sequence[Bond],
    profile: TaxProfile,
    settings: Optional[UserSettings] = None,
    as_of: Optional[date] = None,
) -> List[RankedBond]:
    """Convenience wrapper around ``BondRankingPipeline().run``."""
    return BondRankingPipeline().run(bonds, profile, settings=settings, as_of=as_of)
