"""
ATYTW Engine — After-Tax Yield to Worst and Bond Ranking

Architecture:
- ATYTWCalculator: after-tax YTW for one bond (tax treatment + OID)
- TaxTreatmentResolver: dispatches to bond-family tax treatments
- StabilityScorer / LiquidityScorer: [0, 1] scores with factor notes
- RankingEngine: duration filter + tie-break chain + 1-based ranks
- ExplanationBuilder: summary line and bullets for a ranked bond
"""

from atytw_engine.models import (
    ATYTWResult,
    AfterTaxComparison,
    Bond,
    BondData,
    BondType,
    FilingStatus,
    Issuer,
    IssuerType,
    LiquidityScore,
    MarketData,
    OIDResult,
    RankedBond,
    RankExplanation,
    StabilityScore,
    TaxBreakdown,
    TaxProfile,
    UserSettings,
)
from atytw_engine.config import DEFAULT_SCORING_TABLES, ScoringTables
from atytw_engine.core import (
    ATYTWCalculator,
    TaxTreatmentResolver,
    effective_tax_rate,
    tax_equivalent_yield,
)
from atytw_engine.oid import OIDMarketDiscountEvaluator
from atytw_engine.scoring import LiquidityScorer, StabilityScorer
from atytw_engine.ranking import RankingEngine, TieBreakRule, compare_candidates
from atytw_engine.explain import ExplanationBuilder
from atytw_engine.pipeline import BondRankingPipeline, rank_bonds, screen_candidates
from atytw_engine.logging_config import configure_logging

__all__ = [
    "ATYTWCalculator",
    "TaxTreatmentResolver",
    "OIDMarketDiscountEvaluator",
    "StabilityScorer",
    "LiquidityScorer",
    "RankingEngine",
    "TieBreakRule",
    "ExplanationBuilder",
    "BondRankingPipeline",
    "ScoringTables",
    "DEFAULT_SCORING_TABLES",
    "compare_candidates",
    "effective_tax_rate",
    "tax_equivalent_yield",
    "rank_bonds",
    "screen_candidates",
    "configure_logging",
    "ATYTWResult",
    "AfterTaxComparison",
    "Bond",
    "BondData",
    "BondType",
    "FilingStatus",
    "Issuer",
    "IssuerType",
    "LiquidityScore",
    "MarketData",
    "OIDResult",
    "RankedBond",
    "RankExplanation",
    "StabilityScore",
    "TaxBreakdown",
    "TaxProfile",
    "UserSettings",
]
