"""
ATYTW Engine — Configuration

Environment-driven settings plus the statutory constants and static lookup
tables the calculators share. Tables are read-only for the life of the
process; tests swap them by passing a different ``ScoringTables``.
"""

import logging
import os
from types import MappingProxyType
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

load_dotenv()

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────
# Environment
# ─────────────────────────────────────────────

def parse_max_workers(raw: Optional[str]) -> int:
    """Worker count from ``ATYTW_MAX_WORKERS``; anything unusable means 1."""
    if raw is None or not raw.strip():
        return 1
    try:
        return max(1, int(raw.strip()))
    except ValueError:
        logger.warning("Ignoring ATYTW_MAX_WORKERS=%r: not an integer, using 1", raw)
        return 1


LOG_LEVEL = os.getenv("ATYTW_LOG_LEVEL", "INFO").strip().upper()
MAX_WORKERS = parse_max_workers(os.getenv("ATYTW_MAX_WORKERS"))


# ─────────────────────────────────────────────
# Tax constants
# ─────────────────────────────────────────────

NIIT_RATE = 0.038                  # 3.8% Net Investment Income Tax
AMT_RATE = 0.28                    # Top AMT bracket on private-activity interest
MAX_EFFECTIVE_TAX_RATE = 0.999     # Keeps (1 - rate) strictly positive

DAYS_PER_YEAR = 365.25
DEMINIMIS_QUARTER_POINT = 0.25     # 1/4 point per full year to maturity
OID_DEMINIMIS_MULTIPLIER = 0.37    # price below threshold
OID_MARKET_DISCOUNT_MULTIPLIER = 0.15  # threshold <= price < par
PAR = 100.0


# ─────────────────────────────────────────────
# Ranking constants
# ─────────────────────────────────────────────

ATYTW_TOLERANCE = 0.001
LIQUIDITY_TOLERANCE = 0.05
STABILITY_TOLERANCE = 0.05
DEFAULT_DURATION = 10.0


# ─────────────────────────────────────────────
# Scoring tables
# ─────────────────────────────────────────────

SECTOR_SCORES: Mapping[str, float] = MappingProxyType({
    "water-sewer": 0.95,
    "utilities": 0.90,
    "airports": 0.85,
    "toll-roads": 0.85,
    "public-power": 0.85,
    "essential-service": 0.80,
    "general-obligation": 0.80,
    "school-district": 0.75,
    "higher-education": 0.70,
    "transportation": 0.70,
    "housing": 0.65,
    "healthcare": 0.60,
    "hospitals": 0.55,
    "student-housing": 0.50,
    "nursing-homes": 0.45,
    "industrial-development": 0.40,
})

STATE_QUALITY_SCORES: Mapping[str, float] = MappingProxyType({
    "VA": 0.85,
    "MD": 0.85,
    "MA": 0.85,
    "TX": 0.80,
    "FL": 0.75,
    "CA": 0.70,
    "NY": 0.75,
    "NC": 0.80,
    "GA": 0.75,
    "WA": 0.80,
    "CO": 0.80,
    "UT": 0.85,
    "IL": 0.60,
    "NJ": 0.65,
    "CT": 0.65,
    "PA": 0.70,
})

# Ordered best to worst; screening relies on this order.
RATING_SCORES: Mapping[str, float] = MappingProxyType({
    "AAA": 1.00,
    "AA+": 0.95,
    "AA": 0.90,
    "AA-": 0.85,
    "A+": 0.80,
    "A": 0.75,
    "A-": 0.70,
    "BBB+": 0.65,
    "BBB": 0.60,
    "BBB-": 0.55,
})

DEFAULT_SECTOR_SCORE = 0.5
DEFAULT_STATE_SCORE = 0.7
DEFAULT_RATING_SCORE = 0.6


class ScoringTables(BaseModel):
    """Lookup tables and fallbacks used by the stability scorer."""
    model_config = ConfigDict(frozen=True)

    # factories hand back the shared read-only tables without copying them
    sector_scores: Mapping[str, float] = Field(default_factory=lambda: SECTOR_SCORES)
    state_scores: Mapping[str, float] = Field(default_factory=lambda: STATE_QUALITY_SCORES)
    rating_scores: Mapping[str, float] = Field(default_factory=lambda: RATING_SCORES)
    default_sector_score: float = DEFAULT_SECTOR_SCORE
    default_state_score: float = DEFAULT_STATE_SCORE
    default_rating_score: float = DEFAULT_RATING_SCORE

    def sector_score(self, sector: str) -> float:
        return self.sector_scores.get(sector.lower(), self.default_sector_score)

    def state_score(self, state: str) -> float:
        return self.state_scores.get(state.upper(), self.default_state_score)

    def rating_score(self, rating: str) -> float:
        return self.rating_scores.get(rating.upper(), self.default_rating_score)


DEFAULT_SCORING_TABLES = ScoringTables()
