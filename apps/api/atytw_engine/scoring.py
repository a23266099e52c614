"""
ATYTW Engine — Stability & Liquidity Scoring

Both scorers start from a neutral 0.5, move it through a fixed sequence of
factors, and clamp to [0, 1]. Each factor that fires records a short
human-readable note in ``factors`` (in the order applied).
"""

from datetime import date
from typing import List, Optional

from atytw_engine.config import DEFAULT_SCORING_TABLES, ScoringTables
from atytw_engine.logging_config import setup_logger
from atytw_engine.models import (
    GENERAL_OBLIGATION_ISSUERS,
    Bond,
    LiquidityScore,
    MarketData,
    StabilityScore,
)

logger = setup_logger(__name__)

NEUTRAL_SCORE = 0.5


def _clamp(score: float) -> float:
    return min(max(score, 0.0), 1.0)


# ─────────────────────────────────────────────
# Stability
# ─────────────────────────────────────────────

class StabilityScorer:
    """Credit / structural stability from issuer, sector, state and rating."""

    def __init__(self, tables: Optional[ScoringTables] = None):
        self.tables = tables or DEFAULT_SCORING_TABLES

    def score(self, bond: Bond) -> StabilityScore:
        score = NEUTRAL_SCORE
        factors: List[str] = []

        # ── 1. Issuer / sector ──
        issuer = bond.issuer
        if issuer is not None and issuer.issuer_type in GENERAL_OBLIGATION_ISSUERS:
            score += 0.15
            factors.append(f"GO {issuer.issuer_type.value.lower()}")
        elif bond.sector:
            sector_score = self.tables.sector_score(bond.sector)
            score = score * 0.3 + sector_score * 0.7
            factors.append(f"Sector: {bond.sector}")

        # ── 2. State quality ──
        if bond.state:
            state_score = self.tables.state_score(bond.state)
            score = score * 0.8 + state_score * 0.2
            factors.append(f"State: {bond.state}")

        # ── 3. Rating ──
        if bond.rating_bucket:
            rating_score = self.tables.rating_score(bond.rating_bucket)
            score = score * 0.6 + rating_score * 0.4
            factors.append(f"Rating: {bond.rating_bucket}")

        # ── 4. Credit enhancement ──
        if bond.insured:
            score += 0.05
            factors.append(f"Insured by {bond.insurer or 'unknown'}")

        if bond.underlying_rating:
            if self.tables.rating_score(bond.underlying_rating) > 0.7:
                score += 0.03
                factors.append(f"Strong underlying: {bond.underlying_rating}")

        return StabilityScore(score=_clamp(score), factors=factors)


# ─────────────────────────────────────────────
# Liquidity
# ─────────────────────────────────────────────

class LiquidityScorer:
    """Trading liquidity from recency, activity, spread, lot size, volume."""

    def score(
        self,
        bond: Bond,
        market_data: Optional[MarketData] = None,
        as_of: Optional[date] = None,
    ) -> LiquidityScore:
        """Score ``bond`` against ``market_data`` (defaults to the bond's
        latest snapshot)."""
        md = market_data if market_data is not None else bond.latest_market_data
        as_of = as_of or date.today()
        score = NEUTRAL_SCORE
        factors: List[str] = []

        if md is not None:
            # ── 1. Recency ──
            if md.last_trade_date is not None:
                days = (as_of - md.last_trade_date).days
                if days <= 1:
                    score += 0.25
                    factors.append("Traded today/yesterday")
                elif days <= 7:
                    score += 0.15
                    factors.append(f"Last trade {days}d ago")
                elif days <= 30:
                    score += 0.05
                    factors.append(f"Last trade {days}d ago")
                else:
                    score -= 0.10
                    factors.append(f"Stale: {days}d since trade")

            # ── 2. Activity ──
            trades = md.trade_count_30d
            if trades:
                if trades >= 20:
                    score += 0.20
                    factors.append(f"Active: {trades} trades/30d")
                elif trades >= 10:
                    score += 0.10
                    factors.append(f"Moderate: {trades} trades/30d")
                elif trades >= 5:
                    score += 0.05
                    factors.append(f"Light: {trades} trades/30d")

            # ── 3. Bid/ask spread ──
            if md.bid_price and md.ask_price:
                mid = (md.ask_price + md.bid_price) / 2
                if mid <= 0:
                    logger.warning(f"Non-positive mid price for {bond.cusip or bond.issuer_name}; spread skipped")
                else:
                    spread_pct = (md.ask_price - md.bid_price) / mid * 100
                    if spread_pct < 0.5:
                        score += 0.15
                        factors.append(f"Tight spread: {spread_pct:.2f}%")
                    elif spread_pct < 1.0:
                        score += 0.05
                        factors.append(f"Normal spread: {spread_pct:.2f}%")
                    else:
                        score -= 0.05
                        factors.append(f"Wide spread: {spread_pct:.2f}%")

        # ── 4. Minimum denomination ──
        if bond.min_denomination <= 5000:
            score += 0.05
            factors.append(f"${bond.min_denomination:,.0f} minimum")
        elif bond.min_denomination >= 25000:
            score -= 0.05
            factors.append(f"High minimum: ${bond.min_denomination / 1000:.0f}k")

        # ── 5. Volume ──
        if md is not None and md.volume_30d and md.volume_30d > 1_000_000:
            score += 0.10
            factors.append(f"High volume: ${md.volume_30d / 1_000_000:.1f}M/30d")

        return LiquidityScore(score=_clamp(score), factors=factors)
