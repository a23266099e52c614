"""
Plain-text explanation of a ranked bond: one summary line plus bullets.
"""

from datetime import date
from typing import List, Optional

from atytw_engine.models import RankedBond, RankExplanation


def _tier(score: float, bands, fallback: str) -> str:
    for floor, label in bands:
        if score >= floor:
            return label
    return fallback


STABILITY_TIERS = ((0.8, "High"), (0.6, "Moderate"))
LIQUIDITY_TIERS = ((0.7, "Good"), (0.5, "Fair"))


def _format_coupon(coupon: float) -> str:
    return f"{coupon:g}"


class ExplanationBuilder:

    def build(self, ranked: RankedBond, as_of: Optional[date] = None) -> RankExplanation:
        as_of = as_of or date.today()
        bond = ranked.bond
        bullets: List[str] = [
            f"After-tax YTW: {ranked.atytw:.2f}%",
            f"Pre-tax YTW: {ranked.pre_tax_ytw:.2f}%",
        ]

        stability = _tier(ranked.stability_score, STABILITY_TIERS, "Lower")
        bullets.append(f"{stability} stability: {ranked.stability_score * 100:.0f}/100")

        liquidity = _tier(ranked.liquidity_score, LIQUIDITY_TIERS, "Limited")
        bullets.append(f"{liquidity} liquidity: {ranked.liquidity_score * 100:.0f}/100")

        latest = bond.latest_market_data
        if latest is not None and latest.last_trade_date is not None:
            days = (as_of - latest.last_trade_date).days
            bullets.append(f"Last traded {'today' if days <= 0 else f'{days}d ago'}")

        rank = ranked.rank if ranked.rank is not None else "N/A"
        summary = f"Rank #{rank}: {bond.issuer_name} {_format_coupon(bond.coupon)}% {bond.maturity.year}"

        return RankExplanation(summary=summary, bullets=bullets, math=ranked.explanation)
