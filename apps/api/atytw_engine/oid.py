"""
OID / market discount evaluation.

A bond bought below par accretes toward 100 by maturity. The de minimis
threshold is par less a quarter point per year to maturity:

    threshold = 100 - 0.25 * years_to_maturity

Below the threshold the annual accretion is charged at 0.37, between the
threshold and par at 0.15. The adjustment is expressed in basis points of
yield. The branch labels (``deminimis=True`` on the 0.37 branch) are kept
as the desk has always reported them.
"""

from datetime import date
from typing import Optional

from atytw_engine.config import (
    DAYS_PER_YEAR,
    DEMINIMIS_QUARTER_POINT,
    OID_DEMINIMIS_MULTIPLIER,
    OID_MARKET_DISCOUNT_MULTIPLIER,
    PAR,
)
from atytw_engine.logging_config import setup_logger
from atytw_engine.models import BondData, OIDResult

logger = setup_logger(__name__)


def years_to_maturity(maturity: date, as_of: Optional[date] = None) -> float:
    as_of = as_of or date.today()
    return (maturity - as_of).days / DAYS_PER_YEAR


def deminimis_threshold(years: float) -> float:
    return PAR - DEMINIMIS_QUARTER_POINT * years


class OIDMarketDiscountEvaluator:
    """Detects discount pricing and sizes the yield adjustment."""

    def evaluate(self, bond: BondData, as_of: Optional[date] = None) -> OIDResult:
        years = years_to_maturity(bond.maturity, as_of)
        threshold = deminimis_threshold(years)

        if bond.price >= PAR:
            return OIDResult(years_to_maturity=years, threshold=threshold)

        # Accretion over zero or negative time is undefined; no adjustment.
        if years <= 0:
            logger.warning(
                f"Bond maturing {bond.maturity.isoformat()} is at or past maturity; "
                f"skipping OID adjustment"
            )
            return OIDResult(years_to_maturity=years, threshold=threshold, matured=True)

        annual_accretion = (PAR - bond.price) / years

        if bond.price < threshold:
            return OIDResult(
                has_oid=True,
                deminimis=True,
                adjustment_bps=annual_accretion * OID_DEMINIMIS_MULTIPLIER * 100,
                years_to_maturity=years,
                threshold=threshold,
            )

        return OIDResult(
            has_oid=True,
            deminimis=False,
            adjustment_bps=annual_accretion * OID_MARKET_DISCOUNT_MULTIPLIER * 100,
            years_to_maturity=years,
            threshold=threshold,
        )
