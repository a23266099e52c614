"""
ATYTW Engine — Treasury Treatment

US Treasury interest:
- Federal: ordinary income at the investor's marginal rate
- State/Local: exempt by statute (31 U.S.C. 3124)
- NIIT: +3.8% above the threshold
"""

from typing import List, Tuple

from atytw_engine.core import AbstractTaxTreatment
from atytw_engine.models import BondData, BondType, TaxBreakdown, TaxProfile


class TreasuryTreatment(AbstractTaxTreatment):
    BOND_TYPES = (BondType.TREASURY,)

    def resolve(self, bond: BondData, profile: TaxProfile) -> Tuple[TaxBreakdown, List[str]]:
        explanation = ["Treasury: Federal taxable, state/local exempt"]
        niit = self._niit(profile)
        if niit:
            explanation.append("NIIT: +3.8% on investment income")
        return TaxBreakdown(federal=profile.federal_rate, niit=niit), explanation
