"""
ATYTW Engine — Fully Taxable Treatments

Corporate and Agency interest is taxed at every layer, including NIIT.
Taxable municipals are taxed federally and by the state, but are kept
outside NIIT.
"""

from typing import List, Tuple

from atytw_engine.core import AbstractTaxTreatment
from atytw_engine.models import BondData, BondType, TaxBreakdown, TaxProfile


class FullyTaxableTreatment(AbstractTaxTreatment):
    """Federal + State + Local, optionally NIIT."""

    LABEL: str = ""
    NIIT_ELIGIBLE: bool = True

    def resolve(self, bond: BondData, profile: TaxProfile) -> Tuple[TaxBreakdown, List[str]]:
        explanation = [f"{self.LABEL}: Fully taxable"]
        niit = self._niit(profile) if self.NIIT_ELIGIBLE else 0.0
        if niit:
            explanation.append("NIIT: +3.8% on investment income")
        breakdown = TaxBreakdown(
            federal=profile.federal_rate,
            state=profile.state_rate,
            local=self._local_rate(profile),
            niit=niit,
        )
        return breakdown, explanation


class CorporateTreatment(FullyTaxableTreatment):
    BOND_TYPES = (BondType.CORPORATE,)
    LABEL = "Corporate"


class AgencyTreatment(FullyTaxableTreatment):
    BOND_TYPES = (BondType.AGENCY,)
    LABEL = "Agency"


class TaxableMuniTreatment(FullyTaxableTreatment):
    BOND_TYPES = (BondType.TAXABLE_MUNI,)
    LABEL = "Taxable municipal"
    NIIT_ELIGIBLE = False
