"""
ATYTW Engine — Municipal Treatment

Municipal interest:
- Federal: exempt unless the bond is flagged federally taxable
- State/Local: exempt only for an in-state bond that is also state-exempt
- AMT: private-activity bonds charged at 28% for investors subject to AMT
  (only the excess over the regular federal rate counts, see
  ``effective_tax_rate``)
- NIIT: never applies to municipal interest
"""

from typing import List, Tuple

from atytw_engine.config import AMT_RATE
from atytw_engine.core import AbstractTaxTreatment
from atytw_engine.models import BondData, BondType, TaxBreakdown, TaxProfile


class MunicipalTreatment(AbstractTaxTreatment):
    BOND_TYPES = (BondType.MUNICIPAL,)

    def resolve(self, bond: BondData, profile: TaxProfile) -> Tuple[TaxBreakdown, List[str]]:
        explanation: List[str] = []
        federal = state = local = amt = 0.0
        in_state = bond.state == profile.state
        label = self._state_label(profile)

        # ── 1. Federal ──
        if not bond.federal_tax_exempt:
            federal = profile.federal_rate
            explanation.append("Taxable municipal: Federal taxable")
        else:
            explanation.append("Tax-exempt municipal: Federal exempt")

        # ── 2. AMT (private activity) ──
        if bond.amt and profile.amt_applies:
            amt = AMT_RATE
            explanation.append("AMT applies to this private activity bond")

        # ── 3. State / Local ──
        if not in_state:
            state = profile.state_rate
            local = self._local_rate(profile)
            explanation.append(f"Out-of-state muni: {label} taxable")
        elif not bond.state_tax_exempt:
            state = profile.state_rate
            local = self._local_rate(profile)
            explanation.append(f"In-state muni without state exemption: {label} taxable")
        else:
            explanation.append(f"In-state muni: {label} exempt")

        return TaxBreakdown(federal=federal, state=state, local=local, amt=amt), explanation
