"""
ATYTW Engine — Core Dispatcher

ATYTWCalculator is the single entry point. It:
1. Receives BondData + TaxProfile
2. Routes to the bond family's tax treatment (TaxTreatmentResolver)
3. Applies the OID / market discount adjustment
4. Returns ATYTWResult with the explanation trail in computation order
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, List, Optional, Tuple

from atytw_engine.config import MAX_EFFECTIVE_TAX_RATE, NIIT_RATE, PAR
from atytw_engine.logging_config import setup_logger
from atytw_engine.models import (
    AfterTaxComparison,
    ATYTWResult,
    BondData,
    BondType,
    TaxBreakdown,
    TaxProfile,
)
from atytw_engine.oid import OIDMarketDiscountEvaluator

logger = setup_logger(__name__)


# ─────────────────────────────────────────────
# Abstract Treatment
# ─────────────────────────────────────────────

class AbstractTaxTreatment(ABC):
    """Base class for bond-family tax rules."""

    BOND_TYPES: Tuple[BondType, ...] = ()

    @abstractmethod
    def resolve(self, bond: BondData, profile: TaxProfile) -> Tuple[TaxBreakdown, List[str]]:
        """Return the marginal rates that apply to this bond's interest, plus
        one explanation line per rule applied."""
        pass

    # ── Shared layers ──

    @staticmethod
    def _local_rate(profile: TaxProfile) -> float:
        return profile.local_rate or 0.0

    @staticmethod
    def _niit(profile: TaxProfile) -> float:
        return NIIT_RATE if profile.niit_applies else 0.0

    @staticmethod
    def _state_label(profile: TaxProfile) -> str:
        return "State/local" if profile.local_rate else "State"


def effective_tax_rate(breakdown: TaxBreakdown) -> float:
    """Combined marginal rate. AMT only counts where it exceeds the regular
    federal rate; the total is capped below 1."""
    total = (
        breakdown.federal
        + breakdown.state
        + breakdown.local
        + max(breakdown.amt - breakdown.federal, 0.0)
        + breakdown.niit
    )
    return min(max(total, 0.0), MAX_EFFECTIVE_TAX_RATE)


# ─────────────────────────────────────────────
# Resolver (Factory / Dispatcher)
# ─────────────────────────────────────────────

class TaxTreatmentResolver:
    """
    Maps (bond type, tax profile, in-state flag) to a TaxBreakdown.
    Every BondType must have a treatment; a gap is a programming error and
    fails at construction rather than falling through to a default.
    """

    def __init__(self):
        # Lazy-import treatments to avoid circular imports
        from atytw_engine.treatments.treasury import TreasuryTreatment
        from atytw_engine.treatments.municipal import MunicipalTreatment
        from atytw_engine.treatments.taxable import (
            AgencyTreatment,
            CorporateTreatment,
            TaxableMuniTreatment,
        )

        self._treatments: Dict[BondType, AbstractTaxTreatment] = {}
        for treatment in (
            TreasuryTreatment(),
            MunicipalTreatment(),
            CorporateTreatment(),
            AgencyTreatment(),
            TaxableMuniTreatment(),
        ):
            for bond_type in treatment.BOND_TYPES:
                self._treatments[bond_type] = treatment

        missing = [t.value for t in BondType if t not in self._treatments]
        if missing:
            raise RuntimeError(f"No tax treatment registered for: {', '.join(missing)}")

    def resolve(self, bond: BondData, profile: TaxProfile) -> Tuple[TaxBreakdown, List[str]]:
        return self._treatments[bond.bond_type].resolve(bond, profile)


# ─────────────────────────────────────────────
# Calculator
# ─────────────────────────────────────────────

class ATYTWCalculator:
    """After-tax yield to worst for a single bond."""

    def __init__(
        self,
        resolver: Optional[TaxTreatmentResolver] = None,
        oid_evaluator: Optional[OIDMarketDiscountEvaluator] = None,
    ):
        self.resolver = resolver or TaxTreatmentResolver()
        self.oid_evaluator = oid_evaluator or OIDMarketDiscountEvaluator()

    def compute(
        self,
        bond: BondData,
        profile: TaxProfile,
        as_of: Optional[date] = None,
    ) -> ATYTWResult:
        """
        Compute ATYTW.

        atytw = ytw * (1 - effective_tax_rate) - oid_bps / 10000
        """
        pre_tax_ytw = bond.ytw
        breakdown, explanation = self.resolver.resolve(bond, profile)
        eff_rate = effective_tax_rate(breakdown)

        oid_adjustment = 0.0
        if bond.price < PAR:
            oid = self.oid_evaluator.evaluate(bond, as_of=as_of)
            if oid.matured:
                explanation.append("Bond at or past maturity: OID adjustment skipped")
            elif oid.has_oid:
                oid_adjustment = oid.adjustment_bps
                kind = "De minimis" if oid.deminimis else "Market discount"
                explanation.append(
                    f"OID detected (price {bond.price:.2f}): {kind} adjustment {oid_adjustment:.0f} bps"
                )
        elif bond.price > PAR:
            explanation.append(
                f"Premium bond (price {bond.price:.2f}): Amortizable premium reduces taxable income"
            )

        atytw = pre_tax_ytw * (1 - eff_rate) - (oid_adjustment / 10000)

        explanation.append(f"Effective tax rate: {eff_rate * 100:.1f}%")
        explanation.append(f"After-tax YTW: {atytw:.3f}%")

        logger.debug(
            f"ATYTW {bond.bond_type.value} ytw={pre_tax_ytw:.3f} rate={eff_rate:.4f} "
            f"oid={oid_adjustment:.2f}bps -> {atytw:.4f}"
        )

        return ATYTWResult(
            atytw=atytw,
            pre_tax_ytw=pre_tax_ytw,
            effective_tax_rate=eff_rate,
            tax_breakdown=breakdown,
            oid_adjustment=oid_adjustment,
            explanation=explanation,
        )

    def compare_after_tax_equivalent(
        self,
        home_bond: BondData,
        national_bond: BondData,
        profile: TaxProfile,
        as_of: Optional[date] = None,
    ) -> AfterTaxComparison:
        """Home-state bond vs national bond for the same investor."""
        home = self.compute(home_bond, profile, as_of=as_of)
        national = self.compute(national_bond, profile, as_of=as_of)
        advantage = home.atytw - national.atytw

        if abs(advantage) < 0.05:
            recommendation = "Equivalent after-tax yields"
        elif advantage > 0:
            recommendation = f"Home-state bond yields {advantage * 100:.0f} bps more after-tax"
        else:
            recommendation = f"National bond yields {abs(advantage) * 100:.0f} bps more after-tax"

        return AfterTaxComparison(
            home_atytw=home.atytw,
            national_atytw=national.atytw,
            advantage=advantage,
            recommendation=recommendation,
        )


def tax_equivalent_yield(tax_exempt_yield: float, combined_rate: float) -> float:
    """Taxable yield needed to match a tax-exempt yield at ``combined_rate``."""
    rate = min(max(combined_rate, 0.0), MAX_EFFECTIVE_TAX_RATE)
    return tax_exempt_yield / (1 - rate)
