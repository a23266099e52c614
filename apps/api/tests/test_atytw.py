"""
ATYTW calculator: end-to-end scenarios, explanation trail ordering and the
home-state vs national comparison.
"""

import math
from datetime import timedelta

import pytest

from atytw_engine.core import ATYTWCalculator, tax_equivalent_yield
from atytw_engine.models import BondType
from atytw_engine.oid import years_to_maturity

from factories import AS_OF, make_bond, make_profile


def test_treasury_scenario():
    maturity = AS_OF + timedelta(days=1169)  # ~3.2 years
    bond = make_bond(
        bond_type=BondType.TREASURY,
        state=None,
        ytw=4.75,
        price=98.5,
        coupon=4.5,
        maturity=maturity,
        federal_tax_exempt=False,
        state_tax_exempt=True,
    )
    profile = make_profile(federal_rate=0.24, niit_applies=False)

    result = ATYTWCalculator().compute(bond, profile, as_of=AS_OF)

    assert result.tax_breakdown.federal == 0.24
    assert result.tax_breakdown.state == 0.0
    assert result.tax_breakdown.local == 0.0
    assert result.effective_tax_rate == pytest.approx(0.24)

    years = years_to_maturity(maturity, AS_OF)
    # 98.5 is under the ~99.2 threshold -> 0.37 branch
    expected_bps = 1.5 / years * 0.37 * 100
    assert result.oid_adjustment == pytest.approx(expected_bps)
    assert result.atytw == pytest.approx(4.75 * 0.76 - expected_bps / 10000)
    assert result.atytw < 4.75 * 0.76


def test_treasury_explanation_is_in_computation_order():
    bond = make_bond(
        bond_type=BondType.TREASURY,
        ytw=4.75,
        price=98.5,
        maturity=AS_OF + timedelta(days=1169),
        federal_tax_exempt=False,
    )
    result = ATYTWCalculator().compute(bond, make_profile(federal_rate=0.24), as_of=AS_OF)

    assert result.explanation[0] == "Treasury: Federal taxable, state/local exempt"
    assert result.explanation[1].startswith("OID detected (price 98.50): De minimis adjustment")
    assert result.explanation[2] == "Effective tax rate: 24.0%"
    assert result.explanation[3] == f"After-tax YTW: {result.atytw:.3f}%"


def test_in_state_exempt_muni_at_par_keeps_full_yield():
    bond = make_bond(state="VA", price=100.0, ytw=3.37, federal_tax_exempt=True, state_tax_exempt=True)
    result = ATYTWCalculator().compute(bond, make_profile(state="VA"), as_of=AS_OF)

    assert result.effective_tax_rate == 0
    assert result.atytw == result.pre_tax_ytw
    assert result.oid_adjustment == 0.0
    assert list(result.explanation) == [
        "Tax-exempt municipal: Federal exempt",
        "In-state muni: State exempt",
        "Effective tax rate: 0.0%",
        "After-tax YTW: 3.370%",
    ]


def test_premium_bond_adds_note_without_adjustment():
    bond = make_bond(bond_type=BondType.CORPORATE, price=104.25, ytw=5.0)
    result = ATYTWCalculator().compute(bond, make_profile(), as_of=AS_OF)

    assert result.oid_adjustment == 0.0
    assert "Premium bond (price 104.25): Amortizable premium reduces taxable income" in result.explanation
    assert result.atytw == pytest.approx(5.0 * (1 - 0.24 - 0.0575))


def test_market_discount_branch_is_labelled():
    bond = make_bond(bond_type=BondType.AGENCY, price=99.5, maturity=AS_OF + timedelta(days=1461))
    result = ATYTWCalculator().compute(bond, make_profile(), as_of=AS_OF)

    assert result.oid_adjustment == pytest.approx(0.5 / 4.0 * 0.15 * 100)
    assert any("Market discount adjustment" in line for line in result.explanation)


def test_amt_muni_pays_amt_excess_plus_out_of_state_tax():
    bond = make_bond(state="NY", amt=True)
    profile = make_profile(state="VA", amt_applies=True, federal_rate=0.24, state_rate=0.0575)

    result = ATYTWCalculator().compute(bond, profile, as_of=AS_OF)

    # federal exempt, so the full 28% AMT counts
    assert result.effective_tax_rate == pytest.approx(0.28 + 0.0575)


def test_matured_bond_stays_finite():
    bond = make_bond(bond_type=BondType.CORPORATE, price=97.0, maturity=AS_OF)
    result = ATYTWCalculator().compute(bond, make_profile(), as_of=AS_OF)

    assert math.isfinite(result.atytw)
    assert result.oid_adjustment == 0.0
    assert "Bond at or past maturity: OID adjustment skipped" in result.explanation


def test_compute_does_not_mutate_inputs():
    bond = make_bond(price=98.0, maturity=AS_OF + timedelta(days=2000))
    before = bond.model_dump()
    calculator = ATYTWCalculator()

    first = calculator.compute(bond, make_profile(), as_of=AS_OF)
    second = calculator.compute(bond, make_profile(), as_of=AS_OF)

    assert bond.model_dump() == before
    assert first == second


def test_compare_home_state_vs_national():
    profile = make_profile(state="VA", federal_rate=0.32, state_rate=0.0575)
    home = make_bond(state="VA", ytw=3.40)
    national = make_bond(state="TX", ytw=3.60)

    comparison = ATYTWCalculator().compare_after_tax_equivalent(home, national, profile, as_of=AS_OF)

    # national loses 5.75% of 3.60 to VA tax -> 3.393
    assert comparison.home_atytw == pytest.approx(3.40)
    assert comparison.national_atytw == pytest.approx(3.60 * (1 - 0.0575))
    assert comparison.advantage == pytest.approx(3.40 - 3.60 * (1 - 0.0575))
    assert comparison.recommendation == "Equivalent after-tax yields"


def test_compare_reports_bps_advantage():
    profile = make_profile(state="VA")
    home = make_bond(state="VA", ytw=3.50)
    national = make_bond(state="TX", ytw=3.00)

    comparison = ATYTWCalculator().compare_after_tax_equivalent(home, national, profile, as_of=AS_OF)
    assert comparison.recommendation == "Home-state bond yields 67 bps more after-tax"

    reverse = ATYTWCalculator().compare_after_tax_equivalent(national, home, profile, as_of=AS_OF)
    assert reverse.recommendation == "National bond yields 67 bps more after-tax"


def test_tax_equivalent_yield():
    assert tax_equivalent_yield(3.0, 0.25) == pytest.approx(4.0)
    assert tax_equivalent_yield(3.0, 0.0) == 3.0
    assert math.isfinite(tax_equivalent_yield(3.0, 1.0))
