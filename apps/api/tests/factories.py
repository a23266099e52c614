"""Sample bonds, profiles and candidates shared by the test modules."""

from datetime import date, timedelta

from atytw_engine.models import (
    Bond,
    BondType,
    FilingStatus,
    MarketData,
    RankedBond,
    TaxProfile,
)

AS_OF = date(2026, 1, 15)


def make_profile(**overrides) -> TaxProfile:
    data = {
        "state": "VA",
        "filing_status": FilingStatus.MARRIED_JOINT,
        "federal_rate": 0.24,
        "state_rate": 0.0575,
    }
    data.update(overrides)
    return TaxProfile(**data)


def make_bond(**overrides) -> Bond:
    data = {
        "bond_type": BondType.MUNICIPAL,
        "cusip": "927793AA1",
        "issuer_name": "Virginia Public School Authority",
        "state": "VA",
        "ytw": 3.50,
        "price": 100.0,
        "coupon": 4.0,
        "maturity": AS_OF + timedelta(days=3653),
        "federal_tax_exempt": True,
        "state_tax_exempt": True,
    }
    data.update(overrides)
    return Bond(**data)


def make_candidate(
    cusip: str,
    atytw: float,
    liquidity: float = 0.6,
    stability: float = 0.7,
    duration=None,
) -> RankedBond:
    market_data = [MarketData(duration=duration)] if duration is not None else []
    bond = make_bond(cusip=cusip, issuer_name=f"Issuer {cusip}", market_data=market_data)
    return RankedBond(
        bond=bond,
        atytw=atytw,
        pre_tax_ytw=atytw,
        stability_score=stability,
        liquidity_score=liquidity,
    )
