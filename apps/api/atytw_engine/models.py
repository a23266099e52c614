"""
ATYTW Engine — Data Models

After-tax bond evaluation needs to know:
1. Bond family (Treasury, Municipal, Corporate, Agency, Taxable Muni)
2. Investor Profile (state of residence, filing status, marginal rates)
3. Tax flags on the bond (federal/state exemption, AMT/private activity)
4. Pricing (price vs par drives OID / premium treatment)
5. Issuer and market snapshot (stability + liquidity scoring)

Every model here is an immutable value object: computations build new
results, nothing is patched in place.
"""

from datetime import date
from enum import Enum
from typing import Optional, Any, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ─────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────

class BondType(str, Enum):
    """Bond family used to route tax treatment."""
    TREASURY = "TREASURY"
    MUNICIPAL = "MUNICIPAL"
    CORPORATE = "CORPORATE"
    AGENCY = "AGENCY"
    TAXABLE_MUNI = "TAXABLE_MUNI"


class FilingStatus(str, Enum):
    """US federal filing status."""
    SINGLE = "SINGLE"
    MARRIED_JOINT = "MARRIED_JOINT"
    MARRIED_SEPARATE = "MARRIED_SEPARATE"
    HEAD_OF_HOUSEHOLD = "HEAD_OF_HOUSEHOLD"


class IssuerType(str, Enum):
    """Issuer classification. MUNICIPALITY and COUNTY issue GO debt."""
    MUNICIPALITY = "MUNICIPALITY"
    COUNTY = "COUNTY"
    STATE = "STATE"
    AUTHORITY = "AUTHORITY"
    SCHOOL_DISTRICT = "SCHOOL_DISTRICT"
    CORPORATE = "CORPORATE"
    FEDERAL = "FEDERAL"
    OTHER = "OTHER"


GENERAL_OBLIGATION_ISSUERS = frozenset({IssuerType.MUNICIPALITY, IssuerType.COUNTY})


class _ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True)


def _upper_state(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().upper()
    return value or None


# ─────────────────────────────────────────────
# Input Models
# ─────────────────────────────────────────────

class TaxProfile(_ValueObject):
    """Investor-level tax profile. Rates are decimals (0.24 = 24%)."""
    state: str = Field(..., description="Two-letter state of residence: VA, CA, NY, ...")
    filing_status: FilingStatus = Field(default=FilingStatus.SINGLE)
    federal_rate: float = Field(..., ge=0.0, le=1.0)
    state_rate: float = Field(..., ge=0.0, le=1.0)
    local_rate: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    amt_applies: bool = Field(default=False, description="Investor is subject to AMT")
    niit_applies: bool = Field(default=False, description="Investor is above the NIIT threshold")

    @field_validator("state")
    @classmethod
    def _normalise_state(cls, v: str) -> str:
        return v.strip().upper()


class BondData(_ValueObject):
    """Tax-relevant bond terms. ``ytw`` is in percent units (4.75 = 4.75%)."""
    bond_type: BondType
    state: Optional[str] = Field(default=None, description="Issuing state (municipals)")
    ytw: float = Field(..., description="Pre-tax yield to worst, percent")
    price: float = Field(..., description="Clean price per 100 par")
    coupon: float = Field(..., description="Coupon rate, percent")
    maturity: date
    federal_tax_exempt: bool = Field(default=False)
    state_tax_exempt: bool = Field(default=False)
    amt: bool = Field(default=False, description="Private-activity bond subject to AMT")
    callable: Optional[bool] = Field(default=None)
    call_schedule: Optional[Any] = Field(default=None, description="Opaque, passed through")

    @field_validator("state")
    @classmethod
    def _normalise_state(cls, v: Optional[str]) -> Optional[str]:
        return _upper_state(v)


class Issuer(_ValueObject):
    name: str
    issuer_type: IssuerType = Field(default=IssuerType.OTHER)
    state: Optional[str] = None


class MarketData(_ValueObject):
    """Latest market snapshot for a bond. Every field may be missing."""
    as_of: Optional[date] = None
    price: Optional[float] = None
    ytw: Optional[float] = None
    duration: Optional[float] = Field(default=None, description="Modified duration, years")
    bid_price: Optional[float] = None
    ask_price: Optional[float] = None
    trade_count_30d: Optional[int] = None
    volume_30d: Optional[float] = Field(default=None, description="30-day dollar volume")
    last_trade_date: Optional[date] = None


class Bond(BondData):
    """A screenable bond: tax terms plus issuer, structure and market data."""
    cusip: str = Field(default="")
    issuer_name: str = Field(default="")
    sector: Optional[str] = None
    rating_bucket: Optional[str] = Field(default=None, description="AAA, AA+, ... BBB-")
    insured: bool = Field(default=False)
    insurer: Optional[str] = None
    underlying_rating: Optional[str] = None
    min_denomination: float = Field(default=5000.0)
    issuer: Optional[Issuer] = None
    market_data: Tuple[MarketData, ...] = Field(
        default=(),
        description="Snapshots, latest first",
    )

    @property
    def latest_market_data(self) -> Optional[MarketData]:
        return self.market_data[0] if self.market_data else None


class UserSettings(_ValueObject):
    """Screening preferences applied before ranking."""
    rating_floor: Optional[str] = Field(default=None, description="Lowest acceptable rating bucket")
    max_duration: Optional[float] = Field(default=None, gt=0)
    price_floor: Optional[float] = Field(default=None)
    exclude_callable: bool = Field(default=False)
    sectors: Tuple[str, ...] = Field(default=(), description="Allowed sectors; empty = any")


# ─────────────────────────────────────────────
# Output Models
# ─────────────────────────────────────────────

class TaxBreakdown(_ValueObject):
    """Per-layer marginal rates applied to a bond's interest."""
    federal: float = Field(default=0.0, ge=0.0, le=1.0)
    state: float = Field(default=0.0, ge=0.0, le=1.0)
    local: float = Field(default=0.0, ge=0.0, le=1.0)
    amt: float = Field(default=0.0, ge=0.0, le=1.0)
    niit: float = Field(default=0.0, ge=0.0, le=1.0)


class OIDResult(_ValueObject):
    """Outcome of the discount check.

    ``deminimis`` keeps the labelling the desk has always used: True on the
    0.37 branch (price under the quarter-point threshold).
    """
    has_oid: bool = False
    deminimis: bool = False
    adjustment_bps: float = 0.0
    years_to_maturity: float = 0.0
    threshold: float = 100.0
    matured: bool = False


class ATYTWResult(_ValueObject):
    atytw: float
    pre_tax_ytw: float
    effective_tax_rate: float
    tax_breakdown: TaxBreakdown
    oid_adjustment: float = Field(default=0.0, description="Basis points")
    explanation: Tuple[str, ...] = Field(default=())


class StabilityScore(_ValueObject):
    score: float = Field(..., ge=0.0, le=1.0)
    factors: Tuple[str, ...] = Field(default=())


class LiquidityScore(_ValueObject):
    score: float = Field(..., ge=0.0, le=1.0)
    factors: Tuple[str, ...] = Field(default=())


class RankedBond(_ValueObject):
    """A scored candidate. ``rank`` is only ever set by the ranking engine."""
    bond: Bond
    atytw: float
    pre_tax_ytw: float
    stability_score: float
    liquidity_score: float
    rank: Optional[int] = Field(default=None, ge=1)
    explanation: Tuple[str, ...] = Field(default=())

    @property
    def duration(self) -> Optional[float]:
        latest = self.bond.latest_market_data
        return latest.duration if latest else None


class RankExplanation(_ValueObject):
    summary: str
    bullets: Tuple[str, ...] = Field(default=())
    math: Tuple[str, ...] = Field(default=(), description="ATYTW explanation trail")


class AfterTaxComparison(_ValueObject):
    """Home-state vs national bond, after tax."""
    home_atytw: float
    national_atytw: float
    advantage: float = Field(..., description="home - national, percent")
    recommendation: str
