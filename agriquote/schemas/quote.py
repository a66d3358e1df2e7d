from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Optional


class QuoteRequest(BaseModel):
    # JSON numbers only: numeric strings and booleans are rejected, ints are accepted as floats
    model_config = ConfigDict(extra="ignore", strict=True)

    seller_org_id: str = Field(min_length=1)
    service_type: str = Field(min_length=1)
    area_ha: float = Field(gt=0, allow_inf_nan=False)
    distance_km: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    risk_key: Optional[str] = None
    month: Optional[int] = Field(default=None, ge=1, le=12)


class RateCardSnapshot(BaseModel):
    """Frozen view of a rate card used as input to a single computation."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: Optional[int] = None
    seller_org_id: str
    service_type: str
    base_rate_per_ha_cents: int = 0
    min_charge_cents: int = 0
    travel_rate_per_km_cents: int = 0
    seasonal_multipliers_json: Optional[Any] = None
    risk_multipliers_json: Optional[Any] = None


class QuoteBreakdown(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    base_cents: int
    travel_cents: int
    subtotal_cents: int
    seasonal_mult: float
    risk_mult: float
    multiplied_cents: int
    min_charge: int
    total_cents: int


class PricingSnapshot(BaseModel):
    input: dict
    rate_card_id: Optional[int]
    rate_card: dict
    breakdown: QuoteBreakdown
    version: str
    computed_at: str


class QuoteEstimateResponse(BaseModel):
    currency: str
    total_estimated_cents: int
    breakdown: QuoteBreakdown
    pricing_snapshot_json: PricingSnapshot
