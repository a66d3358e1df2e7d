from pydantic import BaseModel, Field
from typing import Any, Optional
from datetime import datetime


class RateCardCreate(BaseModel):
    seller_org_id: str = Field(min_length=1, max_length=64)
    service_type: str = Field(min_length=1, max_length=64)
    base_rate_per_ha_cents: int = Field(ge=0)
    min_charge_cents: int = Field(ge=0)
    travel_rate_per_km_cents: int = Field(ge=0)
    hourly_operator_rate_cents: Optional[int] = Field(default=None, ge=0)
    seasonal_multipliers_json: dict[str, Any] = Field(default_factory=dict)
    risk_multipliers_json: dict[str, Any] = Field(default_factory=dict)


class RateCardUpdate(BaseModel):
    base_rate_per_ha_cents: Optional[int] = Field(default=None, ge=0)
    min_charge_cents: Optional[int] = Field(default=None, ge=0)
    travel_rate_per_km_cents: Optional[int] = Field(default=None, ge=0)
    hourly_operator_rate_cents: Optional[int] = Field(default=None, ge=0)
    seasonal_multipliers_json: Optional[dict[str, Any]] = None
    risk_multipliers_json: Optional[dict[str, Any]] = None


class RateCardOut(BaseModel):
    id: int
    seller_org_id: str
    service_type: str
    base_rate_per_ha_cents: int
    min_charge_cents: int
    travel_rate_per_km_cents: int
    hourly_operator_rate_cents: Optional[int] = None
    seasonal_multipliers_json: Optional[Any] = None
    risk_multipliers_json: Optional[Any] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
