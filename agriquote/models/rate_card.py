from sqlalchemy import Column, String, Integer, JSON, UniqueConstraint
from agriquote.models.base import BaseModel


class RateCard(BaseModel):
    __tablename__ = "rate_cards"
    __table_args__ = (
        UniqueConstraint("seller_org_id", "service_type", name="uq_rate_cards_seller_service"),
    )

    seller_org_id = Column(String(64), nullable=False, index=True)
    service_type = Column(String(64), nullable=False)

    base_rate_per_ha_cents = Column(Integer, nullable=False, default=0)
    min_charge_cents = Column(Integer, nullable=False, default=0)
    travel_rate_per_km_cents = Column(Integer, nullable=False, default=0)
    hourly_operator_rate_cents = Column(Integer, nullable=True)

    # Free-form seller JSON, read leniently by the multiplier resolver
    seasonal_multipliers_json = Column(JSON, nullable=True)
    risk_multipliers_json = Column(JSON, nullable=True)
