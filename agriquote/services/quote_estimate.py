"""Quote estimation: rate card lookup, price computation and pricing snapshot."""
import logging
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession

from agriquote.core.config import settings
from agriquote.core.metrics import quote_total_cents
from agriquote.schemas.quote import (
    PricingSnapshot,
    QuoteBreakdown,
    QuoteEstimateResponse,
    QuoteRequest,
    RateCardSnapshot,
)
from agriquote.services.pricing import calculate_price
from agriquote.services.rate_cards import get_rate_card

logger = logging.getLogger(__name__)


def build_snapshot(req: QuoteRequest, rate_card: RateCardSnapshot, breakdown: QuoteBreakdown) -> PricingSnapshot:
    """Everything needed to reproduce the quote after the rate card changes."""
    return PricingSnapshot(
        input=req.model_dump(),
        rate_card_id=rate_card.id,
        rate_card={
            "base_rate_per_ha_cents": rate_card.base_rate_per_ha_cents,
            "min_charge_cents": rate_card.min_charge_cents,
            "travel_rate_per_km_cents": rate_card.travel_rate_per_km_cents,
            "seasonal_multipliers_json": rate_card.seasonal_multipliers_json,
            "risk_multipliers_json": rate_card.risk_multipliers_json,
        },
        breakdown=breakdown,
        version=settings.PRICING_VERSION,
        computed_at=datetime.now(timezone.utc).isoformat(),
    )


def build_estimate(req: QuoteRequest, rate_card: RateCardSnapshot) -> QuoteEstimateResponse:
    breakdown = calculate_price(rate_card, req)
    return QuoteEstimateResponse(
        currency=settings.PRICING_CURRENCY,
        total_estimated_cents=breakdown.total_cents,
        breakdown=breakdown,
        pricing_snapshot_json=build_snapshot(req, rate_card, breakdown),
    )


async def estimate_quote(db: AsyncSession, req: QuoteRequest) -> QuoteEstimateResponse:
    row = await get_rate_card(db, req.seller_org_id, req.service_type)
    rate_card = RateCardSnapshot.model_validate(row)
    result = build_estimate(req, rate_card)

    quote_total_cents.labels(service_type=req.service_type).observe(result.total_estimated_cents)
    logger.info(
        f"Quote for {req.seller_org_id}/{req.service_type}: "
        f"{result.total_estimated_cents} {result.currency} (rate card {rate_card.id})"
    )
    return result
