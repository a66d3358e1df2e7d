import math
from numbers import Real
from typing import Optional

from agriquote.core.errors import QuoteValidationError, field_error
from agriquote.schemas.quote import QuoteBreakdown, QuoteRequest, RateCardSnapshot
from agriquote.services.multipliers import month_key, resolve_multiplier
from agriquote.utils.rounding import round_cents

TOO_LARGE = "is too large to price"


def _is_finite(value) -> bool:
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and _is_finite(value)


def validate_quote_inputs(area_ha, distance_km, month) -> list[dict]:
    errors = []
    if not _is_number(area_ha) or area_ha <= 0:
        errors.append(field_error("area_ha", "must be a number greater than 0"))
    if not _is_number(distance_km) or distance_km < 0:
        errors.append(field_error("distance_km", "must be a number greater than or equal to 0"))
    if month is not None and (
        isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12
    ):
        errors.append(field_error("month", "must be an integer between 1 and 12"))
    return errors


def compute_quote(
    rate_card: RateCardSnapshot,
    area_ha: float,
    distance_km: float = 0.0,
    month: Optional[int] = None,
    risk_key: Optional[str] = None,
) -> QuoteBreakdown:
    """Price a job against a rate card.

    Every intermediate amount is rounded to whole cents before the next step
    and exposed on the returned breakdown. The minimum charge is applied last.
    """
    errors = validate_quote_inputs(area_ha, distance_km, month)
    if errors:
        raise QuoteValidationError(errors)

    base_amount = rate_card.base_rate_per_ha_cents * area_ha
    travel_amount = rate_card.travel_rate_per_km_cents * distance_km
    errors = []
    if not _is_finite(base_amount):
        errors.append(field_error("area_ha", TOO_LARGE))
    if not _is_finite(travel_amount):
        errors.append(field_error("distance_km", TOO_LARGE))
    if errors:
        raise QuoteValidationError(errors)

    base_cents = round_cents(base_amount)
    travel_cents = round_cents(travel_amount)
    subtotal_cents = base_cents + travel_cents

    seasonal_mult = resolve_multiplier(rate_card.seasonal_multipliers_json, month_key(month))
    risk_mult = resolve_multiplier(rate_card.risk_multipliers_json, risk_key)

    try:
        multiplied_amount = subtotal_cents * seasonal_mult * risk_mult
    except OverflowError:
        multiplied_amount = math.inf
    if not math.isfinite(multiplied_amount):
        raise QuoteValidationError([field_error("area_ha", TOO_LARGE)])
    multiplied_cents = round_cents(multiplied_amount)
    total_cents = max(rate_card.min_charge_cents, multiplied_cents)

    return QuoteBreakdown(
        base_cents=base_cents,
        travel_cents=travel_cents,
        subtotal_cents=subtotal_cents,
        seasonal_mult=seasonal_mult,
        risk_mult=risk_mult,
        multiplied_cents=multiplied_cents,
        min_charge=rate_card.min_charge_cents,
        total_cents=total_cents,
    )


def calculate_price(rate_card: RateCardSnapshot, req: QuoteRequest) -> QuoteBreakdown:
    return compute_quote(
        rate_card,
        area_ha=req.area_ha,
        distance_km=req.distance_km,
        month=req.month,
        risk_key=req.risk_key,
    )
