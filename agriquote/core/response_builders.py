from agriquote.models.rate_card import RateCard
from agriquote.schemas.rate_card import RateCardOut


def build_rate_card_response(rate_card: RateCard) -> RateCardOut:
    return RateCardOut(
        id=rate_card.id,
        seller_org_id=rate_card.seller_org_id,
        service_type=rate_card.service_type,
        base_rate_per_ha_cents=rate_card.base_rate_per_ha_cents,
        min_charge_cents=rate_card.min_charge_cents,
        travel_rate_per_km_cents=rate_card.travel_rate_per_km_cents,
        hourly_operator_rate_cents=rate_card.hourly_operator_rate_cents,
        seasonal_multipliers_json=rate_card.seasonal_multipliers_json,
        risk_multipliers_json=rate_card.risk_multipliers_json,
        created_at=rate_card.created_at,
        updated_at=rate_card.updated_at,
    )


def build_rate_card_response_list(rate_cards: list) -> list:
    return [build_rate_card_response(rate_card) for rate_card in rate_cards]
