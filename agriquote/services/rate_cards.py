import logging
from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from agriquote.core.errors import QuoteValidationError, RateCardNotFound, RateCardStoreError, field_error
from agriquote.core.metrics import track_db_operation
from agriquote.models.rate_card import RateCard

logger = logging.getLogger(__name__)


def _check_identifiers(seller_org_id, service_type) -> None:
    errors = []
    if not isinstance(seller_org_id, str) or not seller_org_id:
        errors.append(field_error("seller_org_id", "must be a non-empty string"))
    if not isinstance(service_type, str) or not service_type:
        errors.append(field_error("service_type", "must be a non-empty string"))
    if errors:
        raise QuoteValidationError(errors)


@track_db_operation("select", "rate_cards")
async def find_rate_card(db: AsyncSession, seller_org_id: str, service_type: str) -> Optional[RateCard]:
    _check_identifiers(seller_org_id, service_type)
    q = (
        select(RateCard)
        .where(RateCard.seller_org_id == seller_org_id)
        .where(RateCard.service_type == service_type)
        .limit(1)
    )
    try:
        res = await db.execute(q)
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Rate card lookup failed for {seller_org_id}/{service_type}: {e}")
        raise RateCardStoreError(cause=e) from e
    return res.scalars().first()


async def get_rate_card(db: AsyncSession, seller_org_id: str, service_type: str) -> RateCard:
    rate_card = await find_rate_card(db, seller_org_id, service_type)
    if rate_card is None:
        raise RateCardNotFound(seller_org_id, service_type)
    return rate_card
