from fastapi import APIRouter, Depends, Header, HTTPException, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import Optional, List
import logging

from agriquote.db.session import get_db
from agriquote.models.rate_card import RateCard
from agriquote.schemas.rate_card import RateCardCreate, RateCardUpdate, RateCardOut
from agriquote.core.security import Principal, get_current_principal
from agriquote.core.audit_log import log_audit
from agriquote.core.enums import AuditAction
from agriquote.core.rate_limit import check_rate_limit
from agriquote.core.auth_utils import check_org_access, check_not_found
from agriquote.core.response_builders import build_rate_card_response, build_rate_card_response_list
from agriquote.core.metrics import track_db_operation
from agriquote.utils.idempotency import get_idempotent, set_idempotent

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/rate-cards", tags=["rate-cards"])

# Columns that cannot be cleared by sending null
REQUIRED_RATE_FIELDS = {"base_rate_per_ha_cents", "min_charge_cents", "travel_rate_per_km_cents"}


@track_db_operation("select", "rate_cards")
async def _load(db: AsyncSession, rate_card_id: int) -> RateCard:
    res = await db.execute(select(RateCard).where(RateCard.id == rate_card_id))
    rate_card = res.scalars().first()
    check_not_found(rate_card, "Rate card", rate_card_id)
    return rate_card


@router.get("", response_model=List[RateCardOut])
async def list_rate_cards(
    seller_org_id: Optional[str] = Query(None),
    service_type: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    q = select(RateCard).order_by(RateCard.seller_org_id, RateCard.service_type)
    if seller_org_id:
        q = q.where(RateCard.seller_org_id == seller_org_id)
    if service_type:
        q = q.where(RateCard.service_type == service_type)

    q = q.limit(limit).offset(offset)
    res = await db.execute(q)
    return build_rate_card_response_list(res.scalars().all())


@router.get("/{rate_card_id}", response_model=RateCardOut)
async def get_rate_card(rate_card_id: int, db: AsyncSession = Depends(get_db)):
    rate_card = await _load(db, rate_card_id)
    return build_rate_card_response(rate_card)


@router.post("", response_model=RateCardOut, status_code=201)
async def create_rate_card(
    payload: RateCardCreate,
    idempotency_key: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    check_org_access(payload.seller_org_id, principal)
    await check_rate_limit(principal.id)

    if idempotency_key:
        prev = await get_idempotent(principal.id, idempotency_key)
        if prev:
            return prev

    rate_card = RateCard(**payload.model_dump())
    db.add(rate_card)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(
            status_code=409,
            detail="A rate card already exists for this organization and service type",
        )
    await log_audit(db, principal.id, AuditAction.CREATE_RATE_CARD, rate_card.id, payload)
    await db.commit()
    await db.refresh(rate_card)
    logger.info(f"Rate card {rate_card.id} created for {rate_card.seller_org_id}/{rate_card.service_type}")

    out = build_rate_card_response(rate_card)
    if idempotency_key:
        await set_idempotent(principal.id, idempotency_key, out.model_dump(mode="json"))
    return out


@router.put("/{rate_card_id}", response_model=RateCardOut)
async def update_rate_card(
    rate_card_id: int,
    payload: RateCardUpdate,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    rate_card = await _load(db, rate_card_id)
    check_org_access(rate_card.seller_org_id, principal)
    await check_rate_limit(principal.id)

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is None and field in REQUIRED_RATE_FIELDS:
            raise HTTPException(status_code=400, detail=f"{field} cannot be null")
        setattr(rate_card, field, value)

    await log_audit(db, principal.id, AuditAction.UPDATE_RATE_CARD, rate_card.id, changes)
    await db.commit()
    await db.refresh(rate_card)
    logger.info(f"Rate card {rate_card.id} updated: {sorted(changes)}")

    return build_rate_card_response(rate_card)


@router.delete("/{rate_card_id}")
async def delete_rate_card(
    rate_card_id: int,
    db: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    rate_card = await _load(db, rate_card_id)
    check_org_access(rate_card.seller_org_id, principal)
    await check_rate_limit(principal.id)

    await log_audit(db, principal.id, AuditAction.DELETE_RATE_CARD, rate_card.id, {"id": rate_card.id})
    await db.delete(rate_card)
    await db.commit()
    logger.info(f"Rate card {rate_card_id} deleted")

    return {"deleted": True, "id": rate_card_id}
