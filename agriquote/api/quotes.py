"""Quote estimate endpoint"""
import logging
from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from agriquote.core.enums import QuoteOutcome
from agriquote.core.errors import (
    QuoteValidationError,
    RateCardNotFound,
    RateCardStoreError,
    field_error,
)
from agriquote.core.metrics import quote_estimates
from agriquote.db.session import get_db
from agriquote.schemas.quote import QuoteEstimateResponse, QuoteRequest
from agriquote.services.quote_estimate import estimate_quote

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/quote-estimate", tags=["quotes"])

# Label values for requests whose service type was never confirmed by a rate card
INVALID_LABEL = "invalid"
UNKNOWN_LABEL = "unknown"


def parse_quote_request(payload) -> QuoteRequest:
    if not isinstance(payload, dict):
        raise QuoteValidationError([field_error("body", "must be a JSON object")])
    try:
        return QuoteRequest.model_validate(payload)
    except ValidationError as e:
        raise QuoteValidationError(
            field_error(".".join(str(p) for p in err["loc"]) or "body", err["msg"])
            for err in e.errors()
        )


async def read_quote_request(request: Request) -> QuoteRequest:
    try:
        payload = await request.json()
    except ValueError:
        raise QuoteValidationError([field_error("body", "must be valid JSON")])
    return parse_quote_request(payload)


@router.post(
    "",
    response_model=QuoteEstimateResponse,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": QuoteRequest.model_json_schema()}},
        }
    },
)
async def create_quote_estimate(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    try:
        req = await read_quote_request(request)
        result = await estimate_quote(db, req)
    except QuoteValidationError as e:
        logger.info(f"Rejected quote request: {e.message}")
        quote_estimates.labels(service_type=INVALID_LABEL, outcome=QuoteOutcome.INVALID.value).inc()
        raise
    except RateCardNotFound as e:
        logger.info(e.message)
        quote_estimates.labels(service_type=UNKNOWN_LABEL, outcome=QuoteOutcome.NOT_FOUND.value).inc()
        raise
    except RateCardStoreError:
        quote_estimates.labels(service_type=UNKNOWN_LABEL, outcome=QuoteOutcome.STORE_ERROR.value).inc()
        raise

    quote_estimates.labels(service_type=req.service_type, outcome=QuoteOutcome.OK.value).inc()
    return result
