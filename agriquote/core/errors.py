"""Error types raised by the pricing pipeline.

Each error carries the HTTP status it maps to and renders its own response
body, so the exception handlers in ``agriquote.main`` stay generic.
"""
from typing import Iterable, Optional


class PricingError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class QuoteValidationError(PricingError):
    """One or more request fields are missing, malformed or out of range."""
    status_code = 400

    def __init__(self, fields: Iterable[dict], message: str = "Invalid quote request"):
        self.fields = list(fields)
        names = ", ".join(f["field"] for f in self.fields)
        super().__init__(f"{message}: {names}" if names else message)

    def to_dict(self) -> dict:
        return {"error": self.message, "fields": self.fields}


class RateCardNotFound(PricingError):
    """The seller has no rate card for the requested service type."""
    status_code = 404

    def __init__(self, seller_org_id: str, service_type: str):
        self.seller_org_id = seller_org_id
        self.service_type = service_type
        super().__init__(
            f"No rate card found for seller_org_id={seller_org_id}, service_type={service_type}"
        )

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "seller_org_id": self.seller_org_id,
            "service_type": self.service_type,
        }


class RateCardStoreError(PricingError):
    """The rate card store could not be reached or the query failed."""
    status_code = 502

    def __init__(self, message: str = "Rate card store unavailable", cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


def field_error(field: str, message: str) -> dict:
    return {"field": field, "message": message}
