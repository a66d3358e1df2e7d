"""Authorization helpers for rate card administration"""
from fastapi import HTTPException
from typing import Optional
from agriquote.core.security import Principal


def check_org_access(seller_org_id: str, principal: Principal) -> None:

    if principal.is_admin:
        return
    if principal.org_id is None or principal.org_id != seller_org_id:
        raise HTTPException(
            status_code=403,
            detail="Forbidden: You can only manage rate cards of your own organization"
        )


def check_not_found(item, resource_name: str = "Resource", resource_id: Optional[int] = None) -> None:

    if not item:
        if resource_id:
            raise HTTPException(
                status_code=404,
                detail=f"{resource_name} with id {resource_id} not found"
            )
        raise HTTPException(status_code=404, detail=f"{resource_name} not found")
