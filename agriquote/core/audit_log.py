"""Audit logging for rate card writes"""
import logging
from typing import Any, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from agriquote.models.audit import Audit
from agriquote.core.enums import AuditAction
from agriquote.core.metrics import audit_logs_created
from agriquote.utils.hashing import payload_hash

logger = logging.getLogger(__name__)


async def log_audit(
    db: AsyncSession,
    actor_id: str,
    action: AuditAction,
    resource_id: Optional[int] = None,
    payload: Any = None
) -> None:
    """Stage an audit row in the caller's transaction.

    The row is flushed, not committed: it lands together with the write it
    describes. A failed flush propagates so the caller's write is rolled
    back with it instead of committing without an audit trail.
    """
    if hasattr(payload, "model_dump"):
        payload_dict = payload.model_dump(exclude_unset=True)
    elif isinstance(payload, dict):
        payload_dict = payload
    else:
        payload_dict = {}

    audit_record = Audit(
        actor_id=str(actor_id),
        action=str(action),
        resource_id=resource_id,
        payload_hash=payload_hash(payload_dict),
    )

    db.add(audit_record)
    try:
        await db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Audit logging failed for action {action}: {e}")
        raise
    audit_logs_created.labels(action=str(action)).inc()
