from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session

from ...enum.asset_enum import AuditAction
from ...models.audit_logs import AuditLog
from .lookups import as_uuid


class AuditWriter:
    """Adds audit rows to the caller's transaction; never commits."""

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        org_id,
        record_id,
        action: AuditAction,
        old_value: Optional[Dict[str, Any]] = None,
        new_value: Optional[Dict[str, Any]] = None,
        actor_id: Optional[str] = None,
        model: str = "Asset",
    ) -> AuditLog:
        entry = AuditLog(
            org_id=as_uuid(org_id),
            model=model,
            record_id=as_uuid(record_id),
            action=AuditAction(action).value,
            old_value=jsonable_encoder(old_value) if old_value is not None else None,
            new_value=jsonable_encoder(new_value) if new_value is not None else None,
            actor_id=actor_id,
        )
        self.db.add(entry)
        return entry
