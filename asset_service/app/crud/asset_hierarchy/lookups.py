"""
Read-only lookups the hierarchy engine depends on.

Each class wraps the session so the store can be handed test doubles instead.
"""

import uuid
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...enum.asset_enum import OPEN_WORK_ORDER_STATUSES
from ...models.asset_templates import AssetTemplate
from ...models.assets import Asset
from ...models.locations import Location
from ...models.orgs import Org
from ...models.work_orders import WorkOrder


def as_uuid(value) -> Optional[uuid.UUID]:
    if value is None or isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(str(value))


class TenantLookup:
    def __init__(self, db: Session):
        self.db = db

    def exists(self, org_id) -> bool:
        return self.db.query(Org.id).filter(Org.id == as_uuid(org_id)).first() is not None


class TemplateLookup:
    def __init__(self, db: Session):
        self.db = db

    def get(self, template_id, org_id) -> Optional[AssetTemplate]:
        # wrong tenant and missing are the same answer
        return (
            self.db.query(AssetTemplate)
            .filter(AssetTemplate.id == as_uuid(template_id),
                    AssetTemplate.org_id == as_uuid(org_id))
            .first()
        )


class LocationLookup:
    def __init__(self, db: Session):
        self.db = db

    def get(self, location_id) -> Optional[Location]:
        return self.db.query(Location).filter(Location.id == as_uuid(location_id)).first()


class WorkOrderLookup:
    def __init__(self, db: Session):
        self.db = db

    def count_open(self, org_id, asset_ids: Iterable) -> int:
        ids = [as_uuid(a) for a in asset_ids]
        if not ids:
            return 0
        return (
            self.db.query(func.count(WorkOrder.id))
            .filter(
                WorkOrder.org_id == as_uuid(org_id),
                WorkOrder.asset_id.in_(ids),
                WorkOrder.status.in_(OPEN_WORK_ORDER_STATUSES),
            )
            .scalar()
        ) or 0


class AssetLookup:
    def __init__(self, db: Session):
        self.db = db

    def get(self, asset_id, org_id, for_update: bool = False):
        query = self.db.query(Asset).filter(
            Asset.id == as_uuid(asset_id), Asset.org_id == as_uuid(org_id))
        if for_update:
            query = query.with_for_update()
        return query.first()

    def identifier_code_taken(self, org_id, identifier_code: str, exclude_id=None) -> bool:
        query = self.db.query(Asset.id).filter(
            Asset.org_id == as_uuid(org_id),
            Asset.identifier_code == identifier_code,
        )
        if exclude_id is not None:
            query = query.filter(Asset.id != as_uuid(exclude_id))
        return query.first() is not None
