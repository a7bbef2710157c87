# locations_crud.py
import logging
from typing import Any, Dict

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from .asset_hierarchy.errors import DuplicateNameError, LocationNotFoundError, TenantNotFoundError
from .asset_hierarchy.lookups import TenantLookup, as_uuid
from ..models.assets import Asset
from ..models.locations import Location
from ..schemas.locations_schemas import LocationCreate, LocationsRequest

logger = logging.getLogger(__name__)


def create_location(db: Session, org_id, location: LocationCreate) -> Location:
    org_id = as_uuid(org_id)
    if not TenantLookup(db).exists(org_id):
        raise TenantNotFoundError(org_id)

    duplicate = db.query(Location.id).filter(
        Location.org_id == org_id,
        func.lower(Location.name) == location.name.lower()
    ).first()
    if duplicate:
        raise DuplicateNameError("Location", location.name)

    db_location = Location(org_id=org_id, **location.model_dump())
    try:
        db.add(db_location)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_location)
    logger.info(f"Created location {db_location.id} '{db_location.name}' (org {org_id})")
    return db_location


def get_location(db: Session, org_id, location_id) -> Location:
    db_location = (
        db.query(Location)
        .filter(Location.id == as_uuid(location_id), Location.org_id == as_uuid(org_id))
        .first()
    )
    if not db_location:
        raise LocationNotFoundError(location_id)
    return db_location


def list_locations(db: Session, org_id, params: LocationsRequest) -> Dict[str, Any]:
    # --------------------------
    # SUBQUERY: assets per location
    # --------------------------
    assets_sq = (
        db.query(
            Asset.location_id.label("location_id"),
            func.count(Asset.id).label("asset_count")
        )
        .filter(Asset.org_id == as_uuid(org_id))
        .group_by(Asset.location_id)
        .subquery()
    )

    location_query = (
        db.query(
            Location.id,
            Location.org_id,
            Location.name,
            Location.description,
            Location.created_at,
            Location.updated_at,
            func.coalesce(assets_sq.c.asset_count, 0).label("asset_count"),
        )
        .outerjoin(assets_sq, assets_sq.c.location_id == Location.id)
        .filter(Location.org_id == as_uuid(org_id))
    )

    if params.search:
        search_term = f"%{params.search}%"
        location_query = location_query.filter(
            or_(Location.name.ilike(search_term), Location.description.ilike(search_term))
        )

    total = location_query.with_entities(func.count(Location.id)).scalar()

    location_query = location_query.order_by(Location.name.asc()).offset(params.skip or 0)
    if params.limit:
        location_query = location_query.limit(params.limit)

    return {"locations": [dict(row._mapping) for row in location_query.all()], "total": total}
