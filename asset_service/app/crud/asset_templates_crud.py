# asset_templates_crud.py
import logging
from typing import Any, Dict, List, Optional

import jsonschema
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from .asset_hierarchy.errors import (
    DuplicateNameError,
    InvalidTemplateSchemaError,
    TemplateInUseError,
    TemplateNotFoundError,
    TenantNotFoundError,
)
from .asset_hierarchy.lookups import TenantLookup, as_uuid
from .asset_hierarchy.relationship_validator import custom_field_errors
from ..models.asset_templates import AssetTemplate
from ..models.assets import Asset
from ..schemas.asset_templates_schemas import AssetTemplateCreate, AssetTemplatesRequest

logger = logging.getLogger(__name__)


def _check_schema(schema: Optional[Dict[str, Any]]) -> None:
    if not schema:
        return
    try:
        jsonschema.Draft7Validator.check_schema(schema)
    except jsonschema.exceptions.SchemaError as e:
        raise InvalidTemplateSchemaError(e.message)


def create_template(db: Session, org_id, template: AssetTemplateCreate) -> AssetTemplate:
    org_id = as_uuid(org_id)
    if not TenantLookup(db).exists(org_id):
        raise TenantNotFoundError(org_id)

    duplicate = db.query(AssetTemplate.id).filter(
        AssetTemplate.org_id == org_id,
        func.lower(AssetTemplate.name) == template.name.lower()
    ).first()
    if duplicate:
        raise DuplicateNameError("Asset template", template.name)

    _check_schema(template.custom_fields)
    # defaults must satisfy the template's own schema
    if template.default_fields:
        errors = custom_field_errors(template.custom_fields, template.default_fields)
        if errors:
            raise InvalidTemplateSchemaError(
                "default_fields do not match custom_fields schema: "
                + ", ".join(f"{e['field']} {e['message']}" for e in errors))

    db_template = AssetTemplate(
        org_id=org_id,
        **{**template.model_dump(), "category": template.category.value},
    )
    try:
        db.add(db_template)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(db_template)
    logger.info(f"Created asset template {db_template.id} '{db_template.name}' (org {org_id})")
    return db_template


def get_template(db: Session, org_id, template_id) -> AssetTemplate:
    db_template = (
        db.query(AssetTemplate)
        .filter(AssetTemplate.id == as_uuid(template_id), AssetTemplate.org_id == as_uuid(org_id))
        .first()
    )
    if not db_template:
        raise TemplateNotFoundError(template_id)
    return db_template


def list_templates(db: Session, org_id, params: AssetTemplatesRequest) -> Dict[str, Any]:
    template_query = db.query(AssetTemplate).filter(AssetTemplate.org_id == as_uuid(org_id))

    if params.category and params.category.lower() != "all":
        template_query = template_query.filter(func.lower(AssetTemplate.category) == params.category.lower())

    if params.is_active is not None:
        template_query = template_query.filter(AssetTemplate.is_active.is_(params.is_active))

    if params.search:
        search_term = f"%{params.search}%"
        template_query = template_query.filter(
            or_(AssetTemplate.name.ilike(search_term), AssetTemplate.description.ilike(search_term))
        )

    total = template_query.with_entities(func.count(AssetTemplate.id)).scalar()

    template_query = template_query.order_by(AssetTemplate.name.asc()).offset(params.skip or 0)
    if params.limit:
        template_query = template_query.limit(params.limit)

    return {"templates": template_query.all(), "total": total}


def delete_template(db: Session, org_id, template_id) -> AssetTemplate:
    db_template = get_template(db, org_id, template_id)

    asset_count = db.query(func.count(Asset.id)).filter(Asset.asset_template_id == db_template.id).scalar()
    if asset_count:
        raise TemplateInUseError(db_template.id, asset_count)

    try:
        db.delete(db_template)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Deleted asset template {template_id} (org {org_id})")
    return db_template


def validate_custom_field_values(db: Session, org_id, template_id, values: Dict[str, Any]) -> List[Dict[str, str]]:
    """Dry run of the custom field check; returns the per-field errors."""
    db_template = get_template(db, org_id, template_id)
    return custom_field_errors(db_template.custom_fields, values)
