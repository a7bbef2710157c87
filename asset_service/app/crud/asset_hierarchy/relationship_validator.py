"""
Cross-entity checks run before an asset is written.

All lookups are injected so the same rules run against the database or
against in-memory doubles.
"""

from typing import Any, Dict, List, Optional

import jsonschema

from .errors import (
    CategoryMismatchError,
    DuplicateIdentifierCodeError,
    InvalidCustomFieldsError,
    LocationNotFoundError,
    LocationTenancyMismatchError,
    ParentNotFoundError,
    TemplateNotFoundError,
    TenantNotFoundError,
)
from .lookups import as_uuid


def custom_field_errors(schema: Optional[Dict[str, Any]], values: Optional[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Validate custom field values against a draft 7 JSON schema."""
    if not schema:
        return []

    try:
        jsonschema.Draft7Validator.check_schema(schema)
    except jsonschema.exceptions.SchemaError as e:
        return [{"field": "<schema>", "message": e.message}]

    validator = jsonschema.Draft7Validator(schema)
    validation_errors = sorted(
        validator.iter_errors(values or {}), key=lambda err: [str(part) for part in err.path])

    errors = []
    for error in validation_errors:
        pointer = "/".join(str(part) for part in error.path) or "<root>"
        errors.append({"field": pointer, "message": error.message})
    return errors


class RelationshipValidator:
    def __init__(self, tenants, templates, locations, assets):
        self.tenants = tenants
        self.templates = templates
        self.locations = locations
        self.assets = assets

    def validate_tenant(self, org_id) -> None:
        if not self.tenants.exists(org_id):
            raise TenantNotFoundError(org_id)

    def validate_template(self, org_id, template_id, category, custom_fields: Optional[Dict[str, Any]] = None):
        template = self.templates.get(template_id, org_id)
        if not template:
            raise TemplateNotFoundError(template_id)

        if _value(template.category) != _value(category):
            raise CategoryMismatchError(category, template.category)

        if custom_fields is not None:
            self.validate_custom_fields(template, custom_fields)
        return template

    def validate_custom_fields(self, template, custom_fields: Dict[str, Any]) -> None:
        errors = custom_field_errors(template.custom_fields, custom_fields)
        if errors:
            raise InvalidCustomFieldsError(errors)

    def validate_location(self, org_id, location_id):
        location = self.locations.get(location_id)
        if not location:
            raise LocationNotFoundError(location_id)
        if as_uuid(location.org_id) != as_uuid(org_id):
            raise LocationTenancyMismatchError(location_id)
        return location

    def validate_parent(self, org_id, parent_id, for_update: bool = False):
        parent = self.assets.get(parent_id, org_id, for_update=for_update)
        if not parent:
            raise ParentNotFoundError(parent_id)
        return parent

    def validate_identifier_code(self, org_id, identifier_code: str, exclude_id=None) -> None:
        if self.assets.identifier_code_taken(org_id, identifier_code, exclude_id=exclude_id):
            raise DuplicateIdentifierCodeError(identifier_code)


def _value(value):
    return getattr(value, "value", value)
