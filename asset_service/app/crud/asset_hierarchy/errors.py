"""
Error taxonomy of the asset hierarchy engine.

Three families, each mapped to one HTTP status by the exception handler:

- NotFoundError (404): tenant, asset, parent, template or location missing
- ConflictError (409): the request is well formed but breaks an invariant
- AssetValidationError (400): malformed payload (custom fields, schemas)
"""

from typing import Any, Dict, List, Optional

from shared.utils.app_status_code import AppStatusCode


class AssetServiceError(Exception):
    http_status = 400
    status_code = AppStatusCode.OPERATION_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ----------------------------------------------------------------------
# NOT FOUND
# ----------------------------------------------------------------------

class NotFoundError(AssetServiceError):
    http_status = 404
    status_code = AppStatusCode.NOT_FOUND
    entity = "Resource"

    def __init__(self, entity_id: Any = None, entity: Optional[str] = None):
        self.entity = entity or self.entity
        self.entity_id = entity_id
        message = f"{self.entity} not found"
        if entity_id is not None:
            message = f"{self.entity} '{entity_id}' not found"
        super().__init__(message, {"entity": self.entity, "id": str(entity_id) if entity_id is not None else None})


class TenantNotFoundError(NotFoundError):
    entity = "Organization"


class AssetNotFoundError(NotFoundError):
    entity = "Asset"


class ParentNotFoundError(NotFoundError):
    entity = "Parent asset"


class TemplateNotFoundError(NotFoundError):
    entity = "Asset template"


class LocationNotFoundError(NotFoundError):
    entity = "Location"


# ----------------------------------------------------------------------
# CONFLICT
# ----------------------------------------------------------------------

class ConflictError(AssetServiceError):
    http_status = 409
    status_code = AppStatusCode.RELATIONSHIP_CONFLICT


class SelfParentError(ConflictError):
    status_code = AppStatusCode.HIERARCHY_CYCLE_ERROR

    def __init__(self, asset_id: Any):
        super().__init__("Asset cannot be its own parent", {"asset_id": str(asset_id)})


class CircularDependencyError(ConflictError):
    status_code = AppStatusCode.HIERARCHY_CYCLE_ERROR

    def __init__(self, asset_id: Any, parent_id: Any):
        super().__init__(
            "Cannot move asset to be a child of itself or its descendants",
            {"asset_id": str(asset_id), "parent_id": str(parent_id)},
        )


class DuplicateIdentifierCodeError(ConflictError):
    status_code = AppStatusCode.DUPLICATE_ADD_ERROR

    def __init__(self, identifier_code: str):
        self.identifier_code = identifier_code
        super().__init__(
            f"Identifier code '{identifier_code}' already exists in this organization",
            {"identifier_code": identifier_code},
        )


class DuplicateNameError(ConflictError):
    status_code = AppStatusCode.DUPLICATE_ADD_ERROR

    def __init__(self, entity: str, name: str):
        super().__init__(
            f"{entity} with name '{name}' already exists in this organization",
            {"entity": entity, "name": name},
        )


class CategoryMismatchError(ConflictError):
    def __init__(self, category: Any, template_category: Any):
        super().__init__(
            "Asset category must match template category",
            {"category": _label(category), "template_category": _label(template_category)},
        )


class LocationTenancyMismatchError(ConflictError):
    def __init__(self, location_id: Any):
        super().__init__(
            "Location does not belong to this organization",
            {"location_id": str(location_id)},
        )


class InvalidTransitionError(ConflictError):
    status_code = AppStatusCode.INVALID_STATUS_TRANSITION

    def __init__(self, from_status: Any, to_status: Any):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid status transition from {_label(from_status)} to {_label(to_status)}",
            {"from": _label(from_status), "to": _label(to_status)},
        )


class HasChildrenError(ConflictError):
    status_code = AppStatusCode.HIERARCHY_HAS_CHILDREN

    def __init__(self, asset_id: Any, descendant_count: int):
        self.descendant_count = descendant_count
        super().__init__(
            "Cannot delete asset with children. Use cascade option or delete children first.",
            {"asset_id": str(asset_id), "descendants": descendant_count},
        )


class HasActiveWorkError(ConflictError):
    status_code = AppStatusCode.HIERARCHY_HAS_ACTIVE_WORK

    def __init__(self, asset_id: Any, open_work_orders: int):
        self.open_work_orders = open_work_orders
        super().__init__(
            f"Cannot delete asset with {open_work_orders} active work order(s)",
            {"asset_id": str(asset_id), "open_work_orders": open_work_orders},
        )


class TemplateInUseError(ConflictError):
    def __init__(self, template_id: Any, asset_count: int):
        super().__init__(
            f"Cannot delete template. It is used by {asset_count} asset(s).",
            {"template_id": str(template_id), "assets": asset_count},
        )


# ----------------------------------------------------------------------
# VALIDATION
# ----------------------------------------------------------------------

class AssetValidationError(AssetServiceError):
    http_status = 400
    status_code = AppStatusCode.INVALID_INPUT


class InvalidCustomFieldsError(AssetValidationError):
    status_code = AppStatusCode.CUSTOM_FIELDS_INVALID

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        summary = ", ".join(f"{e['field']} {e['message']}" for e in errors)
        super().__init__(f"Invalid custom fields: {summary}", {"errors": errors})


class InvalidTemplateSchemaError(AssetValidationError):
    def __init__(self, reason: str):
        super().__init__(f"Invalid custom field schema: {reason}", {"reason": reason})


def _label(value: Any) -> str:
    return getattr(value, "value", value)
