from typing import Any, Dict
from uuid import UUID
from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from shared.auth import validate_current_token
from shared.core.database import get_asset_db as get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode

from ..crud import asset_templates_crud as crud
from ..schemas.asset_templates_schemas import (
    AssetTemplateCreate,
    AssetTemplateOut,
    AssetTemplatesRequest,
    AssetTemplatesResponse,
    CustomFieldValidationResult,
)

router = APIRouter(prefix="/api/asset-templates", tags=["asset_templates"],
                   dependencies=[Depends(validate_current_token)])


@router.get("/all", response_model=None)
def get_templates(
    params: AssetTemplatesRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    result = crud.list_templates(db, current_user.org_id, params)
    return success_response(data=AssetTemplatesResponse.model_validate(result, from_attributes=True))


@router.get("/{template_id}", response_model=None)
def get_template(
    template_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return success_response(data=AssetTemplateOut.model_validate(crud.get_template(db, current_user.org_id, template_id)))


@router.post("/", response_model=None)
def create_template(
    template: AssetTemplateCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    result = crud.create_template(db, current_user.org_id, template)
    return success_response(
        data=AssetTemplateOut.model_validate(result),
        message="Asset template created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.post("/{template_id}/validate", response_model=None)
def validate_custom_fields(
    template_id: UUID,
    values: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    errors = crud.validate_custom_field_values(db, current_user.org_id, template_id, values)
    return success_response(data=CustomFieldValidationResult(valid=not errors, errors=errors))


@router.delete("/{template_id}", response_model=None)
def delete_template(
    template_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    crud.delete_template(db, current_user.org_id, template_id)
    return success_response(
        data={"id": str(template_id)},
        message="Asset template deleted successfully",
        status_code=AppStatusCode.DELETED_SUCCESSFULLY
    )
