# app/schemas/asset_templates_schemas.py
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from uuid import UUID
from datetime import datetime

from shared.core.schemas import CommonQueryParams
from ..enum.asset_enum import AssetCategory


class AssetTemplateBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    category: AssetCategory
    description: Optional[str] = None
    default_fields: Optional[Dict[str, Any]] = None
    custom_fields: Optional[Dict[str, Any]] = None   # JSON Schema (draft 7)
    is_active: bool = True


class AssetTemplateCreate(AssetTemplateBase):
    pass


class AssetTemplateOut(AssetTemplateBase):
    id: UUID
    org_id: UUID
    category: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AssetTemplatesRequest(CommonQueryParams):
    category: Optional[str] = None
    is_active: Optional[bool] = None


class AssetTemplatesResponse(BaseModel):
    templates: List[AssetTemplateOut]
    total: int


class CustomFieldError(BaseModel):
    field: str
    message: str


class CustomFieldValidationResult(BaseModel):
    valid: bool
    errors: List[CustomFieldError] = []
