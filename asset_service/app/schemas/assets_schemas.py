# app/schemas/assets_schemas.py
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from uuid import UUID
from datetime import date, datetime

from shared.core.schemas import CommonQueryParams
from ..enum.asset_enum import AssetCategory, AssetSortField, AssetStatus


class AssetBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    category: AssetCategory
    manufacturer: Optional[str] = None
    model_number: Optional[str] = None
    serial_number: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_price: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    link: Optional[str] = None
    tags: Optional[List[str]] = None
    warranty_scope: Optional[str] = None
    warranty_expiry: Optional[date] = None
    warranty_lifetime: bool = False
    secondary_warranty_scope: Optional[str] = None
    secondary_warranty_expiry: Optional[date] = None
    custom_fields: Optional[Dict[str, Any]] = None


class AssetCreate(AssetBase):
    status: AssetStatus = AssetStatus.operational
    asset_template_id: Optional[UUID] = None
    location_id: Optional[UUID] = None
    parent_id: Optional[UUID] = None
    identifier_code: Optional[str] = Field(default=None, max_length=64)


class AssetUpdate(BaseModel):
    """Partial update; only fields sent by the client are applied."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    category: Optional[AssetCategory] = None
    status: Optional[AssetStatus] = None
    asset_template_id: Optional[UUID] = None
    location_id: Optional[UUID] = None
    parent_id: Optional[UUID] = None
    identifier_code: Optional[str] = Field(default=None, max_length=64)
    manufacturer: Optional[str] = None
    model_number: Optional[str] = None
    serial_number: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_price: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    link: Optional[str] = None
    tags: Optional[List[str]] = None
    warranty_scope: Optional[str] = None
    warranty_expiry: Optional[date] = None
    warranty_lifetime: Optional[bool] = None
    secondary_warranty_scope: Optional[str] = None
    secondary_warranty_expiry: Optional[date] = None
    custom_fields: Optional[Dict[str, Any]] = None


class AssetMove(BaseModel):
    # null / omitted parent_id moves the asset to the root
    parent_id: Optional[UUID] = None
    location_id: Optional[UUID] = None


class AssetStatusUpdate(BaseModel):
    status: AssetStatus


class AssetOut(BaseModel):
    id: UUID
    org_id: UUID
    parent_id: Optional[UUID] = None
    path: str
    name: str
    category: str
    status: str
    identifier_code: str
    asset_template_id: Optional[UUID] = None
    location_id: Optional[UUID] = None
    manufacturer: Optional[str] = None
    model_number: Optional[str] = None
    serial_number: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_price: Optional[float] = None
    description: Optional[str] = None
    link: Optional[str] = None
    tags: Optional[List[str]] = None
    warranty_scope: Optional[str] = None
    warranty_expiry: Optional[date] = None
    warranty_lifetime: bool = False
    secondary_warranty_scope: Optional[str] = None
    secondary_warranty_expiry: Optional[date] = None
    custom_fields: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AssetTreeOut(AssetOut):
    children: List["AssetTreeOut"] = []


class AssetsRequest(CommonQueryParams):
    status: Optional[str] = None
    category: Optional[str] = None
    location_id: Optional[UUID] = None
    template_id: Optional[UUID] = None
    parent_id: Optional[UUID] = None
    roots_only: bool = False
    has_warranty: Optional[bool] = None
    identifier_code: Optional[str] = None
    sort_by: AssetSortField = AssetSortField.created_at
    sort_order: str = Field(default="desc", pattern="^(asc|desc)$")


class AssetsResponse(BaseModel):
    assets: List[AssetOut]
    total: int

    model_config = {"from_attributes": True}


class LocationCount(BaseModel):
    location_id: UUID
    location_name: str
    count: int


class AssetStatistics(BaseModel):
    total: int
    by_category: Dict[str, int]
    by_status: Dict[str, int]
    by_location: List[LocationCount]
    warranty_expiring_soon: int
    total_value: float
    added_last_month: int
AssetTreeOut.model_rebuild()
