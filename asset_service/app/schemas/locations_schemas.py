# app/schemas/locations_schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from shared.core.schemas import CommonQueryParams


class LocationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None


class LocationOut(LocationCreate):
    id: UUID
    org_id: UUID
    asset_count: Optional[int] = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LocationsRequest(CommonQueryParams):
    pass


class LocationsResponse(BaseModel):
    locations: List[LocationOut]
    total: int
