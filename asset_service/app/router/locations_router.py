from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.auth import validate_current_token
from shared.core.database import get_asset_db as get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode

from ..crud import locations_crud as crud
from ..schemas.locations_schemas import LocationCreate, LocationOut, LocationsRequest, LocationsResponse

router = APIRouter(prefix="/api/locations", tags=["locations"], dependencies=[Depends(validate_current_token)])


@router.get("/all", response_model=None)
def get_locations(
    params: LocationsRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return success_response(data=LocationsResponse(**crud.list_locations(db, current_user.org_id, params)))


@router.get("/{location_id}", response_model=None)
def get_location(
    location_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return success_response(data=LocationOut.model_validate(crud.get_location(db, current_user.org_id, location_id)))


@router.post("/", response_model=None)
def create_location(
    location: LocationCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    result = crud.create_location(db, current_user.org_id, location)
    return success_response(
        data=LocationOut.model_validate(result),
        message="Location created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )
