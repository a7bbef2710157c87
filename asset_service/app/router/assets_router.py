from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query

from shared.auth import validate_current_token
from shared.core.schemas import Lookup, UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode

from ..crud.asset_hierarchy.hierarchy_store import HierarchyStore, get_hierarchy_store
from ..crud.asset_hierarchy.tree_assembler import TreeNode
from ..enum.asset_enum import AssetCategory, AssetStatus
from ..schemas.assets_schemas import (
    AssetCreate,
    AssetMove,
    AssetOut,
    AssetStatistics,
    AssetStatusUpdate,
    AssetTreeOut,
    AssetsRequest,
    AssetsResponse,
    AssetUpdate,
)

router = APIRouter(prefix="/api/assets", tags=["assets"], dependencies=[Depends(validate_current_token)])


def _tree_payload(roots: List[TreeNode]) -> List[dict]:
    payload: List[AssetTreeOut] = []
    stack = [(node, payload) for node in reversed(roots)]
    while stack:
        node, siblings = stack.pop()
        entry = AssetTreeOut(**AssetOut.model_validate(node.item).model_dump())
        siblings.append(entry)
        stack.extend((child, entry.children) for child in reversed(node.children))
    return [entry.model_dump(mode="json") for entry in payload]


# ----------------------------------------------------------------------
# COLLECTION ROUTES (declared before /{asset_id})
# ----------------------------------------------------------------------

@router.get("/all", response_model=None)
def get_assets(
    params: AssetsRequest = Depends(),
    store: HierarchyStore = Depends(get_hierarchy_store),
    current_user: UserToken = Depends(validate_current_token)
):
    assets, total = store.find(current_user.org_id, params)
    result = AssetsResponse(assets=[AssetOut.model_validate(a) for a in assets], total=total)
    return success_response(data=result)


@router.get("/overview", response_model=None)
def get_asset_overview(
    store: HierarchyStore = Depends(get_hierarchy_store),
    current_user: UserToken = Depends(validate_current_token)
):
    stats = AssetStatistics(**store.get_statistics(current_user.org_id))
    return success_response(data=stats)


@router.get("/tree", response_model=None)
def get_asset_tree(
    root_id: Optional[UUID] = None,
    store: HierarchyStore = Depends(get_hierarchy_store),
    current_user: UserToken = Depends(validate_current_token)
):
    roots = store.get_tree(current_user.org_id, root_id)
    return success_response(data=_tree_payload(roots))


@router.get("/warranty-expiring", response_model=None)
def get_warranty_expiring(
    days: Optional[int] = Query(default=None, ge=0),
    store: HierarchyStore = Depends(get_hierarchy_store),
    current_user: UserToken = Depends(validate_current_token)
):
    assets = store.get_warranty_expiring(current_user.org_id, days)
    return success_response(data=[AssetOut.model_validate(a) for a in assets])


@router.get("/status-lookup", response_model=List[Lookup])
def asset_status_lookup():
    return [Lookup(id=s.value, name=s.value.replace("_", " ").title()) for s in AssetStatus]


@router.get("/category-lookup", response_model=List[Lookup])
def asset_category_lookup():
    return [Lookup(id=c.value, name=c.value.title()) for c in AssetCategory]


@router.get("/by-location/{location_id}", response_model=None)
def get_assets_by_location(
    location_id: UUID,
    store: HierarchyStore = Depends(get_hierarchy_store),
    current_user: UserToken = Depends(validate_current_token)
):
    assets = store.get_by_location(current_user.org_id, location_id)
    return success_response(data=[AssetOut.model_validate(a) for a in assets])


@router.get("/by-template/{template_id}", response_model=None)
def get_assets_by_template(
    template_id: UUID,
    store: HierarchyStore = Depends(get_hierarchy_store),
    current_user: UserToken = Depends(validate_current_token)
):
    assets = store.get_by_template(current_user.org_id, template_id)
    return success_response(data=[AssetOut.model_validate(a) for a in assets])


# ----------------------------------------------------------------------
# SINGLE ASSET
# ----------------------------------------------------------------------

@router.get("/{asset_id}", response_model=None)
def get_asset(
    asset_id: UUID,
    store: HierarchyStore = Depends(get_hierarchy_store),
    current_user: UserToken = Depends(validate_current_token)
):
    return success_response(data=AssetOut.model_validate(store.get(current_user.org_id, asset_id)))


@router.get("/{asset_id}/ancestors", response_model=None)
def get_asset_ancestors(
    asset_id: UUID,
    store: HierarchyStore = Depends(get_hierarchy_store),
    current_user: UserToken = Depends(validate_current_token)
):
    ancestors = store.get_ancestors(current_user.org_id, asset_id)
    return success_response(data=[AssetOut.model_validate(a) for a in ancestors])


@router.post("/", response_model=None)
def create_asset(
    asset: AssetCreate,
    store: HierarchyStore = Depends(get_hierarchy_store),
    current_user: UserToken = Depends(validate_current_token)
):
    result = store.create(current_user.org_id, asset, actor_id=current_user.user_id)
    return success_response(
        data=AssetOut.model_validate(result),
        message="Asset created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/{asset_id}", response_model=None)
def update_asset(
    asset_id: UUID,
    asset: AssetUpdate,
    store: HierarchyStore = Depends(get_hierarchy_store),
    current_user: UserToken = Depends(validate_current_token)
):
    result = store.update(current_user.org_id, asset_id, asset, actor_id=current_user.user_id)
    return success_response(
        data=AssetOut.model_validate(result),
        message="Asset updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.post("/{asset_id}/move", response_model=None)
def move_asset(
    asset_id: UUID,
    move: AssetMove,
    store: HierarchyStore = Depends(get_hierarchy_store),
    current_user: UserToken = Depends(validate_current_token)
):
    kwargs = {}
    # location is only touched when the client sends it
    if "location_id" in move.model_fields_set:
        kwargs["new_location_id"] = move.location_id

    result = store.move(current_user.org_id, asset_id, move.parent_id,
                        actor_id=current_user.user_id, **kwargs)
    return success_response(
        data=AssetOut.model_validate(result),
        message="Asset moved successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.patch("/{asset_id}/status", response_model=None)
def update_asset_status(
    asset_id: UUID,
    payload: AssetStatusUpdate,
    store: HierarchyStore = Depends(get_hierarchy_store),
    current_user: UserToken = Depends(validate_current_token)
):
    result = store.set_status(current_user.org_id, asset_id, payload.status, actor_id=current_user.user_id)
    return success_response(
        data=AssetOut.model_validate(result),
        message="Asset status updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{asset_id}", response_model=None)
def delete_asset(
    asset_id: UUID,
    cascade: bool = False,
    store: HierarchyStore = Depends(get_hierarchy_store),
    current_user: UserToken = Depends(validate_current_token)
):
    removed = store.delete(current_user.org_id, asset_id, cascade=cascade, actor_id=current_user.user_id)
    return success_response(
        data={"deleted_ids": [str(i) for i in removed]},
        message="Asset deleted successfully",
        status_code=AppStatusCode.DELETED_SUCCESSFULLY
    )
