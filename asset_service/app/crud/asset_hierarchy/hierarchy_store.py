"""
Transactional core of the asset hierarchy.

Every mutation runs inside one session transaction: validation, the write
(including the bulk descendant path rewrite on move) and the audit rows either
commit together or roll back together. Change events are dispatched only
after the commit and can never fail the mutation.
"""

import logging
import uuid
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from dateutil.relativedelta import relativedelta
from fastapi import Depends
from sqlalchemy import and_, func, literal, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.database import get_asset_db
from ...enum.asset_enum import AssetCategory, AssetSortField, AssetStatus, AuditAction
from ...models.assets import Asset
from ...models.locations import Location
from ...models.work_orders import WorkOrder
from ...schemas.assets_schemas import AssetCreate, AssetOut, AssetsRequest, AssetUpdate
from .audit import AuditWriter
from .cycle_guard import validate_move
from .errors import AssetNotFoundError, DuplicateIdentifierCodeError, HasActiveWorkError, HasChildrenError
from .events import EventPublisher, dispatch, make_asset_event, shared_event_publisher
from .lookups import AssetLookup, LocationLookup, TemplateLookup, TenantLookup, WorkOrderLookup, as_uuid
from .path_codec import ancestor_ids, compute_path, descendant_prefix
from .relationship_validator import RelationshipValidator
from .status_machine import transition
from .tree_assembler import TreeNode, assemble

logger = logging.getLogger(__name__)

# marks "argument not given" where None is a meaningful value
UNSET: Any = object()

NON_NULLABLE_FIELDS = ("name", "category", "status", "identifier_code", "warranty_lifetime")


def generate_identifier_code(asset_id) -> str:
    return f"AST-{str(asset_id)[:8].upper()}"


def asset_snapshot(asset: Asset) -> Dict[str, Any]:
    return AssetOut.model_validate(asset).model_dump(mode="json")


def _plain(value):
    return value.value if isinstance(value, Enum) else value


class HierarchyStore:
    def __init__(
        self,
        db: Session,
        tenants=None,
        templates=None,
        locations=None,
        work_orders=None,
        assets=None,
        audit: Optional[AuditWriter] = None,
        publisher: Optional[EventPublisher] = None,
        check_descendant_work: Optional[bool] = None,
        warranty_lookahead_days: Optional[int] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self.db = db
        self.assets = assets or AssetLookup(db)
        self.validator = RelationshipValidator(
            tenants or TenantLookup(db),
            templates or TemplateLookup(db),
            locations or LocationLookup(db),
            self.assets,
        )
        self.work_orders = work_orders or WorkOrderLookup(db)
        self.audit = audit or AuditWriter(db)
        self.publisher = publisher
        self.check_descendant_work = (
            settings.CASCADE_DELETE_CHECKS_DESCENDANTS if check_descendant_work is None else check_descendant_work)
        self.warranty_lookahead_days = (
            settings.WARRANTY_LOOKAHEAD_DAYS if warranty_lookahead_days is None else warranty_lookahead_days)
        self.today = today or date.today

    # ------------------------------------------------------------------
    # TRANSACTIONS
    # ------------------------------------------------------------------

    @contextmanager
    def _transaction(self, identifier_code: Optional[str] = None):
        try:
            yield
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            # lost a race on the unique (org_id, identifier_code) index
            if identifier_code and "identifier_code" in str(e.orig):
                raise DuplicateIdentifierCodeError(identifier_code) from e
            raise
        except Exception:
            self.db.rollback()
            raise

    def _get_for_update(self, org_id, asset_id) -> Asset:
        asset = self.assets.get(asset_id, org_id, for_update=True)
        if not asset:
            raise AssetNotFoundError(asset_id)
        return asset

    def _emit(self, action: str, org_id, asset_id, before=None, after=None, **metadata) -> None:
        publisher = self.publisher if self.publisher is not None else shared_event_publisher()
        dispatch(publisher, make_asset_event(action, org_id, asset_id, before=before, after=after, **metadata))

    # ------------------------------------------------------------------
    # MUTATIONS
    # ------------------------------------------------------------------

    def create(self, org_id, data: AssetCreate, actor_id: Optional[str] = None) -> Asset:
        org_id = as_uuid(org_id)

        with self._transaction(identifier_code=data.identifier_code):
            self.validator.validate_tenant(org_id)

            custom_fields = data.custom_fields
            if data.asset_template_id:
                template = self.validator.validate_template(org_id, data.asset_template_id, data.category)
                custom_fields = {**(template.default_fields or {}), **(data.custom_fields or {})}
                # defaults count towards the schema's required fields
                if data.custom_fields is not None:
                    self.validator.validate_custom_fields(template, custom_fields)

            if data.location_id:
                self.validator.validate_location(org_id, data.location_id)

            # parent is read inside this transaction, so it cannot vanish before the insert
            parent_path = None
            if data.parent_id:
                parent = self.validator.validate_parent(org_id, data.parent_id, for_update=True)
                parent_path = parent.path

            asset_id = uuid.uuid4()
            path = compute_path(parent_path, asset_id)

            identifier_code = data.identifier_code or generate_identifier_code(asset_id)
            self.validator.validate_identifier_code(org_id, identifier_code)

            fields = data.model_dump(exclude={
                "asset_template_id", "location_id", "parent_id", "identifier_code",
                "custom_fields", "status", "category"})
            asset = Asset(
                id=asset_id,
                org_id=org_id,
                parent_id=data.parent_id,
                path=path,
                asset_template_id=data.asset_template_id,
                location_id=data.location_id,
                identifier_code=identifier_code,
                status=_plain(data.status),
                category=_plain(data.category),
                custom_fields=custom_fields,
                **fields,
            )
            self.db.add(asset)
            self.db.flush()

            after = asset_snapshot(asset)
            self.audit.record(org_id, asset_id, AuditAction.create, new_value=after, actor_id=actor_id)

        self.db.refresh(asset)
        logger.info(f"Created asset {asset.id} at {asset.path} (org {org_id})")
        self._emit("created", org_id, asset.id, after=after, parent_id=str(data.parent_id) if data.parent_id else None)
        return asset

    def update(self, org_id, asset_id, data: AssetUpdate, actor_id: Optional[str] = None) -> Asset:
        org_id = as_uuid(org_id)
        changes = data.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_FIELDS:
            if field in changes and changes[field] is None:
                changes.pop(field)

        with self._transaction(identifier_code=changes.get("identifier_code")):
            asset = self._get_for_update(org_id, asset_id)
            before = asset_snapshot(asset)

            category = changes.get("category", asset.category)
            template_id = changes["asset_template_id"] if "asset_template_id" in changes else asset.asset_template_id
            if template_id is not None and {"asset_template_id", "category", "custom_fields"} & changes.keys():
                values = None
                if "custom_fields" in changes:
                    values = changes["custom_fields"] or {}
                elif "asset_template_id" in changes:
                    # stored values must satisfy the newly attached template
                    values = asset.custom_fields or {}
                self.validator.validate_template(org_id, template_id, category, values)

            if changes.get("location_id") is not None:
                self.validator.validate_location(org_id, changes["location_id"])

            if "identifier_code" in changes and changes["identifier_code"] != asset.identifier_code:
                self.validator.validate_identifier_code(org_id, changes["identifier_code"], exclude_id=asset.id)

            if "status" in changes:
                changes["status"] = transition(asset.status, changes["status"])

            # relocation first: the bulk rewrite must not see half-applied field changes
            rewritten = 0
            if "parent_id" in changes:
                rewritten = self._relocate(org_id, asset, changes.pop("parent_id"))

            for field, value in changes.items():
                setattr(asset, field, _plain(value))

            self.db.flush()
            after = asset_snapshot(asset)
            self.audit.record(org_id, asset.id, AuditAction.update,
                              old_value=before, new_value=after, actor_id=actor_id)

        self.db.refresh(asset)
        changed = sorted(k for k in after if k != "updated_at" and before.get(k) != after.get(k))
        logger.info(f"Updated asset {asset.id} fields {changed}; {rewritten} descendant path(s) rewritten")
        self._emit("updated", org_id, asset.id, before=before, after=after, changes=changed)
        return asset

    def move(self, org_id, asset_id, new_parent_id=None, new_location_id=UNSET,
             actor_id: Optional[str] = None) -> Asset:
        org_id = as_uuid(org_id)

        with self._transaction():
            asset = self._get_for_update(org_id, asset_id)
            before = asset_snapshot(asset)

            rewritten = self._relocate(org_id, asset, new_parent_id)

            if new_location_id is not UNSET:
                if new_location_id is not None:
                    self.validator.validate_location(org_id, new_location_id)
                asset.location_id = as_uuid(new_location_id)

            self.db.flush()
            after = asset_snapshot(asset)
            self.audit.record(org_id, asset.id, AuditAction.update,
                              old_value=before, new_value=after, actor_id=actor_id)

        self.db.refresh(asset)
        logger.info(
            f"Moved asset {asset.id} from {before['path']} to {asset.path}; "
            f"{rewritten} descendant path(s) rewritten")
        self._emit("moved", org_id, asset.id, before=before, after=after, descendants_rewritten=rewritten)
        return asset

    def _relocate(self, org_id, asset: Asset, new_parent_id) -> int:
        """Re-parent `asset` and rewrite its subtree; returns rewritten descendants."""
        old_path = asset.path

        if new_parent_id is None:
            new_path = compute_path(None, asset.id)
        else:
            parent = self.validator.validate_parent(org_id, new_parent_id, for_update=True)
            validate_move(old_path, parent.path, asset.id, parent.id)
            new_path = compute_path(parent.path, asset.id)

        rewritten = 0
        if new_path != old_path:
            rewritten = self._rewrite_descendant_paths(org_id, asset.id, old_path, new_path)

        asset.parent_id = as_uuid(new_parent_id)
        asset.path = new_path
        return rewritten

    def _rewrite_descendant_paths(self, org_id, asset_id, old_path: str, new_path: str) -> int:
        # one set-based UPDATE: path = new_path || substr(path, len(old_path) + 1)
        return (
            self.db.query(Asset)
            .filter(
                Asset.org_id == org_id,
                Asset.path.startswith(descendant_prefix(old_path), autoescape=True),
                Asset.id != asset_id,
            )
            .update(
                {Asset.path: literal(new_path).concat(func.substr(Asset.path, len(old_path) + 1))},
                synchronize_session="fetch",
            )
        )

    def set_status(self, org_id, asset_id, status: AssetStatus, actor_id: Optional[str] = None) -> Asset:
        org_id = as_uuid(org_id)

        with self._transaction():
            asset = self._get_for_update(org_id, asset_id)
            current = AssetStatus(asset.status)
            requested = transition(current, status)
            if requested == current:
                return asset

            before = asset_snapshot(asset)
            asset.status = requested.value
            self.db.flush()
            after = asset_snapshot(asset)
            self.audit.record(org_id, asset.id, AuditAction.update,
                              old_value=before, new_value=after, actor_id=actor_id)

        self.db.refresh(asset)
        logger.info(f"Asset {asset.id} status {current.value} -> {requested.value}")
        self._emit("status_changed", org_id, asset.id, before=before, after=after,
                   from_status=current.value, to_status=requested.value)
        return asset

    def delete(self, org_id, asset_id, cascade: bool = False, actor_id: Optional[str] = None) -> List[uuid.UUID]:
        """Hard delete; returns the ids removed (the asset first)."""
        org_id = as_uuid(org_id)

        with self._transaction():
            asset = self._get_for_update(org_id, asset_id)
            descendants = self._descendants_query(org_id, asset.path).with_for_update().all()

            if descendants and not cascade:
                raise HasChildrenError(asset.id, len(descendants))

            checked = [asset.id]
            if self.check_descendant_work:
                checked += [d.id for d in descendants]
            open_work = self.work_orders.count_open(org_id, checked)
            if open_work:
                raise HasActiveWorkError(asset.id, open_work)

            removed = [asset] + descendants
            removed_ids = [a.id for a in removed]
            snapshots = [(a.id, asset_snapshot(a)) for a in removed]

            # closed work orders keep their history without the asset
            (
                self.db.query(WorkOrder)
                .filter(WorkOrder.asset_id.in_(removed_ids))
                .update({WorkOrder.asset_id: None}, synchronize_session=False)
            )
            for record_id, snapshot in snapshots:
                self.audit.record(org_id, record_id, AuditAction.delete, old_value=snapshot, actor_id=actor_id)

            (
                self.db.query(Asset)
                .filter(Asset.org_id == org_id, Asset.id.in_(removed_ids))
                .delete(synchronize_session="fetch")
            )

        logger.info(f"Deleted asset {removed_ids[0]} and {len(removed_ids) - 1} descendant(s) (org {org_id})")
        self._emit("deleted", org_id, removed_ids[0], before=snapshots[0][1], cascade=cascade,
                   removed_ids=[str(i) for i in removed_ids])
        return removed_ids

    # ------------------------------------------------------------------
    # READS
    # ------------------------------------------------------------------

    def _descendants_query(self, org_id, path: str):
        return self.db.query(Asset).filter(
            Asset.org_id == org_id,
            Asset.path.startswith(descendant_prefix(path), autoescape=True),
        )

    def get(self, org_id, asset_id) -> Asset:
        asset = self.assets.get(asset_id, org_id)
        if not asset:
            raise AssetNotFoundError(asset_id)
        return asset

    def get_subtree(self, org_id, root_id=None) -> List[Asset]:
        org_id = as_uuid(org_id)
        query = self.db.query(Asset).filter(Asset.org_id == org_id)

        if root_id is not None:
            root = self.get(org_id, root_id)
            query = query.filter(or_(
                Asset.id == root.id,
                Asset.path.startswith(descendant_prefix(root.path), autoescape=True),
            ))

        return query.order_by(Asset.path.asc(), Asset.name.asc()).all()

    def get_tree(self, org_id, root_id=None) -> List[TreeNode]:
        return assemble(self.get_subtree(org_id, root_id), root_id)

    def get_ancestors(self, org_id, asset_id) -> List[Asset]:
        """Root-first chain of ancestors."""
        org_id = as_uuid(org_id)
        asset = self.get(org_id, asset_id)
        ids = ancestor_ids(asset.path)
        if not ids:
            return []

        rows = self.db.query(Asset).filter(
            Asset.org_id == org_id, Asset.id.in_([as_uuid(i) for i in ids])).all()
        by_id = {str(row.id): row for row in rows}
        return [by_id[i] for i in ids if i in by_id]

    def find(self, org_id, params: AssetsRequest) -> Tuple[List[Asset], int]:
        org_id = as_uuid(org_id)
        filters = [Asset.org_id == org_id]

        if params.search:
            search_term = f"%{params.search}%"
            filters.append(or_(
                Asset.name.ilike(search_term),
                Asset.identifier_code.ilike(search_term),
                Asset.serial_number.ilike(search_term),
            ))

        if params.status and params.status.lower() != "all":
            filters.append(func.lower(Asset.status) == params.status.lower())

        if params.category and params.category.lower() != "all":
            filters.append(func.lower(Asset.category) == params.category.lower())

        if params.location_id:
            filters.append(Asset.location_id == params.location_id)

        if params.template_id:
            filters.append(Asset.asset_template_id == params.template_id)

        if params.roots_only:
            filters.append(Asset.parent_id.is_(None))
        elif params.parent_id:
            filters.append(Asset.parent_id == params.parent_id)

        if params.has_warranty is True:
            filters.append(or_(Asset.warranty_expiry.isnot(None), Asset.warranty_lifetime.is_(True)))
        elif params.has_warranty is False:
            filters.append(and_(Asset.warranty_expiry.is_(None), Asset.warranty_lifetime.is_(False)))

        if params.identifier_code:
            filters.append(Asset.identifier_code == params.identifier_code)

        base_query = self.db.query(Asset).filter(*filters)
        total = base_query.with_entities(func.count(Asset.id)).scalar()

        sort_column = getattr(Asset, AssetSortField(params.sort_by).value)
        order = sort_column.asc() if params.sort_order == "asc" else sort_column.desc()
        query = base_query.order_by(order, Asset.id.asc()).offset(params.skip or 0)
        if params.limit:
            query = query.limit(params.limit)

        return query.all(), total

    def get_by_location(self, org_id, location_id) -> List[Asset]:
        return (
            self.db.query(Asset)
            .filter(Asset.org_id == as_uuid(org_id), Asset.location_id == as_uuid(location_id))
            .order_by(Asset.name.asc())
            .all()
        )

    def get_by_template(self, org_id, template_id) -> List[Asset]:
        return (
            self.db.query(Asset)
            .filter(Asset.org_id == as_uuid(org_id), Asset.asset_template_id == as_uuid(template_id))
            .order_by(Asset.name.asc())
            .all()
        )

    def _warranty_expiring_filter(self, days: int):
        today = self.today()
        until = today + timedelta(days=days)
        return and_(
            Asset.warranty_lifetime.is_(False),
            or_(
                and_(Asset.warranty_expiry >= today, Asset.warranty_expiry <= until),
                and_(Asset.secondary_warranty_expiry >= today, Asset.secondary_warranty_expiry <= until),
            ),
        )

    def get_warranty_expiring(self, org_id, days: Optional[int] = None) -> List[Asset]:
        days = self.warranty_lookahead_days if days is None else days
        return (
            self.db.query(Asset)
            .filter(Asset.org_id == as_uuid(org_id), self._warranty_expiring_filter(days))
            .order_by(Asset.warranty_expiry.asc(), Asset.secondary_warranty_expiry.asc())
            .all()
        )

    def get_statistics(self, org_id, lookahead_days: Optional[int] = None) -> Dict[str, Any]:
        org_id = as_uuid(org_id)
        lookahead_days = self.warranty_lookahead_days if lookahead_days is None else lookahead_days
        base_query = self.db.query(Asset).filter(Asset.org_id == org_id)

        totals = base_query.with_entities(
            func.count(Asset.id).label("total"),
            func.coalesce(func.sum(Asset.purchase_price), 0).label("total_value"),
        ).one()

        by_category = dict(
            base_query.with_entities(Asset.category, func.count(Asset.id))
            .group_by(Asset.category).all()
        )
        by_status = dict(
            base_query.with_entities(Asset.status, func.count(Asset.id))
            .group_by(Asset.status).all()
        )

        location_rows = (
            self.db.query(Asset.location_id, Location.name, func.count(Asset.id))
            .outerjoin(Location, Location.id == Asset.location_id)
            .filter(Asset.org_id == org_id, Asset.location_id.isnot(None))
            .group_by(Asset.location_id, Location.name)
            .order_by(func.count(Asset.id).desc())
            .all()
        )

        warranty_expiring = base_query.filter(
            self._warranty_expiring_filter(lookahead_days)).count()

        first_day_this_month = self.today().replace(day=1)
        first_day_last_month = first_day_this_month - relativedelta(months=1)
        added_last_month = base_query.filter(
            Asset.created_at >= datetime.combine(first_day_last_month, time.min),
            Asset.created_at < datetime.combine(first_day_this_month, time.min),
        ).count()

        return {
            "total": int(totals.total or 0),
            "by_category": {c.value: int(by_category.get(c.value, 0)) for c in AssetCategory if by_category.get(c.value)},
            "by_status": {s.value: int(by_status.get(s.value, 0)) for s in AssetStatus if by_status.get(s.value)},
            "by_location": [
                {"location_id": location_id, "location_name": name or "Unknown", "count": int(count)}
                for location_id, name, count in location_rows
            ],
            "warranty_expiring_soon": int(warranty_expiring),
            "total_value": float(totals.total_value or 0),
            "added_last_month": int(added_last_month),
        }


def get_hierarchy_store(db: Session = Depends(get_asset_db)) -> HierarchyStore:
    return HierarchyStore(db, publisher=shared_event_publisher())
