"""
Root conftest.py - sets environment variables before any module imports.

Settings are read at import time, so the in-memory database URL and the JWT
secret must be in place before `shared.core.config` is imported anywhere.
"""

import os

os.environ["ASSET_DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-asset-service")
os.environ.setdefault("ASSET_EVENTS_WEBHOOK_URL", "")

import uuid
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shared.core.database import Base
from asset_service.app.models.orgs import Org
from asset_service.app.models.locations import Location
from asset_service.app.models.asset_templates import AssetTemplate
from asset_service.app.models.assets import Asset
from asset_service.app.models.work_orders import WorkOrder
from asset_service.app.models.audit_logs import AuditLog
from asset_service.app.crud.asset_hierarchy.events import EventPublisher
from asset_service.app.crud.asset_hierarchy.hierarchy_store import HierarchyStore
from asset_service.app.crud.asset_hierarchy.path_codec import compute_path
from asset_service.app.enum.asset_enum import AssetCategory
from asset_service.app.schemas.assets_schemas import AssetCreate


# ============================================
# Doubles
# ============================================

class RecordingPublisher(EventPublisher):
    """Keeps every published event in memory."""

    def __init__(self):
        self.events = []

    def publish(self, event):
        self.events.append(event)

    @property
    def types(self):
        return [e.type for e in self.events]


class FailingPublisher(EventPublisher):
    def publish(self, event):
        raise ConnectionError("event sink unreachable")


# ============================================
# Database
# ============================================

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


# ============================================
# Tenants and reference data
# ============================================

def _add(db, obj):
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@pytest.fixture
def org(db):
    return _add(db, Org(name="Acme Facilities"))


@pytest.fixture
def other_org(db):
    return _add(db, Org(name="Globex"))


@pytest.fixture
def location(db, org):
    return _add(db, Location(org_id=org.id, name="HQ Floor 1"))


@pytest.fixture
def foreign_location(db, other_org):
    return _add(db, Location(org_id=other_org.id, name="Globex Warehouse"))


@pytest.fixture
def laptop_template(db, org):
    return _add(db, AssetTemplate(
        org_id=org.id,
        name="Laptop",
        category=AssetCategory.hardware.value,
        default_fields={"ram_gb": 16},
        custom_fields={
            "type": "object",
            "properties": {
                "ram_gb": {"type": "integer", "minimum": 1},
                "os": {"type": "string", "enum": ["linux", "macos", "windows"]},
            },
            "required": ["ram_gb"],
        },
    ))


@pytest.fixture
def work_order_factory(db, org):
    def make(asset, status="open", title="Inspect"):
        return _add(db, WorkOrder(org_id=org.id, asset_id=asset.id, title=title, status=status))
    return make


# ============================================
# Store
# ============================================

@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def store(db, publisher):
    return HierarchyStore(db, publisher=publisher, today=lambda: date(2026, 10, 19))


@pytest.fixture
def make_asset(store, org):
    """Create an asset through the store; `parent` may be an Asset or None."""
    def make(name, parent=None, **fields):
        fields.setdefault("category", AssetCategory.hardware)
        data = AssetCreate(name=name, parent_id=parent.id if parent is not None else None, **fields)
        return store.create(org.id, data)
    return make


def assert_paths_consistent(db, org_id):
    """Every asset's path equals its parent's path plus its own id."""
    db.expire_all()
    assets = {a.id: a for a in db.query(Asset).filter(Asset.org_id == org_id).all()}
    for asset in assets.values():
        parent = assets.get(asset.parent_id) if asset.parent_id else None
        if asset.parent_id is not None:
            assert parent is not None, f"{asset.name} points at a missing parent"
        expected = compute_path(parent.path if parent else None, asset.id)
        assert asset.path == expected, f"{asset.name}: {asset.path} != {expected}"


@pytest.fixture
def check_paths(db):
    return lambda org_id: assert_paths_consistent(db, org_id)


@pytest.fixture
def failing_publisher():
    return FailingPublisher()


@pytest.fixture
def random_id():
    return uuid.uuid4()
