# app/models/assets.py
import uuid
from sqlalchemy import Boolean, Column, String, Text, Date, Numeric, ForeignKey, JSON, TIMESTAMP, UniqueConstraint, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Asset(Base):
    __tablename__ = "assets"
    __table_args__ = (
        UniqueConstraint('org_id', 'identifier_code', name='uix_org_identifier_code'),
        UniqueConstraint('org_id', 'path', name='uix_org_path'),
        Index('ix_assets_org_path', 'org_id', 'path'),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    org_id = Column(UUID(as_uuid=True), ForeignKey(
        "orgs.id", ondelete="CASCADE"), nullable=False)
    # descendants are removed by the hierarchy store, not by the database
    parent_id = Column(UUID(as_uuid=True), ForeignKey(
        "assets.id"), nullable=True, index=True)
    # materialized path: /<root id>/.../<own id>
    path = Column(String(2048), nullable=False)

    asset_template_id = Column(UUID(as_uuid=True), ForeignKey(
        "asset_templates.id", ondelete="SET NULL"), nullable=True)
    location_id = Column(UUID(as_uuid=True), ForeignKey(
        "locations.id", ondelete="SET NULL"), nullable=True)

    name = Column(String(200), nullable=False)
    category = Column(String(32), nullable=False)
    status = Column(String(24), nullable=False, default="operational")
    identifier_code = Column(String(64), nullable=False)

    manufacturer = Column(String(128))
    model_number = Column(String(128))
    serial_number = Column(String(128))
    purchase_date = Column(Date)
    purchase_price = Column(Numeric(14, 2))
    description = Column(Text)
    link = Column(String(500))
    tags = Column(JSON)
    warranty_scope = Column(String(200))
    warranty_expiry = Column(Date)
    warranty_lifetime = Column(Boolean, default=False, nullable=False)
    secondary_warranty_scope = Column(String(200))
    secondary_warranty_expiry = Column(Date)
    custom_fields = Column(JSON)

    created_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), nullable=False)
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(
    ), onupdate=func.now(), nullable=False)

    parent = relationship("Asset", remote_side=[id], back_populates="children")
    children = relationship("Asset", back_populates="parent", order_by="Asset.name")
    location = relationship("Location", back_populates="assets")
    template = relationship("AssetTemplate", back_populates="assets")
    work_orders = relationship("WorkOrder", back_populates="asset")
