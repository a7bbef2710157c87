# app/models/asset_templates.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, String, Text, ForeignKey, JSON, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from shared.core.database import Base


class AssetTemplate(Base):
    __tablename__ = "asset_templates"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    org_id = Column(UUID(as_uuid=True), ForeignKey(
        "orgs.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    category = Column(String(32), nullable=False)
    description = Column(Text, nullable=True)
    # values copied into new assets' custom_fields
    default_fields = Column(JSON, nullable=True)
    # JSON Schema (draft 7) for an asset's custom_fields
    custom_fields = Column(JSON, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    org = relationship("Org", back_populates="asset_templates")
    assets = relationship("Asset", back_populates="template")
