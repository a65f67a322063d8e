"""Drug model (a pharmacy's listing for one medication)"""
import uuid

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Numeric,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    CheckConstraint,
    Index,
)
from sqlalchemy.sql import func

from stocmed.core.database import Base


class Drug(Base):
    __tablename__ = "drugs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    pharmacy_id = Column(String(36), ForeignKey("pharmacies.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    generic_name = Column(String(255))
    brand_name = Column(String(255))
    category = Column(String(100), index=True)
    dosage_form = Column(String(50))
    strength = Column(String(50))
    description = Column(Text)

    price = Column(Numeric(12, 2), nullable=False)
    quantity_in_stock = Column(Integer, nullable=False, default=0)
    low_stock_threshold = Column(Integer, default=10)
    requires_prescription = Column(Boolean, nullable=False, default=False)
    manufacturer = Column(String(255))
    expiry_date = Column(Date)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("quantity_in_stock >= 0", name="ck_drugs_quantity_non_negative"),
        CheckConstraint("price >= 0", name="ck_drugs_price_non_negative"),
        Index("ix_drugs_updated_at", "updated_at"),
    )
