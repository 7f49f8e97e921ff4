"""Invoice line item model."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base
from backend.app.db.types import ExactDecimal


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    invoice_id = Column(String(36), ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    description = Column(String(500), nullable=False, default="")
    gujarati_description = Column(String(500), nullable=True)
    quantity = Column(ExactDecimal(64), nullable=False, default=1)
    unit = Column(String(32), nullable=False, default="pcs")
    rate = Column(ExactDecimal(64), nullable=False, default=0)
    total = Column(ExactDecimal(64), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    invoice = relationship("Invoice", back_populates="items")
