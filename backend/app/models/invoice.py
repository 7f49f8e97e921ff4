"""Invoice header model; line items live in invoice_items."""

import uuid

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, String
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base
from backend.app.db.types import ExactDecimal


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    invoice_number = Column(String(64), nullable=False, index=True)
    party_name = Column(String(255), nullable=False, default="")
    date = Column(Date, nullable=True)

    # Derived from items; rewritten on every save.
    subtotal = Column(ExactDecimal(64), nullable=False, default=0)
    gst = Column(ExactDecimal(64), nullable=False, default=0)
    total = Column(ExactDecimal(64), nullable=False, default=0)
    tax_enabled = Column(Boolean, nullable=False, default=True)
    tags = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.position",
    )
