"""Visual template model: colors, layout variants, toggles and company profile."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func

from backend.app.db.base_class import Base


class InvoiceTemplate(Base):
    __tablename__ = "templates"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)

    primary_color = Column(String(32), nullable=False, default="#1e3a8a")
    secondary_color = Column(String(32), nullable=False, default="#6b7280")
    table_color = Column(String(32), nullable=False, default="#f8f9fa")

    header_position = Column(String(16), nullable=False, default="center")
    footer_design = Column(String(16), nullable=False, default="simple")
    footer_position = Column(String(16), nullable=False, default="center")
    footer_enabled = Column(Boolean, nullable=False, default=True)

    watermark_text = Column(String(255), nullable=True)
    watermark_enabled = Column(Boolean, nullable=False, default=False)

    show_gst = Column(Boolean, nullable=False, default=True)
    show_contact = Column(Boolean, nullable=False, default=True)
    show_logo = Column(Boolean, nullable=False, default=True)

    company_name = Column(String(255), nullable=True)
    company_address = Column(String(500), nullable=True)
    company_mobile = Column(String(64), nullable=True)
    company_gst_number = Column(String(64), nullable=True)
    logo_url = Column(String(1024), nullable=True)

    font_size_header = Column(Integer, nullable=False, default=18)
    font_size_body = Column(Integer, nullable=False, default=11)
    font_size_footer = Column(Integer, nullable=False, default=9)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
