"""Cached line-item description translations, one row per canonical English text."""

import uuid

from sqlalchemy import Column, DateTime, String, UniqueConstraint, func

from backend.app.db.base_class import Base


class ItemDescription(Base):
    __tablename__ = "item_descriptions"
    __table_args__ = (UniqueConstraint("english_text", name="uq_item_descriptions_english_text"),)

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    english_text = Column(String(500), nullable=False)
    gujarati_text = Column(String(500), nullable=False)
    ginlish_text = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
