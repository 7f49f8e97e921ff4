"""CRUD operations for invoice templates."""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.core.errors import InvariantViolation
from backend.app.models.invoice_template import InvoiceTemplate
from backend.app.schemas.document import TemplateConfig
from backend.app.schemas.invoice_template import TemplateWrite
from backend.app.services.storage_mapping import template_columns, template_from_row


class CRUDInvoiceTemplate:
    def create(self, db: Session, *, obj_in: TemplateWrite) -> TemplateConfig:
        config = TemplateConfig(**obj_in.model_dump())
        obj = InvoiceTemplate(**template_columns(config))
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return template_from_row(obj)

    def get_row(self, db: Session, *, template_id: str) -> Optional[InvoiceTemplate]:
        return db.query(InvoiceTemplate).filter(InvoiceTemplate.id == template_id).first()

    def get(self, db: Session, *, template_id: str) -> Optional[TemplateConfig]:
        obj = self.get_row(db, template_id=template_id)
        return template_from_row(obj) if obj else None

    def get_multi(self, db: Session) -> List[TemplateConfig]:
        rows = db.query(InvoiceTemplate).order_by(InvoiceTemplate.created_at.desc(), InvoiceTemplate.name.asc()).all()
        return [template_from_row(row) for row in rows]

    def get_default(self, db: Session) -> TemplateConfig:
        """The template used when a render does not name one; seeds it if the table is empty."""
        row = db.query(InvoiceTemplate).order_by(InvoiceTemplate.created_at.asc()).first()
        if row is None:
            return self.create(db, obj_in=TemplateWrite())
        return template_from_row(row)

    def update(self, db: Session, *, db_obj: InvoiceTemplate, obj_in: TemplateWrite) -> TemplateConfig:
        config = TemplateConfig(id=db_obj.id, **obj_in.model_dump())
        for field, value in template_columns(config).items():
            setattr(db_obj, field, value)
        db.commit()
        db.refresh(db_obj)
        return template_from_row(db_obj)

    def set_logo_url(self, db: Session, *, db_obj: InvoiceTemplate, logo_url: str) -> TemplateConfig:
        db_obj.logo_url = logo_url
        db.commit()
        db.refresh(db_obj)
        return template_from_row(db_obj)

    def delete(self, db: Session, *, db_obj: InvoiceTemplate) -> TemplateConfig:
        if db.query(InvoiceTemplate).count() <= 1:
            raise InvariantViolation("At least one template must exist", {"template_id": db_obj.id})
        config = template_from_row(db_obj)
        db.delete(db_obj)
        db.commit()
        return config


invoice_template_crud = CRUDInvoiceTemplate()
