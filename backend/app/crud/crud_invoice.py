"""CRUD operations for invoices and their line items."""

from typing import List, Optional

from sqlalchemy import Numeric, cast, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.core.errors import PersistenceConflict
from backend.app.core.logging import get_logger
from backend.app.core.settings import get_settings
from backend.app.models.invoice import Invoice
from backend.app.models.invoice_item import InvoiceItem
from backend.app.schemas.document import InvoiceDocument
from backend.app.services.document_model import ensure_persistable, recompute_totals
from backend.app.services.storage_mapping import invoice_columns, invoice_from_row, line_item_columns

logger = get_logger(__name__)

SORT_FIELDS = {
    "created_at": Invoice.created_at,
    "date": Invoice.date,
    "invoice_number": Invoice.invoice_number,
    "party_name": Invoice.party_name,
    "total": cast(Invoice.total, Numeric),
}


class CRUDInvoice:
    def __init__(self, tax_rate: int = 18):
        self.tax_rate = tax_rate

    def _fresh(self, doc: InvoiceDocument) -> InvoiceDocument:
        ensure_persistable(doc)
        return recompute_totals(doc, tax_rate=self.tax_rate)

    def _write_items(self, row: Invoice, doc: InvoiceDocument) -> None:
        for position, item in enumerate(doc.items):
            row.items.append(InvoiceItem(**line_item_columns(item, position, row.id)))

    def _commit(self, db: Session, doc: InvoiceDocument) -> None:
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            # usually a client-supplied line item id that belongs to another invoice
            raise PersistenceConflict(
                "Invoice could not be saved; a line item id is already in use",
                {"invoice_number": doc.invoice_number},
            ) from exc

    def to_document(self, row: Invoice) -> InvoiceDocument:
        return recompute_totals(invoice_from_row(row), tax_rate=self.tax_rate)

    def create(self, db: Session, *, doc: InvoiceDocument) -> InvoiceDocument:
        doc = self._fresh(doc)
        row = Invoice(**invoice_columns(doc))
        db.add(row)
        db.flush()  # invoice id must exist before items reference it
        self._write_items(row, doc)
        self._commit(db, doc)
        db.refresh(row)
        logger.info("Created invoice %s (%s item(s))", doc.invoice_number, len(doc.items))
        return self.to_document(row)

    def get_row(self, db: Session, *, invoice_id: str) -> Optional[Invoice]:
        return db.query(Invoice).filter(Invoice.id == invoice_id).first()

    def get(self, db: Session, *, invoice_id: str) -> Optional[InvoiceDocument]:
        row = self.get_row(db, invoice_id=invoice_id)
        return self.to_document(row) if row else None

    def get_multi(
        self,
        db: Session,
        *,
        search: str | None = None,
        skip: int = 0,
        limit: int = 50,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> List[InvoiceDocument]:
        query = db.query(Invoice)
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(Invoice.invoice_number.ilike(pattern), Invoice.party_name.ilike(pattern)))
        column = SORT_FIELDS[sort_by]
        if sort_order == "asc":
            query = query.order_by(column.asc(), Invoice.id.asc())
        else:
            query = query.order_by(column.desc(), Invoice.id.desc())
        return [self.to_document(row) for row in query.offset(skip).limit(limit).all()]

    def update(self, db: Session, *, db_obj: Invoice, doc: InvoiceDocument) -> InvoiceDocument:
        """Replace header fields and all line items of an existing invoice."""
        doc = self._fresh(doc.model_copy(update={"id": db_obj.id}))
        for field, value in invoice_columns(doc).items():
            setattr(db_obj, field, value)
        # delete-orphan removes the old rows; flushing first frees their ids for re-use
        db_obj.items.clear()
        db.flush()
        self._write_items(db_obj, doc)
        self._commit(db, doc)
        db.refresh(db_obj)
        return self.to_document(db_obj)

    def delete(self, db: Session, *, db_obj: Invoice) -> InvoiceDocument:
        doc = self.to_document(db_obj)
        db.delete(db_obj)
        db.commit()
        return doc


invoice_crud = CRUDInvoice(tax_rate=get_settings().default_tax_rate)
