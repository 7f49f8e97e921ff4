"""Invoice routes: CRUD, preview, export and share."""

from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from backend.app.core.settings import get_settings
from backend.app.core.time import utc_now
from backend.app.crud.crud_invoice import SORT_FIELDS, invoice_crud
from backend.app.crud.crud_invoice_template import invoice_template_crud
from backend.app.db.session import get_db
from backend.app.dependencies.services import get_export_service
from backend.app.schemas.document import InvoiceDocument, TemplateConfig
from backend.app.schemas.export import ShareRead, ShareRequest
from backend.app.schemas.invoice import InvoiceCreate, InvoiceRead, InvoiceUpdate
from backend.app.services.export_pipeline import ExportService, export_filename
from backend.app.services.invoices import document_from_payload
from backend.app.services.render_pipeline import VisualNode, project

router = APIRouter(prefix="/invoices", tags=["invoices"])


def _get_document(db: Session, invoice_id: str) -> InvoiceDocument:
    doc = invoice_crud.get(db, invoice_id=invoice_id)
    if not doc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return doc


def _get_template(db: Session, template_id: str | None) -> TemplateConfig:
    if template_id is None:
        return invoice_template_crud.get_default(db)
    template = invoice_template_crud.get(db, template_id=template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice template not found")
    return template


def _download(data: bytes, media_type: str, filename: str) -> Response:
    return Response(
        content=data,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/", response_model=List[InvoiceRead])
async def list_invoices(
    search: str | None = None,
    skip: int = 0,
    limit: int = 50,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    db: Session = Depends(get_db),
):
    if sort_by not in SORT_FIELDS:
        raise HTTPException(status_code=400, detail="Invalid sort_by value")
    sort_order_normalized = (sort_order or "desc").lower()
    if sort_order_normalized not in {"asc", "desc"}:
        raise HTTPException(status_code=400, detail="Invalid sort_order value")
    return invoice_crud.get_multi(
        db, search=search, skip=skip, limit=limit, sort_by=sort_by, sort_order=sort_order_normalized
    )


@router.post("/", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
async def create_invoice(payload: InvoiceCreate, db: Session = Depends(get_db)):
    doc = document_from_payload(payload, payload.items, utc_now())
    return invoice_crud.create(db, doc=doc)


@router.get("/{invoice_id}", response_model=InvoiceRead)
async def get_invoice(invoice_id: str, db: Session = Depends(get_db)):
    return _get_document(db, invoice_id)


@router.put("/{invoice_id}", response_model=InvoiceRead)
async def update_invoice(invoice_id: str, payload: InvoiceUpdate, db: Session = Depends(get_db)):
    row = invoice_crud.get_row(db, invoice_id=invoice_id)
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    doc = document_from_payload(payload, payload.items, utc_now(), invoice_id=invoice_id)
    return invoice_crud.update(db, db_obj=row, doc=doc)


@router.delete("/{invoice_id}", response_model=InvoiceRead)
async def delete_invoice(invoice_id: str, db: Session = Depends(get_db)):
    row = invoice_crud.get_row(db, invoice_id=invoice_id)
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found")
    return invoice_crud.delete(db, db_obj=row)


@router.get("/{invoice_id}/preview", response_model=VisualNode)
async def preview_invoice(
    invoice_id: str,
    template_id: str | None = None,
    language: Literal["en", "gu"] = "en",
    db: Session = Depends(get_db),
):
    doc = _get_document(db, invoice_id)
    template = _get_template(db, template_id)
    return project(doc, template, language=language, tax_rate=get_settings().default_tax_rate)


@router.get("/{invoice_id}/export/pdf")
def export_invoice_pdf(
    invoice_id: str,
    template_id: str | None = None,
    language: Literal["en", "gu"] = "en",
    db: Session = Depends(get_db),
    exporter: ExportService = Depends(get_export_service),
):
    doc = _get_document(db, invoice_id)
    pdf = exporter.export_pdf(doc, _get_template(db, template_id), language=language)
    return _download(pdf.data, pdf.content_type, export_filename(doc, "pdf", language))


@router.get("/{invoice_id}/export/doc")
def export_invoice_document(
    invoice_id: str,
    template_id: str | None = None,
    language: Literal["en", "gu"] = "en",
    db: Session = Depends(get_db),
    exporter: ExportService = Depends(get_export_service),
):
    doc = _get_document(db, invoice_id)
    document = exporter.export_document(doc, _get_template(db, template_id), language=language)
    return _download(document.data, document.content_type, export_filename(doc, "doc", language))


@router.post("/{invoice_id}/share", response_model=ShareRead)
def share_invoice(
    invoice_id: str,
    payload: ShareRequest,
    db: Session = Depends(get_db),
    exporter: ExportService = Depends(get_export_service),
):
    doc = _get_document(db, invoice_id)
    template = _get_template(db, payload.template_id)
    result = exporter.share(doc, template, language=payload.language, message_template=payload.message_template)
    return ShareRead(pdf_url=result.pdf_url, message=result.message, whatsapp_url=result.whatsapp_url)
