"""Invoice template endpoints."""

from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from backend.app.core.errors import InvariantViolation
from backend.app.core.logging import get_logger
from backend.app.core.time import utc_now
from backend.app.crud.crud_invoice_template import invoice_template_crud
from backend.app.db.session import get_db
from backend.app.dependencies.services import get_logo_storage
from backend.app.schemas.document import TemplateConfig
from backend.app.schemas.invoice_template import TemplateWrite
from backend.app.services.object_storage import ObjectStorage
from backend.app.services.template_assets import upload_logo

logger = get_logger(__name__)

router = APIRouter(prefix="/templates", tags=["templates"])


@router.post("/", response_model=TemplateConfig, status_code=status.HTTP_201_CREATED)
async def create_invoice_template(template_in: TemplateWrite, db: Session = Depends(get_db)):
    return invoice_template_crud.create(db, obj_in=template_in)


@router.get("/", response_model=List[TemplateConfig])
async def list_invoice_templates(db: Session = Depends(get_db)):
    return invoice_template_crud.get_multi(db)


@router.get("/default", response_model=TemplateConfig)
async def get_default_invoice_template(db: Session = Depends(get_db)):
    return invoice_template_crud.get_default(db)


@router.get("/{template_id}", response_model=TemplateConfig)
async def get_invoice_template(template_id: str, db: Session = Depends(get_db)):
    template = invoice_template_crud.get(db, template_id=template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice template not found")
    return template


@router.put("/{template_id}", response_model=TemplateConfig)
async def update_invoice_template(template_id: str, template_in: TemplateWrite, db: Session = Depends(get_db)):
    template = invoice_template_crud.get_row(db, template_id=template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice template not found")
    return invoice_template_crud.update(db, db_obj=template, obj_in=template_in)


@router.delete("/{template_id}", response_model=TemplateConfig)
async def delete_invoice_template(template_id: str, db: Session = Depends(get_db)):
    template = invoice_template_crud.get_row(db, template_id=template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice template not found")
    try:
        return invoice_template_crud.delete(db, db_obj=template)
    except InvariantViolation as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.message) from exc


@router.post("/{template_id}/logo", response_model=TemplateConfig)
async def upload_template_logo(
    template_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_logo_storage),
):
    template = invoice_template_crud.get_row(db, template_id=template_id)
    if not template:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice template not found")
    data = await file.read()
    logo_url = upload_logo(storage, data, file.content_type, file.filename, utc_now())
    logger.info("Template %s logo set to %s", template_id, logo_url)
    return invoice_template_crud.set_logo_url(db, db_obj=template, logo_url=logo_url)
