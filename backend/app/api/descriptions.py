"""Description cache routes: browsing, editing and on-demand translation."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.errors import PersistenceConflict, TranslationUnavailable
from backend.app.core.logging import get_logger
from backend.app.crud.crud_item_description import item_description_crud
from backend.app.db.session import get_db
from backend.app.dependencies.services import get_translator
from backend.app.schemas.item_description import (
    DescriptionCreate,
    DescriptionRead,
    DescriptionUpdate,
    EnhanceRequest,
    EnhanceResponse,
    ResolveRequest,
    ResolveResponse,
)
from backend.app.services.bilingual_resolver import DEFAULT_SUGGESTION_LIMIT, BilingualTextResolver
from backend.app.services.script_detection import is_target_language
from backend.app.services.storage_mapping import translation_from_row
from backend.app.services.translation_client import TranslationService

logger = get_logger(__name__)

router = APIRouter(prefix="/descriptions", tags=["descriptions"])


def get_resolver(
    db: Session = Depends(get_db), translator: TranslationService = Depends(get_translator)
) -> BilingualTextResolver:
    return BilingualTextResolver(db, translator)


@router.get("/", response_model=List[DescriptionRead])
async def list_descriptions(search: str = "", db: Session = Depends(get_db)):
    return item_description_crud.search(db, fragment=search)


@router.get("/suggestions", response_model=List[DescriptionRead])
async def suggest_descriptions(
    q: str = "", limit: int = DEFAULT_SUGGESTION_LIMIT, resolver: BilingualTextResolver = Depends(get_resolver)
):
    return resolver.search_similar(q, limit=limit)


@router.post("/resolve", response_model=ResolveResponse)
def resolve_description(payload: ResolveRequest, resolver: BilingualTextResolver = Depends(get_resolver)):
    try:
        entry = resolver.resolve_or_create(payload.text)
    except TranslationUnavailable as exc:
        logger.warning("Translation unavailable for %r: %s", payload.text, exc.message)
        return ResolveResponse(canonical_text=payload.text, warning=exc.message)
    return ResolveResponse(
        canonical_text=entry.canonical_text,
        translated_text=entry.translated_text,
        mixed_script_text=entry.mixed_script_text,
        entry_id=entry.id,
    )


@router.post("/variants", response_model=ResolveResponse)
def resolve_description_variants(payload: ResolveRequest, resolver: BilingualTextResolver = Depends(get_resolver)):
    try:
        variants = resolver.resolve_all_variants(payload.text)
    except TranslationUnavailable as exc:
        logger.warning("Translation unavailable for %r: %s", payload.text, exc.message)
        source = "gujarati" if is_target_language(payload.text) else "english"
        return ResolveResponse(canonical_text=payload.text, source_language=source, warning=exc.message)
    return ResolveResponse(
        canonical_text=variants.canonical,
        translated_text=variants.translated,
        mixed_script_text=variants.mixed_script,
        source_language=variants.source_language,
    )


@router.post("/enhance", response_model=EnhanceResponse)
def enhance_description(payload: EnhanceRequest, translator: TranslationService = Depends(get_translator)):
    try:
        enhanced = translator.enhance(payload.text)
    except TranslationUnavailable as exc:
        logger.warning("Enhancement unavailable: %s", exc.message)
        return EnhanceResponse(text=payload.text, warning=exc.message)
    return EnhanceResponse(text=payload.text, enhanced_text=enhanced)


@router.post("/", response_model=DescriptionRead, status_code=status.HTTP_201_CREATED)
async def create_description(payload: DescriptionCreate, db: Session = Depends(get_db)):
    try:
        return item_description_crud.create(
            db,
            canonical_text=payload.canonical_text.strip(),
            translated_text=payload.translated_text,
            mixed_script_text=payload.mixed_script_text,
        )
    except PersistenceConflict as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.message) from exc


@router.get("/{entry_id}", response_model=DescriptionRead)
async def get_description(entry_id: str, db: Session = Depends(get_db)):
    row = item_description_crud.get_row(db, entry_id=entry_id)
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Description not found")
    return translation_from_row(row)


@router.put("/{entry_id}", response_model=DescriptionRead)
async def update_description(entry_id: str, payload: DescriptionUpdate, db: Session = Depends(get_db)):
    row = item_description_crud.get_row(db, entry_id=entry_id)
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Description not found")
    try:
        return item_description_crud.update(
            db,
            db_obj=row,
            canonical_text=payload.canonical_text.strip(),
            translated_text=payload.translated_text,
            mixed_script_text=payload.mixed_script_text,
        )
    except PersistenceConflict as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=exc.message) from exc


@router.delete("/{entry_id}", response_model=DescriptionRead)
async def delete_description(entry_id: str, db: Session = Depends(get_db)):
    row = item_description_crud.get_row(db, entry_id=entry_id)
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Description not found")
    return item_description_crud.delete(db, db_obj=row)
