"""CRUD operations for cached description translations."""

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.core.errors import PersistenceConflict
from backend.app.models.item_description import ItemDescription
from backend.app.schemas.document import TranslationEntry
from backend.app.services.storage_mapping import translation_from_row

MAX_SUGGESTIONS = 20


class CRUDItemDescription:
    def create(
        self,
        db: Session,
        *,
        canonical_text: str,
        translated_text: str | None = None,
        mixed_script_text: str | None = None,
    ) -> TranslationEntry:
        """Insert a new entry; a duplicate canonical text raises PersistenceConflict."""
        obj = ItemDescription(
            english_text=canonical_text,
            gujarati_text=translated_text or canonical_text,
            ginlish_text=mixed_script_text,
        )
        db.add(obj)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise PersistenceConflict(
                "Description already exists", {"canonical_text": canonical_text}
            ) from exc
        db.refresh(obj)
        return translation_from_row(obj)

    def get_row(self, db: Session, *, entry_id: str) -> Optional[ItemDescription]:
        return db.query(ItemDescription).filter(ItemDescription.id == entry_id).first()

    def get_by_canonical(self, db: Session, *, text: str) -> Optional[TranslationEntry]:
        row = db.query(ItemDescription).filter(ItemDescription.english_text == text).first()
        return translation_from_row(row) if row else None

    def get_by_translated(self, db: Session, *, text: str) -> Optional[TranslationEntry]:
        row = db.query(ItemDescription).filter(ItemDescription.gujarati_text == text).first()
        return translation_from_row(row) if row else None

    def search(self, db: Session, *, fragment: str = "", limit: int | None = None) -> List[TranslationEntry]:
        query = db.query(ItemDescription)
        if fragment.strip():
            pattern = f"%{fragment.strip()}%"
            query = query.filter(
                or_(ItemDescription.english_text.ilike(pattern), ItemDescription.gujarati_text.ilike(pattern))
            )
        query = query.order_by(ItemDescription.created_at.desc(), ItemDescription.english_text.asc())
        if limit is not None:
            query = query.limit(max(0, min(limit, MAX_SUGGESTIONS)))
        return [translation_from_row(row) for row in query.all()]

    def update(
        self,
        db: Session,
        *,
        db_obj: ItemDescription,
        canonical_text: str,
        translated_text: str | None = None,
        mixed_script_text: str | None = None,
    ) -> TranslationEntry:
        db_obj.english_text = canonical_text
        db_obj.gujarati_text = translated_text or canonical_text
        db_obj.ginlish_text = mixed_script_text
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise PersistenceConflict(
                "Another description already uses this text", {"canonical_text": canonical_text}
            ) from exc
        db.refresh(db_obj)
        return translation_from_row(db_obj)

    def delete(self, db: Session, *, db_obj: ItemDescription) -> TranslationEntry:
        entry = translation_from_row(db_obj)
        db.delete(db_obj)
        db.commit()
        return entry


item_description_crud = CRUDItemDescription()
