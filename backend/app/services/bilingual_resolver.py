"""Find or create the Gujarati counterpart of a line-item description.

The description store holds at most one entry per canonical (English) text,
enforced by a unique constraint. Two editors can both miss the cache and
translate the same text; the slower insert then fails with
PersistenceConflict and the resolver re-reads the winner's entry instead of
erroring.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.core.errors import PersistenceConflict, TranslationUnavailable
from backend.app.core.logging import get_logger
from backend.app.crud.crud_item_description import CRUDItemDescription, item_description_crud
from backend.app.schemas.document import ResolvedVariants, TranslationEntry
from backend.app.services.script_detection import is_target_language
from backend.app.services.translation_client import TranslationService

logger = get_logger(__name__)

DEFAULT_SUGGESTION_LIMIT = 5


class BilingualTextResolver:
    def __init__(self, db: Session, translator: TranslationService, store: CRUDItemDescription = item_description_crud):
        self.db = db
        self.translator = translator
        self.store = store

    def lookup_exact(self, text: str) -> Optional[TranslationEntry]:
        return self.store.get_by_canonical(self.db, text=text)

    def search_similar(self, fragment: str, limit: int = DEFAULT_SUGGESTION_LIMIT) -> List[TranslationEntry]:
        """Autocomplete suggestions. Callers debounce; this does no rate limiting."""
        if not fragment or not fragment.strip():
            return []
        return self.store.search(self.db, fragment=fragment, limit=limit)

    def _insert_or_refetch(self, canonical: str, translated: str, mixed_script: str | None) -> TranslationEntry:
        try:
            return self.store.create(
                self.db, canonical_text=canonical, translated_text=translated, mixed_script_text=mixed_script
            )
        except PersistenceConflict:
            existing = self.lookup_exact(canonical)
            if existing is None:
                raise
            logger.info("Description %r was created concurrently; using the stored entry", canonical)
            return existing

    def resolve_or_create(self, text: str) -> TranslationEntry:
        """Return the cached entry for ``text`` or translate and store a new one.

        Raises TranslationUnavailable when the text is new and the service fails;
        nothing is stored in that case.
        """
        canonical = text.strip()
        if not canonical:
            raise TranslationUnavailable("Text is required")

        cached = self.lookup_exact(canonical)
        if cached is not None:
            return cached

        translated = self.translator.translate(canonical, source_hint="en", target="gu")
        return self._insert_or_refetch(canonical, translated, None)

    def resolve_all_variants(self, text: str) -> ResolvedVariants:
        """Produce canonical, Gujarati and mixed-script forms of ``text``.

        Input that is predominantly Gujarati is treated as the translated form and
        the English and Ginlish forms are back-filled; anything else is treated as
        canonical and translated forward.
        """
        value = text.strip()
        if not value:
            raise TranslationUnavailable("Text is required")

        if is_target_language(value):
            cached = self.store.get_by_translated(self.db, text=value)
            if cached is not None and cached.mixed_script_text:
                return ResolvedVariants(
                    canonical=cached.canonical_text,
                    translated=cached.translated_text,
                    mixed_script=cached.mixed_script_text,
                    source_language="gujarati",
                )
            canonical = self.translator.translate(value, source_hint="gu", target="en")
            mixed = self.translator.translate(value, source_hint="gu", target="gu-Latn")
            entry = self._insert_or_refetch(canonical, value, mixed)
            return ResolvedVariants(
                canonical=entry.canonical_text,
                translated=entry.translated_text,
                mixed_script=entry.mixed_script_text or mixed,
                source_language="gujarati",
            )

        cached = self.lookup_exact(value)
        if cached is not None and cached.mixed_script_text:
            return ResolvedVariants(
                canonical=cached.canonical_text,
                translated=cached.translated_text,
                mixed_script=cached.mixed_script_text,
            )
        translated = cached.translated_text if cached else self.translator.translate(value, source_hint="en", target="gu")
        mixed = self.translator.translate(value, source_hint="en", target="gu-Latn")
        if cached is not None:
            entry = self._fill_mixed_script(cached, mixed)
        else:
            entry = self._insert_or_refetch(value, translated, mixed)
        return ResolvedVariants(
            canonical=entry.canonical_text,
            translated=entry.translated_text,
            mixed_script=entry.mixed_script_text or mixed,
        )

    def _fill_mixed_script(self, entry: TranslationEntry, mixed: str) -> TranslationEntry:
        row = self.store.get_row(self.db, entry_id=entry.id)
        if row is None:
            return entry
        return self.store.update(
            self.db,
            db_obj=row,
            canonical_text=entry.canonical_text,
            translated_text=entry.translated_text,
            mixed_script_text=mixed,
        )
