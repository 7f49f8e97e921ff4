"""Shared service instances handed to routes through ``Depends``."""

from backend.app.core.settings import get_settings
from backend.app.services.export_pipeline import ExportService
from backend.app.services.object_storage import LocalObjectStorage, get_asset_storage, get_object_storage
from backend.app.services.translation_client import TranslationService, get_translation_service

_translator_instance = None
_export_service_instance = None


def get_translator() -> TranslationService:
    global _translator_instance
    if _translator_instance is None:
        _translator_instance = get_translation_service(get_settings())
    return _translator_instance


def get_export_service() -> ExportService:
    """One service per process, so its busy flag covers every request."""
    global _export_service_instance
    if _export_service_instance is None:
        settings = get_settings()
        _export_service_instance = ExportService(
            get_object_storage(settings),
            scale=settings.render_scale,
            font_path=settings.render_font_path,
            tax_rate=settings.default_tax_rate,
            share_message_template=settings.share_message_template,
            asset_resolver=get_asset_storage(settings).local_path,
        )
    return _export_service_instance


def get_logo_storage() -> LocalObjectStorage:
    return get_asset_storage(get_settings())
