"""Field mapping between the in-memory models and the snake_case storage columns.

Each table has one dict keyed by the in-memory field path (dotted for nested
template sections) with the column name as value. Columns that only exist for
storage bookkeeping are listed separately so the mapping stays total.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel

from backend.app.models.invoice import Invoice
from backend.app.models.invoice_item import InvoiceItem
from backend.app.models.invoice_template import InvoiceTemplate
from backend.app.models.item_description import ItemDescription
from backend.app.schemas.document import InvoiceDocument, LineItem, TemplateConfig, TranslationEntry
from backend.app.services.numbers import normalize_decimal

INVOICE_FIELDS = {
    "id": "id",
    "invoice_number": "invoice_number",
    "party_name": "party_name",
    "date": "date",
    "subtotal": "subtotal",
    "tax_enabled": "tax_enabled",
    "tax": "gst",
    "total": "total",
    "tags": "tags",
    "created_at": "created_at",
    "updated_at": "updated_at",
}
INVOICE_BOOKKEEPING_COLUMNS: set[str] = set()

LINE_ITEM_FIELDS = {
    "id": "id",
    "description": "description",
    "translated_description": "gujarati_description",
    "quantity": "quantity",
    "unit": "unit",
    "rate": "rate",
    "total": "total",
}
# invoice_id is the owning document, position is the index in InvoiceDocument.items
LINE_ITEM_BOOKKEEPING_COLUMNS = {"invoice_id", "position", "created_at", "updated_at"}

TEMPLATE_FIELDS = {
    "id": "id",
    "name": "name",
    "colors.primary": "primary_color",
    "colors.secondary": "secondary_color",
    "colors.table_background": "table_color",
    "header_position": "header_position",
    "footer_design": "footer_design",
    "footer_position": "footer_position",
    "footer_enabled": "footer_enabled",
    "watermark.text": "watermark_text",
    "watermark.enabled": "watermark_enabled",
    "toggles.show_tax": "show_gst",
    "toggles.show_contact": "show_contact",
    "toggles.show_logo": "show_logo",
    "company_profile.name": "company_name",
    "company_profile.address": "company_address",
    "company_profile.mobile": "company_mobile",
    "company_profile.tax_id": "company_gst_number",
    "logo_url": "logo_url",
    "font_sizes.header": "font_size_header",
    "font_sizes.body": "font_size_body",
    "font_sizes.footer": "font_size_footer",
    "created_at": "created_at",
    "updated_at": "updated_at",
}
TEMPLATE_BOOKKEEPING_COLUMNS: set[str] = set()

TRANSLATION_FIELDS = {
    "id": "id",
    "canonical_text": "english_text",
    "translated_text": "gujarati_text",
    "mixed_script_text": "ginlish_text",
}
TRANSLATION_BOOKKEEPING_COLUMNS = {"created_at", "updated_at"}

# Written by the database, never from the in-memory side.
READ_ONLY_PATHS = {"created_at", "updated_at"}
DECIMAL_PATHS = {"subtotal", "tax", "total", "quantity", "rate"}


def _read_path(obj: BaseModel, path: str) -> Any:
    value: Any = obj
    for part in path.split("."):
        value = getattr(value, part)
    return value


def _nest(flat: dict[str, Any]) -> dict[str, Any]:
    nested: dict[str, Any] = {}
    for path, value in flat.items():
        target = nested
        *parents, leaf = path.split(".")
        for parent in parents:
            target = target.setdefault(parent, {})
        target[leaf] = value
    return nested


def _from_storage(path: str, value: Any) -> Any:
    if path in DECIMAL_PATHS and value is not None:
        # sqlite hands Numeric back padded to the column scale (33.3300)
        return normalize_decimal(value)
    return value


def to_columns(obj: BaseModel, fields: dict[str, str]) -> dict[str, Any]:
    return {column: _read_path(obj, path) for path, column in fields.items() if path not in READ_ONLY_PATHS}


def from_row(row: Any, fields: dict[str, str]) -> dict[str, Any]:
    flat = {}
    for path, column in fields.items():
        value = _from_storage(path, getattr(row, column))
        if value is None and path in READ_ONLY_PATHS:
            continue
        flat[path] = value
    return _nest(flat)


def line_item_from_row(row: InvoiceItem) -> LineItem:
    return LineItem(**from_row(row, LINE_ITEM_FIELDS))


def invoice_from_row(row: Invoice) -> InvoiceDocument:
    """Rebuild the document; derived values are taken as stored and re-derived by the caller."""
    data = from_row(row, INVOICE_FIELDS)
    data["items"] = [line_item_from_row(item) for item in sorted(row.items, key=lambda item: item.position)]
    data["tags"] = list(data.get("tags") or [])
    for key in ("subtotal", "tax", "total"):
        data[key] = data.get(key) if data.get(key) is not None else Decimal("0")
    return InvoiceDocument(**data)


def invoice_columns(doc: InvoiceDocument) -> dict[str, Any]:
    return to_columns(doc, INVOICE_FIELDS)


def line_item_columns(item: LineItem, position: int, invoice_id: str) -> dict[str, Any]:
    columns = to_columns(item, LINE_ITEM_FIELDS)
    columns["position"] = position
    columns["invoice_id"] = invoice_id
    return columns


def template_from_row(row: InvoiceTemplate) -> TemplateConfig:
    return TemplateConfig(**from_row(row, TEMPLATE_FIELDS))


def template_columns(template: TemplateConfig) -> dict[str, Any]:
    return to_columns(template, TEMPLATE_FIELDS)


def translation_from_row(row: ItemDescription) -> TranslationEntry:
    return TranslationEntry(**from_row(row, TRANSLATION_FIELDS))
