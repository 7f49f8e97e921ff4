"""Invoice-related service helpers."""

from datetime import datetime

from backend.app.schemas.document import InvoiceDocument
from backend.app.schemas.invoice import InvoiceBase
from backend.app.schemas.invoice_item import InvoiceItemIn
from backend.app.services.document_model import generate_invoice_number, new_line_item, normalize_tags


def document_from_payload(payload: InvoiceBase, items: list[InvoiceItemIn], now: datetime,
                          invoice_id: str | None = None) -> InvoiceDocument:
    """Build a document from request data.

    Missing invoice numbers and dates are filled from ``now``. An empty item
    list is kept as-is so the store can reject it.
    """
    line_items = []
    for item_in in items:
        item = new_line_item(
            description=item_in.description,
            quantity=item_in.quantity,
            unit=item_in.unit,
            rate=item_in.rate,
            translated_description=item_in.translated_description,
        )
        if item_in.id:
            item = item.model_copy(update={"id": item_in.id})
        line_items.append(item)

    fields = {
        "invoice_number": payload.invoice_number or generate_invoice_number(now),
        "party_name": payload.party_name,
        "date": payload.date or now.date(),
        "items": line_items,
        "tax_enabled": payload.tax_enabled,
        "tags": normalize_tags(payload.tags),
    }
    if invoice_id is not None:
        fields["id"] = invoice_id
    return InvoiceDocument(**fields)
