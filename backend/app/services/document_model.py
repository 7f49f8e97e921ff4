"""Pure operations on the invoice being edited.

Every operation returns a new InvoiceDocument and leaves its input untouched.
Derived fields (item totals, subtotal, tax, total) are recomputed eagerly after
each mutation, so a document produced here is never stale.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from backend.app.core.errors import IndexOutOfRange, InvalidNumber, InvariantViolation
from backend.app.schemas.document import InvoiceDocument, LineItem
from backend.app.services.numbers import DEFAULT_TAX_RATE, compute_tax, to_decimal

MIN_ITEMS = 1
NUMERIC_FIELDS = {"quantity", "rate"}
TEXT_FIELDS = {"description", "translated_description", "unit"}


def _non_negative(value: Any) -> Decimal:
    number = to_decimal(value)
    if number < 0:
        raise InvalidNumber(value, "must not be negative")
    return number


def generate_invoice_number(now: datetime) -> str:
    millis = int(now.timestamp() * 1000)
    return f"INV-{str(millis)[-6:]}"


def new_line_item(description: str = "", quantity: Any = 1, unit: str = "pcs", rate: Any = 0,
                  translated_description: str | None = None) -> LineItem:
    qty = _non_negative(quantity)
    unit_rate = _non_negative(rate)
    return LineItem(
        description=description,
        translated_description=translated_description,
        quantity=qty,
        unit=unit or "pcs",
        rate=unit_rate,
        total=qty * unit_rate,
    )


def new_document(invoice_number: str, party_name: str = "", invoice_date: date | None = None,
                 items: list[LineItem] | None = None, tax_enabled: bool = True,
                 tags: list[str] | None = None, tax_rate: Any = DEFAULT_TAX_RATE) -> InvoiceDocument:
    """Start an editable document; it always holds at least one (blank) item."""
    doc = InvoiceDocument(
        invoice_number=invoice_number,
        party_name=party_name,
        date=invoice_date,
        items=list(items) if items else [LineItem()],
        tax_enabled=tax_enabled,
        tags=normalize_tags(tags or []),
    )
    return recompute_totals(doc, tax_rate=tax_rate)


def normalize_tags(tags: list[str]) -> list[str]:
    seen: list[str] = []
    for tag in tags:
        cleaned = tag.strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


def recompute_totals(doc: InvoiceDocument, tax_rate: Any = DEFAULT_TAX_RATE) -> InvoiceDocument:
    items = [item.model_copy(update={"total": item.quantity * item.rate}) for item in doc.items]
    subtotal = sum((item.total for item in items), Decimal("0"))
    tax = compute_tax(subtotal, tax_rate) if doc.tax_enabled else Decimal("0")
    return doc.model_copy(update={"items": items, "subtotal": subtotal, "tax": tax, "total": subtotal + tax})


def _check_index(doc: InvoiceDocument, index: int) -> None:
    if not 0 <= index < len(doc.items):
        raise IndexOutOfRange(index, len(doc.items))


def add_item(doc: InvoiceDocument, tax_rate: Any = DEFAULT_TAX_RATE) -> InvoiceDocument:
    items = list(doc.items) + [new_line_item(quantity=1, rate=0)]
    return recompute_totals(doc.model_copy(update={"items": items}), tax_rate=tax_rate)


def update_item(doc: InvoiceDocument, index: int, field: str, value: Any,
                tax_rate: Any = DEFAULT_TAX_RATE) -> InvoiceDocument:
    _check_index(doc, index)
    item = doc.items[index]

    if field in NUMERIC_FIELDS:
        updated = item.model_copy(update={field: _non_negative(value)})
    elif field in TEXT_FIELDS:
        text = "" if value is None and field != "translated_description" else value
        if field == "unit" and not text:
            text = "pcs"
        updated = item.model_copy(update={field: text})
    else:
        raise InvariantViolation(f"Field {field!r} of a line item cannot be edited", {"field": field})

    items = list(doc.items)
    items[index] = updated
    new_doc = doc.model_copy(update={"items": items})
    if field in NUMERIC_FIELDS:
        return recompute_totals(new_doc, tax_rate=tax_rate)
    return new_doc


def remove_item(doc: InvoiceDocument, index: int, tax_rate: Any = DEFAULT_TAX_RATE) -> InvoiceDocument:
    _check_index(doc, index)
    if len(doc.items) <= MIN_ITEMS:
        raise InvariantViolation("An invoice must keep at least one line item", {"items": len(doc.items)})
    items = [item for position, item in enumerate(doc.items) if position != index]
    return recompute_totals(doc.model_copy(update={"items": items}), tax_rate=tax_rate)


def reorder(doc: InvoiceDocument, from_index: int, to_index: int) -> InvoiceDocument:
    _check_index(doc, from_index)
    _check_index(doc, to_index)
    items = list(doc.items)
    moved = items.pop(from_index)
    items.insert(to_index, moved)
    return doc.model_copy(update={"items": items})


def set_tax_enabled(doc: InvoiceDocument, enabled: bool, tax_rate: Any = DEFAULT_TAX_RATE) -> InvoiceDocument:
    return recompute_totals(doc.model_copy(update={"tax_enabled": enabled}), tax_rate=tax_rate)


def ensure_persistable(doc: InvoiceDocument) -> None:
    """Reject documents that would reach the store without any line item."""
    if len(doc.items) < MIN_ITEMS:
        raise InvariantViolation("Cannot save an invoice without line items", {"invoice_number": doc.invoice_number})
