"""Project an invoice and a template into a printable visual tree.

The tree is the only thing the rasterizer and the document exporter see, so a
section switched off in the template is left out of the tree entirely rather
than marked hidden.
"""

from decimal import Decimal
from typing import Any, Callable, Dict, Iterator, List, Literal, Optional

from pydantic import BaseModel, Field

from backend.app.schemas.document import InvoiceDocument, TemplateConfig
from backend.app.services.document_model import recompute_totals
from backend.app.services.localization import Language, format_date, label, localize_unit
from backend.app.services.numbers import (
    DEFAULT_TAX_RATE,
    format_currency,
    format_number,
    to_target_script_currency,
    to_target_script_digits,
)

ROOT_ID = "invoice-preview"
DEFAULT_TITLE = "QUOTATION"

NodeKind = Literal["document", "section", "text", "columns", "table", "divider", "logo", "watermark"]


class VisualNode(BaseModel):
    kind: NodeKind
    id: Optional[str] = None
    text: Optional[str] = None
    attrs: Dict[str, Any] = Field(default_factory=dict)
    children: List["VisualNode"] = Field(default_factory=list)

    def walk(self) -> Iterator["VisualNode"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, node_id: str) -> Optional["VisualNode"]:
        for node in self.walk():
            if node.id == node_id:
                return node
        return None

    def texts(self) -> List[str]:
        """All text content in document order, table cells included."""
        out: List[str] = []
        for node in self.walk():
            if node.text:
                out.append(node.text)
            if node.kind == "table":
                out.extend(node.attrs.get("header", []))
                for row in node.attrs.get("rows", []):
                    out.extend(row)
        return out


def _text(text: str, *, size: int, bold: bool = False, align: str = "left", color: str = "#000000",
          node_id: str | None = None) -> VisualNode:
    return VisualNode(kind="text", id=node_id, text=text,
                      attrs={"size": size, "bold": bold, "align": align, "color": color})


def _section(children: List[VisualNode], *, node_id: str | None = None, align: str = "left") -> VisualNode:
    return VisualNode(kind="section", id=node_id, attrs={"align": align}, children=children)


class _Formatter:
    def __init__(self, language: Language):
        self.language = language

    def money(self, value: Decimal) -> str:
        return to_target_script_currency(value) if self.language == "gu" else format_currency(value)

    def amount(self, value: Decimal) -> str:
        return to_target_script_digits(format_number(value)) if self.language == "gu" else format_number(value)

    def count(self, value: Decimal | int) -> str:
        text = format(Decimal(value), "f")
        return to_target_script_digits(text) if self.language == "gu" else text


def _company_block(template: TemplateConfig, title: str, align: str) -> VisualNode:
    sizes = template.font_sizes
    profile = template.company_profile
    children = [_text(title, size=sizes.header + 4, bold=True, align=align, node_id="document-title")]
    if profile.name:
        children.append(_text(profile.name, size=sizes.header, bold=True, align=align, color=template.colors.primary))
    if profile.address:
        children.append(_text(profile.address, size=sizes.body, align=align))
    if template.toggles.show_tax and profile.tax_id:
        children.append(_text(f"GST: {profile.tax_id}", size=sizes.body, align=align))
    return _section(children, node_id="company", align=align)


def _aside_block(template: TemplateConfig, language: Language, align: str) -> Optional[VisualNode]:
    children = []
    if template.toggles.show_logo:
        children.append(VisualNode(kind="logo", id="logo", attrs={"url": template.logo_url, "size": 64}))
    if template.toggles.show_contact and template.company_profile.mobile:
        children.append(_text(f"{label('phone', language)}: {template.company_profile.mobile}",
                              size=template.font_sizes.body, align=align, node_id="contact"))
    if not children:
        return None
    return _section(children, node_id="header-aside", align=align)


def _header(company: VisualNode, aside: Optional[VisualNode], aside_first: bool) -> VisualNode:
    columns = [company] if aside is None else ([aside, company] if aside_first else [company, aside])
    weights = [1] if aside is None else ([1, 3] if aside_first else [3, 1])
    return VisualNode(kind="columns", id="header", attrs={"weights": weights}, children=columns)


def _header_left(template: TemplateConfig, language: Language, title: str) -> VisualNode:
    return _header(_company_block(template, title, "left"), _aside_block(template, language, "right"), False)


def _header_center(template: TemplateConfig, language: Language, title: str) -> VisualNode:
    return _header(_company_block(template, title, "center"), _aside_block(template, language, "right"), False)


def _header_right(template: TemplateConfig, language: Language, title: str) -> VisualNode:
    return _header(_company_block(template, title, "right"), _aside_block(template, language, "left"), True)


HEADER_LAYOUTS: Dict[str, Callable[[TemplateConfig, Language, str], VisualNode]] = {
    "left": _header_left,
    "center": _header_center,
    "right": _header_right,
}


def _footer_simple(template: TemplateConfig, language: Language) -> VisualNode:
    align = template.footer_position
    size = template.font_sizes.footer
    name = template.company_profile.name or ""
    children = [_text(f"{label('generated_by', language)} {name}".strip(), size=size, bold=True, align=align)]
    if template.toggles.show_contact and template.company_profile.mobile:
        children.append(_text(f"{label('inquiries', language)} {template.company_profile.mobile}", size=size, align=align))
    return _section(children, node_id="footer", align=align)


def _footer_detailed(template: TemplateConfig, language: Language) -> VisualNode:
    size = template.font_sizes.footer
    profile = template.company_profile
    terms = _section([
        _text(label("terms", language), size=size, bold=True),
        _text(label("terms_1", language), size=size),
        _text(label("terms_2", language), size=size),
    ])
    thanks = [_text(label("thanks_business", language), size=size, bold=True, align="center")]
    if profile.name:
        thanks.append(_text(profile.name, size=size, align="center"))
    if template.toggles.show_contact and profile.mobile:
        thanks.append(_text(profile.mobile, size=size, align="center"))
    payment = [_text(label("payment_details", language), size=size, bold=True, align="right")]
    if template.toggles.show_tax and profile.tax_id:
        payment.append(_text(f"GST: {profile.tax_id}", size=size, align="right"))
    return VisualNode(kind="columns", id="footer", attrs={"weights": [1, 1, 1]},
                      children=[terms, _section(thanks, align="center"), _section(payment, align="right")])


def _footer_minimal(template: TemplateConfig, language: Language) -> VisualNode:
    parts = [label("thank_you", language)]
    if template.toggles.show_contact and template.company_profile.mobile:
        parts.append(template.company_profile.mobile)
    return _section([_text("    ".join(parts), size=template.font_sizes.footer, align=template.footer_position)],
                    node_id="footer", align=template.footer_position)


FOOTER_LAYOUTS: Dict[str, Callable[[TemplateConfig, Language], VisualNode]] = {
    "simple": _footer_simple,
    "detailed": _footer_detailed,
    "minimal": _footer_minimal,
}


def _meta(doc: InvoiceDocument, template: TemplateConfig, language: Language) -> VisualNode:
    size = template.font_sizes.body
    left = _section([
        _text(f"{label('invoice_no', language)}: {doc.invoice_number}", size=size),
        _text(f"{label('client', language)}: {doc.party_name}", size=size),
    ])
    right = _section([_text(f"{label('date', language)}: {format_date(doc.date, language)}", size=size, align="right")],
                     align="right")
    return VisualNode(kind="columns", id="meta", attrs={"weights": [1, 1]}, children=[left, right])


def _items_table(doc: InvoiceDocument, template: TemplateConfig, language: Language, fmt: _Formatter) -> VisualNode:
    header = [label(key, language) for key in ("sr", "description", "quantity", "unit", "rate", "total")]
    rows = []
    for index, item in enumerate(doc.items, start=1):
        description = item.description
        if language == "gu" and item.translated_description:
            description = item.translated_description
        rows.append([
            fmt.count(index),
            description,
            fmt.count(item.quantity),
            localize_unit(item.unit, language),
            fmt.amount(item.rate),
            fmt.amount(item.total),
        ])
    return VisualNode(
        kind="table",
        id="items",
        attrs={
            "header": header,
            "rows": rows,
            "align": ["center", "left", "center", "center", "right", "right"],
            "weights": [1, 6, 2, 2, 3, 3],
            "header_background": template.colors.table_background,
            "size": template.font_sizes.body,
        },
    )


def _summary(totals: InvoiceDocument, template: TemplateConfig, language: Language, tax_rate: Any,
             fmt: _Formatter) -> VisualNode:
    size = template.font_sizes.body
    children = [_text(f"{label('subtotal', language)}: {fmt.money(totals.subtotal)}", size=size, align="right",
                      node_id="subtotal")]
    if template.toggles.show_tax:
        rate = fmt.count(Decimal(str(tax_rate)))
        children.append(_text(f"{label('gst', language)} ({rate}%): {fmt.money(totals.tax)}", size=size, align="right",
                              node_id="tax"))
    children.append(_text(f"{label('grand_total', language)}: {fmt.money(totals.total)}", size=size + 2, bold=True,
                          align="right", node_id="grand-total"))
    return _section(children, node_id="summary", align="right")


def project(
    doc: InvoiceDocument,
    template: TemplateConfig,
    *,
    language: Language = "en",
    document_title: str | None = None,
    tax_rate: Any = DEFAULT_TAX_RATE,
) -> VisualNode:
    """Build the visual tree for ``doc`` rendered with ``template``.

    The output depends only on the arguments. Tax is shown and charged only when
    both the invoice and the template enable it.
    """
    fmt = _Formatter(language)
    title = document_title or (label("quotation", language) if language == "gu" else DEFAULT_TITLE)
    totals = recompute_totals(
        doc.model_copy(update={"tax_enabled": doc.tax_enabled and template.toggles.show_tax}),
        tax_rate=tax_rate,
    )

    children: List[VisualNode] = []
    if template.watermark.enabled and template.watermark.text:
        children.append(VisualNode(kind="watermark", id="watermark", text=template.watermark.text,
                                   attrs={"angle": 45, "opacity": 0.15, "color": template.colors.secondary}))
    children.append(HEADER_LAYOUTS[template.header_position](template, language, title))
    children.append(VisualNode(kind="divider"))
    children.append(_meta(totals, template, language))
    children.append(_items_table(totals, template, language, fmt))
    children.append(_summary(totals, template, language, tax_rate, fmt))
    if template.footer_enabled:
        children.append(VisualNode(kind="divider"))
        children.append(FOOTER_LAYOUTS[template.footer_design](template, language))

    return VisualNode(
        kind="document",
        id=ROOT_ID,
        attrs={"language": language, "primary_color": template.colors.primary, "width": None, "height": None},
        children=children,
    )
