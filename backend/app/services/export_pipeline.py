"""Turn a rendered invoice into downloadable files and a shareable message.

The PDF path draws the visual tree to a bitmap and places that bitmap on a
single A4 page. Its text is therefore not selectable or searchable. The
"simple document" path writes the same tree as HTML that word processors
open as an editable document; the two are not meant to look identical.
"""

import html
import io
import re
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple
from urllib.parse import quote

from reportlab.lib.pagesizes import A4 as PDF_A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from backend.app.core.errors import ExportFailure, ExportInProgress
from backend.app.core.logging import get_logger
from backend.app.core.settings import DEFAULT_SHARE_MESSAGE
from backend.app.core.time import utc_now
from backend.app.schemas.document import InvoiceDocument, TemplateConfig
from backend.app.services.document_model import recompute_totals
from backend.app.services.localization import Language
from backend.app.services.numbers import DEFAULT_TAX_RATE, format_number
from backend.app.services.object_storage import ObjectStorage, unique_filename
from backend.app.services.rasterizer import A4, DEFAULT_SCALE, AssetResolver, RasterImage, rasterize
from backend.app.services.render_pipeline import VisualNode, project

logger = get_logger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
DOC_CONTENT_TYPE = "application/msword"
WHATSAPP_BASE_URL = "https://wa.me/?text="

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")
# characters encodeURIComponent leaves alone besides alphanumerics and "-_.~"
_URI_COMPONENT_SAFE = "!~*'()"


@dataclass
class PdfDocument:
    data: bytes
    title: str
    placement: Tuple[float, float, float, float]
    page_count: int = 1
    text_selectable: bool = False
    content_type: str = PDF_CONTENT_TYPE


@dataclass
class SimpleDocument:
    data: bytes
    title: str
    content_type: str = DOC_CONTENT_TYPE


@dataclass
class ShareResult:
    pdf_url: str
    message: str
    whatsapp_url: str


def fit_to_page(image_width: int, image_height: int, page_width: float, page_height: float) -> Tuple[float, float, float, float]:
    """Largest placement of the image inside the page, centered. Returns (x, y, width, height) in points."""
    # smaller ratio wins: a tall bitmap is fit to the page height and centered horizontally
    ratio = min(page_width / image_width, page_height / image_height)
    width = image_width * ratio
    height = image_height * ratio
    return (page_width - width) / 2, (page_height - height) / 2, width, height


def to_pdf(raster: RasterImage, title: str = "Invoice") -> PdfDocument:
    """Embed ``raster`` in a one-page A4 PDF.

    Content taller than a page is shrunk to fit rather than split across pages.
    """
    page_width, page_height = PDF_A4
    placement = fit_to_page(raster.width, raster.height, page_width, page_height)
    buffer = io.BytesIO()
    try:
        pdf = canvas.Canvas(buffer, pagesize=PDF_A4)
        pdf.setTitle(title)
        x, y, width, height = placement
        pdf.drawImage(ImageReader(raster.image), x, y, width=width, height=height)
        pdf.showPage()
        pdf.save()
    except (OSError, ValueError) as exc:
        logger.error("PDF assembly failed for %s: %s", title, exc)
        raise ExportFailure("Could not assemble the PDF", {"title": title, "error": str(exc)}) from exc
    return PdfDocument(data=buffer.getvalue(), title=title, placement=placement)


DOC_STYLES = """
body { font-family: Arial, sans-serif; margin: 0; padding: 20px; }
body.gu { font-family: "Noto Sans Gujarati", Arial, sans-serif; }
table { width: 100%; border-collapse: collapse; margin: 10px 0; }
table.items th, table.items td { border: 1px solid #333; padding: 8px; }
table.items th { background-color: #f2f2f2; font-weight: bold; }
table.grid td { vertical-align: top; }
hr { border: 1px solid #333; margin: 15px 0; }
"""


def _node_html(node: VisualNode) -> str:
    inner = "".join(_node_html(child) for child in node.children)
    if node.kind == "document":
        return inner
    if node.kind == "section":
        return f'<div style="text-align:{node.attrs.get("align", "left")}">{inner}</div>'
    if node.kind == "text":
        weight = "bold" if node.attrs.get("bold") else "normal"
        style = f'font-size:{node.attrs.get("size", 11)}pt;font-weight:{weight};text-align:{node.attrs.get("align", "left")}'
        return f'<p style="{style}">{html.escape(node.text or "")}</p>'
    if node.kind == "columns":
        cells = "".join(f"<td>{_node_html(child)}</td>" for child in node.children)
        return f'<table class="grid"><tr>{cells}</tr></table>'
    if node.kind == "table":
        aligns = node.attrs.get("align", [])
        head = "".join(f"<th>{html.escape(str(cell))}</th>" for cell in node.attrs.get("header", []))
        body = "".join(
            "<tr>" + "".join(
                f'<td style="text-align:{aligns[index] if index < len(aligns) else "left"}">{html.escape(str(cell))}</td>'
                for index, cell in enumerate(row)
            ) + "</tr>"
            for row in node.attrs.get("rows", [])
        )
        return f'<table class="items"><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>'
    if node.kind == "divider":
        return "<hr>"
    if node.kind == "logo" and node.attrs.get("url"):
        return f'<img src="{html.escape(node.attrs["url"], quote=True)}" alt="Logo" width="64" height="64">'
    return ""


def to_simple_document(tree: VisualNode, title: str = "Invoice") -> SimpleDocument:
    language = tree.attrs.get("language", "en")
    markup = (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<title>{html.escape(title)}</title><style>{DOC_STYLES}</style></head>"
        f'<body class="{html.escape(language)}">{_node_html(tree)}</body></html>'
    )
    return SimpleDocument(data=markup.encode("utf-8"), title=title)


def build_share_message(template: str, variables: Mapping[str, Any]) -> str:
    """Replace ``{{name}}`` placeholders; names missing from ``variables`` are left as written."""
    def substitute(match: re.Match) -> str:
        key = match.group(1)
        if key in variables and variables[key] is not None:
            return str(variables[key])
        return match.group(0)

    return _PLACEHOLDER.sub(substitute, template)


def build_whatsapp_url(message: str) -> str:
    return WHATSAPP_BASE_URL + quote(message, safe=_URI_COMPONENT_SAFE)


def share_variables(doc: InvoiceDocument, pdf_url: str) -> Dict[str, str]:
    return {
        "invoice_number": doc.invoice_number,
        "client_name": doc.party_name,
        "total_amount": format_number(doc.total),
        "invoice_link": pdf_url,
    }


def export_filename(doc: InvoiceDocument, extension: str, language: Language = "en") -> str:
    suffix = "-Gujarati" if language == "gu" else ""
    return f"Invoice-{doc.invoice_number}{suffix}.{extension}"


class ExportService:
    """Runs exports one at a time.

    A second export requested while one is running fails with
    ExportInProgress instead of queueing behind it.
    """

    def __init__(
        self,
        storage: ObjectStorage,
        *,
        scale: float = DEFAULT_SCALE,
        font_path: Optional[str] = None,
        tax_rate: Any = DEFAULT_TAX_RATE,
        share_message_template: str = DEFAULT_SHARE_MESSAGE,
        clock: Callable[[], datetime] = utc_now,
        asset_resolver: Optional[AssetResolver] = None,
    ):
        self.storage = storage
        self.scale = scale
        self.font_path = font_path
        self.tax_rate = tax_rate
        self.share_message_template = share_message_template
        self.clock = clock
        self.asset_resolver = asset_resolver
        self._busy = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._busy.locked()

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        if not self._busy.acquire(blocking=False):
            raise ExportInProgress()
        try:
            yield
        finally:
            self._busy.release()

    def _tree(self, doc: InvoiceDocument, template: TemplateConfig, language: Language) -> VisualNode:
        return project(doc, template, language=language, tax_rate=self.tax_rate)

    def _pdf(self, doc: InvoiceDocument, template: TemplateConfig, language: Language) -> PdfDocument:
        raster = rasterize(
            self._tree(doc, template, language),
            A4,
            scale=self.scale,
            font_path=self.font_path,
            resolve_asset=self.asset_resolver,
        )
        return to_pdf(raster, title=f"Invoice {doc.invoice_number}")

    def export_pdf(self, doc: InvoiceDocument, template: TemplateConfig, language: Language = "en") -> PdfDocument:
        with self._exclusive():
            return self._pdf(doc, template, language)

    def export_document(self, doc: InvoiceDocument, template: TemplateConfig,
                        language: Language = "en") -> SimpleDocument:
        with self._exclusive():
            return to_simple_document(self._tree(doc, template, language), title=f"Invoice {doc.invoice_number}")

    def share(self, doc: InvoiceDocument, template: TemplateConfig, language: Language = "en",
              message_template: Optional[str] = None) -> ShareResult:
        """Export, upload and build the WhatsApp hand-off for ``doc``.

        Nothing is uploaded when the PDF cannot be produced.
        """
        with self._exclusive():
            pdf = self._pdf(doc, template, language)
            filename = unique_filename(f"Invoice-{doc.invoice_number}", self.clock())
            url = self.storage.upload(pdf.data, pdf.content_type, filename)
            shown = recompute_totals(
                doc.model_copy(update={"tax_enabled": doc.tax_enabled and template.toggles.show_tax}),
                tax_rate=self.tax_rate,
            )
            message = build_share_message(message_template or self.share_message_template, share_variables(shown, url))
            logger.info("Shared invoice %s as %s", doc.invoice_number, url)
            return ShareResult(pdf_url=url, message=message, whatsapp_url=build_whatsapp_url(message))

