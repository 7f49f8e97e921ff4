import threading
from datetime import date, datetime, timezone
from urllib.parse import unquote

import pytest
from PIL import Image
from reportlab.lib.pagesizes import A4 as PDF_A4

from backend.app.core.errors import ExportFailure, ExportInProgress, UploadFailure
from backend.app.schemas.document import CompanyProfile, TemplateColors, TemplateConfig, TemplateToggles
from backend.app.services.document_model import new_document, new_line_item
from backend.app.services.export_pipeline import (
    ExportService,
    build_share_message,
    build_whatsapp_url,
    fit_to_page,
    to_pdf,
    to_simple_document,
)
from backend.app.services.object_storage import LocalObjectStorage, unique_filename
from backend.app.services.rasterizer import A4, RasterImage
from backend.app.services.render_pipeline import project

FIXED_NOW = datetime(2024, 6, 1, 10, 30, tzinfo=timezone.utc)


def _doc():
    return new_document(
        "INV-482913",
        "Acme & Sons",
        invoice_date=date(2024, 6, 1),
        items=[new_line_item("Lagan mandap", quantity=1, rate=165000)],
    )


def _template(**fields):
    return TemplateConfig(company_profile=CompanyProfile(name="Sharda Mandap", mobile="98246 86047"), **fields)


class RecordingStorage:
    def __init__(self, fail=False):
        self.fail = fail
        self.uploads = []

    def upload(self, data, content_type, filename):
        if self.fail:
            raise UploadFailure("bucket unavailable")
        self.uploads.append((data, content_type, filename))
        return f"https://files.example/{filename}"


def test_share_message_substitution():
    message = build_share_message(
        "Hi {{client_name}}, total {{total_amount}}", {"client_name": "Acme", "total_amount": "1,000"}
    )
    assert message == "Hi Acme, total 1,000"


def test_share_message_leaves_unknown_placeholders():
    assert build_share_message("Hello {{foo}} {{client_name}}", {"client_name": "Acme"}) == "Hello {{foo}} Acme"


def test_whatsapp_url_encodes_like_uri_component():
    url = build_whatsapp_url("Total: ₹1,000 & more!\n(see link)")
    assert url.startswith("https://wa.me/?text=")
    encoded = url.split("=", 1)[1]
    assert " " not in encoded and "&" not in encoded and "," not in encoded
    assert "!" in encoded and "(" in encoded
    assert unquote(encoded) == "Total: ₹1,000 & more!\n(see link)"


def test_fit_to_page_centers_tall_image():
    x, y, width, height = fit_to_page(1000, 2000, 595.0, 842.0)
    assert height == pytest.approx(842.0)
    assert width == pytest.approx(421.0)
    assert x == pytest.approx((595.0 - 421.0) / 2)
    assert y == pytest.approx(0)


def test_pdf_is_a_single_page_bitmap():
    tall = RasterImage(image=Image.new("RGB", (794, 3000), "white"), page_size=A4, scale=1)
    pdf = to_pdf(tall, title="Invoice INV-1")

    assert pdf.data.startswith(b"%PDF")
    assert pdf.page_count == 1
    assert b"/Count 1" in pdf.data
    assert pdf.text_selectable is False
    x, y, width, height = pdf.placement
    assert height == pytest.approx(PDF_A4[1])
    assert x > 0


def test_simple_document_is_editable_markup():
    tree = project(_doc(), _template())
    document = to_simple_document(tree, title="Invoice INV-482913")
    markup = document.data.decode("utf-8")

    assert document.content_type == "application/msword"
    assert "<table class=\"items\">" in markup
    assert "Acme &amp; Sons" in markup
    assert "Lagan mandap" in markup
    assert "<img" not in markup


def test_unique_filename():
    assert unique_filename("Invoice INV 7", FIXED_NOW) == f"Invoice-INV-7-{int(FIXED_NOW.timestamp() * 1000)}.pdf"


def test_local_storage_writes_and_returns_public_url(tmp_path):
    storage = LocalObjectStorage(tmp_path / "pdfs", "http://files.local/pdfs/")
    url = storage.upload(b"%PDF-1.4", "application/pdf", "Invoice-1.pdf")
    assert url == "http://files.local/pdfs/Invoice-1.pdf"
    assert (tmp_path / "pdfs" / "Invoice-1.pdf").read_bytes() == b"%PDF-1.4"


def test_local_storage_failure_is_upload_failure(tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_text("a file, not a directory")
    storage = LocalObjectStorage(blocker, "http://files.local")
    with pytest.raises(UploadFailure):
        storage.upload(b"%PDF", "application/pdf", "x.pdf")


def test_share_uploads_pdf_and_builds_message():
    storage = RecordingStorage()
    service = ExportService(storage, scale=1, clock=lambda: FIXED_NOW)

    result = service.share(_doc(), _template(), message_template="{{client_name}} owes {{total_amount}}: {{invoice_link}}")

    data, content_type, filename = storage.uploads[0]
    assert data.startswith(b"%PDF")
    assert content_type == "application/pdf"
    assert filename.startswith("Invoice-INV-482913-")
    assert result.pdf_url == f"https://files.example/{filename}"
    assert result.message == f"Acme & Sons owes 1,94,700: {result.pdf_url}"
    assert result.whatsapp_url == build_whatsapp_url(result.message)
    assert not service.busy


def test_share_total_follows_template_tax_toggle():
    service = ExportService(RecordingStorage(), scale=1, clock=lambda: FIXED_NOW)
    result = service.share(_doc(), _template(toggles=TemplateToggles(show_tax=False)), message_template="{{total_amount}}")
    assert result.message == "1,65,000"


def test_failed_render_never_uploads():
    storage = RecordingStorage()
    service = ExportService(storage, scale=1)
    with pytest.raises(ExportFailure):
        service.share(_doc(), _template(colors=TemplateColors(table_background="bogus")))
    assert storage.uploads == []
    assert not service.busy


def test_upload_failure_propagates_and_releases_busy_flag():
    service = ExportService(RecordingStorage(fail=True), scale=1)
    with pytest.raises(UploadFailure):
        service.share(_doc(), _template())
    assert not service.busy


def test_second_export_while_busy_is_rejected():
    entered = threading.Event()
    release = threading.Event()

    class SlowStorage(RecordingStorage):
        def upload(self, data, content_type, filename):
            entered.set()
            release.wait(timeout=10)
            return super().upload(data, content_type, filename)

    service = ExportService(SlowStorage(), scale=1)
    worker = threading.Thread(target=service.share, args=(_doc(), _template()))
    worker.start()
    try:
        assert entered.wait(timeout=30)
        assert service.busy
        with pytest.raises(ExportInProgress):
            service.export_pdf(_doc(), _template())
    finally:
        release.set()
        worker.join(timeout=30)
    assert not service.busy
