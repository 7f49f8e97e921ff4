import io
from datetime import datetime, timezone

import pytest
from PIL import Image

from backend.app.core.errors import InvalidUpload
from backend.app.services.object_storage import LocalObjectStorage
from backend.app.services.template_assets import MAX_LOGO_BYTES, logo_filename, upload_logo

NOW = datetime(2024, 3, 5, 10, 30, tzinfo=timezone.utc)


def _png() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), (30, 58, 138)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def storage(tmp_path):
    return LocalObjectStorage(tmp_path, "http://localhost:8000/files/template_assets")


def test_logo_filename_keeps_extension_and_is_unique():
    first = logo_filename("Sharda Logo.JPG", NOW)
    second = logo_filename("Sharda Logo.JPG", NOW)
    assert first.startswith("logo-1709634600000-")
    assert first.endswith(".jpg")
    assert first != second
    assert logo_filename(None, NOW).endswith(".png")
    assert logo_filename("weird.p/ng", NOW).endswith(".png")


def test_upload_logo_stores_image_and_returns_url(storage, tmp_path):
    url = upload_logo(storage, _png(), "image/png", "logo.png", NOW)
    assert url.startswith("http://localhost:8000/files/template_assets/logo-")
    assert storage.local_path(url).read_bytes() == _png()
    assert len(list(tmp_path.iterdir())) == 1


@pytest.mark.parametrize("content_type", [None, "application/pdf", "text/plain"])
def test_non_image_content_type_is_rejected(storage, content_type):
    with pytest.raises(InvalidUpload) as exc_info:
        upload_logo(storage, _png(), content_type, "logo.png", NOW)
    assert exc_info.value.message == "Please upload an image file"


def test_oversized_logo_is_rejected(storage, tmp_path):
    with pytest.raises(InvalidUpload) as exc_info:
        upload_logo(storage, b"\x89PNG" + b"0" * MAX_LOGO_BYTES, "image/png", "big.png", NOW)
    assert exc_info.value.message == "File size must be less than 5MB"
    assert list(tmp_path.iterdir()) == []


def test_empty_and_unreadable_images_are_rejected(storage):
    with pytest.raises(InvalidUpload):
        upload_logo(storage, b"", "image/png", "logo.png", NOW)
    with pytest.raises(InvalidUpload):
        upload_logo(storage, b"not really a png", "image/png", "logo.png", NOW)


def test_local_path_only_maps_own_urls(storage):
    url = upload_logo(storage, _png(), "image/png", "logo.png", NOW)
    assert storage.local_path(url) is not None
    assert storage.local_path("https://elsewhere.example/" + url.rsplit("/", 1)[1]) is None
    assert storage.local_path("http://localhost:8000/files/template_assets/missing.png") is None
