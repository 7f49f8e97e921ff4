import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from backend.app.db.base import Base
from backend.app.db.session import engine
from backend.app.dependencies.services import get_logo_storage
from backend.app.main import app
from backend.app.services.object_storage import LocalObjectStorage


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    app.dependency_overrides.clear()


def create_template(client: TestClient, name: str = "Wedding", **fields):
    payload = {"name": name, "company_profile": {"name": "Sharda Mandap", "mobile": "98246 86047"}}
    payload.update(fields)
    resp = client.post("/templates/", json=payload)
    assert resp.status_code == 201
    return resp.json()


def test_create_template_keeps_nested_settings():
    client = TestClient(app)
    data = create_template(
        client,
        header_position="right",
        footer_design="detailed",
        watermark={"text": "DRAFT", "enabled": True},
        toggles={"show_tax": False, "show_contact": True, "show_logo": False},
    )
    assert data["name"] == "Wedding"
    assert data["header_position"] == "right"
    assert data["footer_design"] == "detailed"
    assert data["watermark"] == {"text": "DRAFT", "enabled": True}
    assert data["toggles"]["show_tax"] is False
    assert data["company_profile"]["mobile"] == "98246 86047"
    assert data["colors"]["primary"] == "#1e3a8a"

    fetched = client.get(f"/templates/{data['id']}").json()
    assert fetched["watermark"] == data["watermark"]
    assert fetched["font_sizes"] == data["font_sizes"]


def test_invalid_layout_is_rejected():
    client = TestClient(app)
    resp = client.post("/templates/", json={"name": "Odd", "footer_design": "fancy"})
    assert resp.status_code == 422


def test_default_template_is_created_on_demand():
    client = TestClient(app)
    resp = client.get("/templates/default")
    assert resp.status_code == 200
    default_id = resp.json()["id"]
    assert client.get("/templates/default").json()["id"] == default_id
    assert len(client.get("/templates/").json()) == 1


def test_update_template():
    client = TestClient(app)
    created = create_template(client)
    resp = client.put(f"/templates/{created['id']}", json={"name": "Wedding (blue)", "footer_enabled": False})
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == created["id"]
    assert data["name"] == "Wedding (blue)"
    assert data["footer_enabled"] is False


def test_missing_template_is_404():
    client = TestClient(app)
    assert client.get("/templates/missing").status_code == 404
    assert client.put("/templates/missing", json={"name": "x"}).status_code == 404
    assert client.delete("/templates/missing").status_code == 404


def test_last_template_cannot_be_deleted():
    client = TestClient(app)
    first = create_template(client, "Wedding")
    second = create_template(client, "Corporate")

    assert client.delete(f"/templates/{second['id']}").status_code == 200
    resp = client.delete(f"/templates/{first['id']}")
    assert resp.status_code == 409
    assert [template["id"] for template in client.get("/templates/").json()] == [first["id"]]


def _png() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (16, 16), (30, 58, 138)).save(buffer, format="PNG")
    return buffer.getvalue()


def test_upload_logo_sets_template_logo_url(tmp_path):
    storage = LocalObjectStorage(tmp_path, "http://localhost:8000/files/template_assets")
    app.dependency_overrides[get_logo_storage] = lambda: storage
    client = TestClient(app)
    created = create_template(client)

    resp = client.post(f"/templates/{created['id']}/logo", files={"file": ("logo.png", _png(), "image/png")})
    assert resp.status_code == 200
    logo_url = resp.json()["logo_url"]
    assert logo_url.startswith("http://localhost:8000/files/template_assets/logo-")
    assert storage.local_path(logo_url) is not None
    assert client.get(f"/templates/{created['id']}").json()["logo_url"] == logo_url


def test_upload_logo_rejects_non_images(tmp_path):
    app.dependency_overrides[get_logo_storage] = lambda: LocalObjectStorage(tmp_path, "http://files.example")
    client = TestClient(app)
    created = create_template(client)

    resp = client.post(f"/templates/{created['id']}/logo", files={"file": ("notes.txt", b"hello", "text/plain")})
    assert resp.status_code == 400
    assert resp.json()["error"] == "InvalidUpload"
    assert client.get(f"/templates/{created['id']}").json()["logo_url"] is None
    assert list(tmp_path.iterdir()) == []


def test_upload_logo_for_missing_template_is_404(tmp_path):
    app.dependency_overrides[get_logo_storage] = lambda: LocalObjectStorage(tmp_path, "http://files.example")
    client = TestClient(app)
    resp = client.post("/templates/missing/logo", files={"file": ("logo.png", _png(), "image/png")})
    assert resp.status_code == 404
