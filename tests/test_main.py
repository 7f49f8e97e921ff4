import asyncio
import json

import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from backend.app.core.errors import (
    ExportFailure,
    ExportInProgress,
    InvalidNumber,
    PersistenceConflict,
    QuoteDeskError,
    TranslationUnavailable,
    UploadFailure,
)
from backend.app.main import app, quotedesk_error_handler

client = TestClient(app)


def test_read_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"app": "QuoteDesk", "status": "ok"}


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def _handle(exc):
    request = Request({"type": "http", "method": "POST", "path": "/invoices/x/share", "headers": [], "query_string": b""})
    response = asyncio.run(quotedesk_error_handler(request, exc))
    return response.status_code, json.loads(response.body)


@pytest.mark.parametrize(
    "exc, status_code",
    [
        (ExportInProgress(), 409),
        (ExportFailure("canvas capture failed"), 500),
        (UploadFailure("bucket unavailable"), 502),
        (TranslationUnavailable("timed out"), 503),
        (PersistenceConflict("duplicate"), 409),
        (InvalidNumber("abc"), 400),
        (QuoteDeskError("unexpected"), 500),
    ],
)
def test_error_statuses(exc, status_code):
    assert _handle(exc)[0] == status_code


def test_error_body_names_the_error():
    _, body = _handle(UploadFailure("bucket unavailable", {"filename": "Invoice-1.pdf"}))
    assert body == {"detail": "bucket unavailable", "error": "UploadFailure", "details": {"filename": "Invoice-1.pdf"}}
