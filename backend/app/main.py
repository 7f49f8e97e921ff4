# QuoteDesk backend entrypoint: invoices, templates, descriptions and exports.

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.api import descriptions
from backend.app.api import invoice_templates
from backend.app.api import invoices
from backend.app.core.dev_seed import ensure_default_template
from backend.app.core.errors import (
    ExportFailure,
    ExportInProgress,
    IndexOutOfRange,
    InvalidNumber,
    InvalidUpload,
    InvariantViolation,
    PersistenceConflict,
    QuoteDeskError,
    TranslationUnavailable,
    UploadFailure,
)
from backend.app.core.logging import configure_logging, get_logger
from backend.app.core.settings import get_settings
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine

settings = get_settings()
configure_logging(settings.log_level)
logger = get_logger(__name__)

app = FastAPI(title=settings.app_name, version=settings.api_version)

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(invoices.router)
app.include_router(invoice_templates.router)
app.include_router(descriptions.router)

# most specific first; the first match wins
ERROR_STATUS = [
    (ExportInProgress, 409),
    (ExportFailure, 500),
    (UploadFailure, 502),
    (TranslationUnavailable, 503),
    (PersistenceConflict, 409),
    (InvalidNumber, 400),
    (IndexOutOfRange, 400),
    (InvariantViolation, 400),
    (InvalidUpload, 400),
]


@app.exception_handler(QuoteDeskError)
async def quotedesk_error_handler(request: Request, exc: QuoteDeskError):
    status_code = next((code for kind, code in ERROR_STATUS if isinstance(exc, kind)), 500)
    if status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    else:
        logger.info("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": type(exc).__name__, "details": exc.details},
    )


@app.get("/")
def read_root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def prepare_database():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        ensure_default_template(db)
    finally:
        db.close()
