"""Error kinds raised by the invoice core.

QuoteDeskError (base)
├── InvalidNumber            non-finite or malformed numeric input
├── IndexOutOfRange          line-item mutation on an invalid index
├── InvariantViolation       e.g. removing the last line item
├── TranslationUnavailable   translation service failure or timeout
├── PersistenceConflict      unique-constraint race on description create
├── ExportFailure            rasterization or PDF assembly error
│   └── ExportInProgress     a second export while one is running
├── UploadFailure            object storage rejected the artifact
└── InvalidUpload            uploaded asset is not an acceptable image

The first three are caller bugs and propagate. The rest are operational and
are caught at the HTTP boundary.
"""


class QuoteDeskError(Exception):
    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class InvalidNumber(QuoteDeskError):
    def __init__(self, value, reason: str | None = None):
        super().__init__(f"Invalid number: {value!r}", {"value": repr(value), "reason": reason})


class IndexOutOfRange(QuoteDeskError):
    def __init__(self, index: int, size: int):
        super().__init__(f"Item index {index} out of range for {size} item(s)", {"index": index, "size": size})


class InvariantViolation(QuoteDeskError):
    pass


class TranslationUnavailable(QuoteDeskError):
    pass


class PersistenceConflict(QuoteDeskError):
    pass


class ExportFailure(QuoteDeskError):
    pass


class ExportInProgress(ExportFailure):
    def __init__(self):
        super().__init__("Another export is already in progress")


class UploadFailure(QuoteDeskError):
    pass


class InvalidUpload(QuoteDeskError):
    pass
