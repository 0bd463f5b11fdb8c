"""Queue error taxonomy and the shared JSON error envelope.

Every failure leaves the service as ``{"success": false, "error": code,
"message": text}`` so the client can branch on ``error`` without parsing text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ErrorResponse:
    code: str
    message: str

    def to_message(self) -> dict[str, Any]:
        return {"success": False, "error": self.code, "message": self.message}


class QueueError(Exception):
    """Base class for failures surfaced to API callers."""

    code = "queue_error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(code=self.code, message=self.message)


class ValidationFailed(QueueError):
    code = "validation_error"
    status_code = 400


class NotFound(QueueError):
    code = "not_found"
    status_code = 404


class VendorUnavailable(QueueError):
    code = "vendor_unavailable"
    status_code = 409


class StoreFailure(QueueError):
    code = "store_error"
    status_code = 500
