"""
Domain errors raised by services and dependencies.

Each error carries an HTTP status and renders to the standard response
envelope ({success: false, message, code}). Handlers are registered in
app.main; nothing here knows about FastAPI.
"""

from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Base class for all errors surfaced to API clients."""

    code = "APP_ERROR"
    http_status = 500

    def __init__(self, message: str, details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_response(self) -> dict:
        body = {"success": False, "message": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    """Missing/blank required field, bad attachment, or a broken relationship rule."""

    code = "VALIDATION_ERROR"
    http_status = 400


class NotFoundError(AppError):
    code = "NOT_FOUND"
    http_status = 404

    def __init__(self, entity: str, entity_id: Optional[str] = None):
        message = f"{entity} not found"
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class AuthenticationError(AppError):
    code = "NOT_AUTHENTICATED"
    http_status = 401


class AuthorizationError(AppError):
    code = "FORBIDDEN"
    http_status = 403


class ConflictError(AppError):
    code = "CONFLICT"
    http_status = 409


class StorageError(AppError):
    """The backing store failed part-way through an operation."""

    code = "STORAGE_ERROR"
    http_status = 500
