from fastapi import HTTPException, status
from typing import Any, Optional, Dict


# Custom application exceptions inherit from FastAPI's HTTPException so they can be
# raised from any layer and rendered by the handlers in presentation/main.py.

class BaseAppException(HTTPException):
    """Base class for custom application exceptions for consistent logging."""
    def __init__(self, status_code: int, detail: Any = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=status_code, detail=detail or "Application error", headers=headers)

class NotFoundError(BaseAppException):
    """Resource not found (HTTP 404)."""
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class BadRequestError(BaseAppException):
    """Client provided invalid data or made a bad request (HTTP 400)."""
    def __init__(self, detail: str = "Bad request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)

class ValidationError(BadRequestError):
    """Required upload input missing or an identifier is malformed (HTTP 400)."""

class ConflictError(BaseAppException):
    """Resource conflict, e.g., duplicate item already exists (HTTP 409)."""
    def __init__(self, detail: str = "Resource conflict"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)

class InternalServerError(BaseAppException):
    """Generic unexpected server error (HTTP 500)."""
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

class StorageError(InternalServerError):
    """Object storage upload failed (HTTP 500)."""
    def __init__(self, detail: str = "Failed to store uploaded file"):
        super().__init__(detail=detail)

class PersistenceError(InternalServerError):
    """Document store read or write failed (HTTP 500)."""
    def __init__(self, detail: str = "Database operation failed"):
        super().__init__(detail=detail)
