"""Custom exceptions."""
from typing import List, Optional, TYPE_CHECKING
from fastapi import HTTPException, status

if TYPE_CHECKING:
    from task_api.validation import FieldViolation


class ValidationFailed(HTTPException):
    """Missing or malformed input."""

    def __init__(
        self,
        detail: Optional[str] = None,
        violations: Optional[List["FieldViolation"]] = None,
    ):
        self.violations = violations or []
        if detail is None:
            detail = "Validation failed"
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InvalidIdentifier(HTTPException):
    """Task identifier that does not parse as a UUID."""

    def __init__(self, detail: Optional[str] = None):
        if detail is None:
            detail = "Invalid ID"
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class StoreUnavailable(HTTPException):
    """Datastore read or write failure."""

    def __init__(self, detail: Optional[str] = None):
        if detail is None:
            detail = "Store unavailable"
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
