"""Custom exceptions."""
from typing import Optional
from fastapi import HTTPException, status
from restops.localization.helpers import get_translation


class NotFoundError(HTTPException):
    """Resource not found exception.

    Also raised for resources owned by another tenant so that their
    existence is not revealed.
    """

    def __init__(self, detail: Optional[str] = None, locale: str = "en"):
        if detail is None:
            detail = get_translation("errors.resource_not_found", locale)
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class UnauthorizedError(HTTPException):
    """Unauthorized exception."""

    def __init__(self, detail: Optional[str] = None, locale: str = "en"):
        if detail is None:
            detail = get_translation("errors.login_required", locale)
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class ValidationError(HTTPException):
    """Validation exception (missing fields, incomplete submissions)."""

    def __init__(self, detail: Optional[str] = None, locale: str = "en"):
        if detail is None:
            detail = get_translation("errors.validation_error", locale)
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
