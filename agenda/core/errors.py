# agenda/core/errors.py
"""
Application error taxonomy.

Every failure that leaves a service is one of these classes, so the HTTP
layer (and any other caller) can render a code and a readable message
without inspecting driver exceptions.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error"""

    def __init__(
            self,
            message: str,
            code: str,
            status_code: int = 500,
            details: Optional[Any] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(AppError):
    """Malformed or missing input (400). Safe to show verbatim."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, "VALIDATION_ERROR", 400, details)


class NotFoundError(AppError):
    """Referenced entity does not exist (404)"""

    def __init__(self, resource: str, resource_id: Optional[Any] = None):
        if resource_id is not None:
            message = f"{resource} with ID {resource_id} not found"
        else:
            message = f"{resource} not found"
        super().__init__(
            message,
            "NOT_FOUND",
            404,
            {"resource": resource, "id": str(resource_id) if resource_id is not None else None},
        )
        self.resource = resource
        self.resource_id = resource_id


class BusinessLogicError(AppError):
    """State-dependent rule violation (422)"""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, "BUSINESS_ERROR", 422, details)


class ExternalServiceError(AppError):
    """Downstream store or messaging integration failure (502)"""

    def __init__(self, service: str, message: str, details: Optional[Any] = None):
        super().__init__(
            f"External service {service} failed: {message}",
            "EXTERNAL_SERVICE_ERROR",
            502,
            details,
        )
        self.service = service


@contextmanager
def translate_store_errors(operation: str):
    """Re-raise SQLAlchemy failures as ExternalServiceError("database")"""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error(f"Database error during {operation}: {exc}", exc_info=True)
        raise ExternalServiceError("database", f"{operation} failed") from exc
