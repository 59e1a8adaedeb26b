"""
Store Exceptions

Typed failures raised by the validator, repositories and services.
Callers (HTTP layer, scripts) map each kind to their own status codes.

Author: TM3
Date: 2025-10-17
"""
from typing import Optional, Any, Dict


class StoreException(Exception):
    """Base exception for every failure raised by the store core.

    Keeps a stable error_code so callers can tell failures apart
    without parsing messages.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================================
# Validation
# ============================================================================

class ValidationException(StoreException):
    """Raised when an input fails a validation rule."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        error_code: str = "VALIDATION_ERROR",
    ):
        details = {"field": field} if field else {}
        super().__init__(message=message, error_code=error_code, details=details)
        self.field = field


class RequiredFieldError(ValidationException):
    """A mandatory input was None or blank."""

    def __init__(self, field: str):
        super().__init__(
            message=f"Required field '{field}' is missing or empty",
            field=field,
            error_code="REQUIRED_FIELD",
        )


class InvalidInputError(ValidationException):
    """A present input violates a format or range rule."""

    def __init__(self, field: str, reason: str):
        super().__init__(
            message=f"Invalid input for field '{field}': {reason}",
            field=field,
            error_code="INVALID_INPUT",
        )
        self.reason = reason


class InvalidSearchQueryError(ValidationException):
    """A non-empty search string violates the search rule."""

    def __init__(self, reason: str):
        super().__init__(
            message=f"Invalid search query: {reason}",
            field="query",
            error_code="INVALID_SEARCH_QUERY",
        )
        self.reason = reason


# ============================================================================
# Not found
# ============================================================================

class NotFoundError(StoreException):
    """A referenced id does not exist in the store."""

    entity_type = "Entity"

    def __init__(self, entity_id: Any, entity_type: Optional[str] = None):
        if entity_type:
            self.entity_type = entity_type
        super().__init__(
            message=f"{self.entity_type} not found with ID: {entity_id}",
            error_code="NOT_FOUND",
            details={"entity_type": self.entity_type, "id": entity_id},
        )
        self.entity_id = entity_id

    @classmethod
    def with_id(cls, entity_id: Any) -> "NotFoundError":
        return cls(entity_id)


class CustomerNotFoundError(NotFoundError):
    entity_type = "Customer"


class ProductNotFoundError(NotFoundError):
    entity_type = "Product"


class OrderNotFoundError(NotFoundError):
    entity_type = "Order"


# ============================================================================
# Unexpected failures
# ============================================================================

class OperationFailure(StoreException):
    """Raised when the store or cache fails during an otherwise valid operation.

    Only the cause type is exposed in details; the cause itself is kept
    as __cause__ for logs.
    """

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        details = {}
        if original_error is not None:
            details["original_error_type"] = type(original_error).__name__

        super().__init__(message=message, error_code="OPERATION_FAILURE", details=details)
        if original_error is not None:
            self.__cause__ = original_error
