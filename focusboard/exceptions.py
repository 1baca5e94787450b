"""
Custom exceptions for the focusboard application.
Every exception carries a stable error kind that the HTTP layer renders
alongside the human-readable message.
"""
from typing import List, Optional


class FocusboardException(Exception):
    """Base exception for focusboard application"""
    kind = "internal_error"

    def __init__(self, message: str, details: Optional[object] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class UnauthorizedException(FocusboardException):
    """Raised when no valid user identity accompanies the request"""
    kind = "unauthorized"

    def __init__(self, reason: str = "Invalid or missing credentials"):
        super().__init__(reason)


class NotFoundException(FocusboardException):
    """Raised when a record is absent or owned by another user.

    Both cases produce the same error so that record existence never leaks
    across users.
    """
    kind = "not_found"

    def __init__(self, entity: str, entity_id: Optional[object] = None):
        self.entity = entity
        self.entity_id = entity_id
        if entity_id is None:
            super().__init__(f"{entity} not found")
        else:
            super().__init__(f"{entity} with ID {entity_id} not found")


class InvalidStateException(FocusboardException):
    """Raised when an operation is not allowed in the record's current state"""
    kind = "invalid_state"

    def __init__(self, entity: str, entity_id: object, reason: str):
        self.entity = entity
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(f"{entity} {entity_id}: {reason}")


class ValidationException(FocusboardException):
    """Raised when data validation fails"""
    kind = "validation_error"

    def __init__(self, field: str, message: str):
        self.field = field
        self.violations = [{"field": field, "message": message}]
        super().__init__(f"Validation error for {field}: {message}", details=self.violations)


class StoreException(FocusboardException):
    """Raised when database operations fail"""
    kind = "store_error"

    def __init__(self, operation: str, details: str):
        self.operation = operation
        super().__init__(f"Database {operation} failed: {details}", details=details)


class PartialBatchFailureException(FocusboardException):
    """Raised when some rows of a batch operation failed.

    Rows are attempted independently, so ``succeeded`` rows are already
    persisted when this is raised.
    """
    kind = "partial_batch_failure"

    def __init__(self, operation: str, succeeded: int, failures: List[dict]):
        self.operation = operation
        self.succeeded = succeeded
        self.failures = failures
        super().__init__(
            f"{operation} partially failed: {succeeded} succeeded, {len(failures)} failed",
            details={"succeeded": succeeded, "failures": failures},
        )
