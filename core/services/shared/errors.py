from __future__ import annotations

from typing import Any, Dict


class ServiceError(Exception):
    """Base class for service-layer errors."""

    error_code = "SERVICE_ERROR"
    default_message = "Request could not be processed."

    def __init__(self, message: str | None = None, **details: Any) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"status": "error", "error_code": self.error_code, "error": self.message}
        out.update(self.details)
        return out


class ValidationError(ServiceError):
    """Raised when input payload is invalid."""

    error_code = "VALIDATION_ERROR"
    default_message = "Invalid input."


class StateError(ServiceError):
    """Raised when an operation is not allowed in the current lifecycle state."""

    error_code = "INVALID_STATE"
    default_message = "Operation not allowed in the current state."


class PermissionDeniedError(ServiceError):
    """Raised when actor is not allowed to access resource."""

    error_code = "PERMISSION_DENIED"
    default_message = "Not authorized to access this resource."


class NotFoundError(ServiceError):
    error_code = "NOT_FOUND"
    default_message = "Resource not found."


# Grading

class InvalidCategory(ValidationError):
    error_code = "INVALID_CATEGORY"
    default_message = "Unknown grading category."


class InvalidScore(ValidationError):
    error_code = "INVALID_SCORE"
    default_message = "Points must be non-negative and possible points positive."


class InvalidWeights(ValidationError):
    error_code = "INVALID_WEIGHTS"
    default_message = "Category weights must be provided for every category and be non-negative."


# Quiz

class InvalidQuizDefinition(ValidationError):
    error_code = "INVALID_QUIZ_DEFINITION"
    default_message = "Quiz definition is invalid."


class AnswerTypeMismatch(ValidationError):
    error_code = "ANSWER_TYPE_MISMATCH"
    default_message = "Submitted answer has the wrong shape for this question type."


class AttemptLimitExceeded(StateError):
    error_code = "ATTEMPT_LIMIT_EXCEEDED"
    default_message = "Maximum attempts reached."


class AlreadySubmitted(StateError):
    error_code = "ALREADY_SUBMITTED"
    default_message = "Quiz already submitted."


class TimeLimitExceeded(StateError):
    error_code = "TIME_LIMIT_EXCEEDED"
    default_message = "Time limit exceeded."


class AttemptConflict(StateError):
    error_code = "ATTEMPT_CONFLICT"
    default_message = "Another attempt was started at the same time. Please retry."


class AttemptNotSubmitted(StateError):
    error_code = "ATTEMPT_NOT_SUBMITTED"
    default_message = "Quiz attempt not yet submitted."


# Budget

class InvalidIncome(ValidationError):
    error_code = "INVALID_INCOME"
    default_message = "Valid monthly income required."


class InvalidAllocation(ValidationError):
    error_code = "INVALID_ALLOCATION"
    default_message = "Budget buckets must be non-negative."


class AllocationMismatch(ValidationError):
    error_code = "ALLOCATION_MISMATCH"
    default_message = "Budget must allocate all income."

    def __init__(self, total_allocated: float, monthly_income: float, message: str | None = None) -> None:
        super().__init__(message, total_allocated=total_allocated, monthly_income=monthly_income)
        self.total_allocated = total_allocated
        self.monthly_income = monthly_income


# Wealth

class InvalidLineItem(ValidationError):
    error_code = "INVALID_LINE_ITEM"
    default_message = "Asset and liability amounts must be non-negative."
