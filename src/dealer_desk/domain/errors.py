"""Domain error classes.

Protocol-agnostic errors raised by the deal desk engine and use cases.
Protocol adapters (the HTTP entrypoint today) translate them into responses.

Numerically unusual results (negative principal, negative ACV) are never
errors. Only structurally invalid input or a forbidden status change is.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain errors.

    Carries a human-readable message plus free-form context that adapters
    can serialize.
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        """Create a domain error.

        Args:
            message: Human-readable error message
            **context: Additional context (field names, statuses, ids)
        """
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format for protocol translation."""
        return {
            "message": self.message,
            "code": self.error_code,
            **self.context,
        }


class ValidationError(DomainError):
    """Business rule validation error.

    Examples:
        - sale_price <= 0
        - empty list of lease terms
        - malformed decimal string at the HTTP boundary

    Protocol mappings:
        - REST: 422 Unprocessable Entity
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, str]] | None = None,
        **context: Any,
    ) -> None:
        """Create a validation error.

        Args:
            message: Overall validation error message (optional if errors provided)
            errors: Field-specific errors, each with 'field', 'message' and 'code'
            **context: Additional context
        """
        self.errors: list[dict[str, str]] | None
        if errors:
            self.errors = errors
            msg = message or "Validation failed"
        else:
            self.errors = None
            msg = message or "Validation error"

        super().__init__(msg, **context)

    def to_dict(self) -> dict[str, Any]:
        """Convert to structured format."""
        if self.errors:
            return {
                "message": self.message,
                "code": self.error_code,
                "errors": self.errors,
                **self.context,
            }
        return super().to_dict()


class InvalidInputError(ValidationError):
    """A required deal or lease field is missing or structurally invalid.

    Always recoverable by the caller: reject the request and surface the
    offending field.
    """

    def __init__(self, field: str, message: str, code: str = "INVALID_VALUE") -> None:
        self.field = field
        super().__init__(
            f"{field} {message}",
            errors=[{"field": field, "message": message, "code": code}],
        )


class InvalidTermError(InvalidInputError):
    """Amortization term below one month (or not a whole number of months)."""

    def __init__(self, term_months: Any, field: str = "term_months") -> None:
        self.term_months = term_months
        super().__init__(field, "must be an integer >= 1", code="INVALID_TERM")


class NotFoundError(DomainError):
    """Resource not found.

    Protocol mappings:
        - REST: 404 Not Found
    """

    error_code: str = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str | None = None, **context: Any) -> None:
        if identifier:
            message = f"{resource} with identifier '{identifier}' not found"
        else:
            message = f"{resource} not found"

        super().__init__(message, resource=resource, identifier=identifier, **context)


class ConflictError(DomainError):
    """Request conflicts with the current state of a resource.

    Examples:
        - Re-penciling a delivered or cancelled deal

    Protocol mappings:
        - REST: 409 Conflict
    """

    error_code: str = "CONFLICT"


class InvalidTransitionError(ConflictError):
    """Deal status change not in the lifecycle transition table.

    The caller should re-fetch the deal and offer the allowed next statuses,
    which are carried in the context.
    """

    error_code: str = "INVALID_TRANSITION"

    def __init__(self, current: str, requested: str, allowed: list[str] | None = None) -> None:
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot move deal from '{current}' to '{requested}'",
            current_status=current,
            requested_status=requested,
            allowed=sorted(allowed or []),
        )


class StaleDealError(ConflictError):
    """Deal was saved by another request after this one loaded it.

    Two concurrent status changes on the same deal cannot both win; the
    loser gets this error and should reload the deal and retry.
    """

    error_code: str = "STALE_DEAL"

    def __init__(self, deal_id: str, expected: int | None = None, current: int | None = None) -> None:
        self.deal_id = deal_id
        super().__init__(
            f"Deal '{deal_id}' was changed by another request; reload and retry",
            deal_id=deal_id,
            expected_version=expected,
            current_version=current,
        )


class InternalError(DomainError):
    """Internal domain error (unexpected conditions).

    Should be logged for investigation.

    Protocol mappings:
        - REST: 500 Internal Server Error
    """

    error_code: str = "INTERNAL_ERROR"
