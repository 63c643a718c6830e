"""Application exception hierarchy following RFC 7807 Problem Details."""

from typing import Any
from uuid import UUID

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception following RFC 7807.

    Every error the route handlers translate into an HTTP status derives
    from this class; the global handler renders ``detail`` as problem JSON.
    """

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        detail: dict[str, Any] | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.error_detail = detail or {}

        super().__init__(
            status_code=status_code,
            detail={
                "type": f"https://api.sitecms.local/errors/{error_code}",
                "title": error_code.replace("_", " ").title(),
                "status": status_code,
                "detail": message,
                "instance": None,  # Set by exception handler
                **self.error_detail,
            },
        )


# ============================================================================
# Denied (401, 403)
# ============================================================================


class AuthenticationError(AppException):
    """Caller has no valid session."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="authentication_required",
            message=message,
        )


class PermissionDeniedError(AppException):
    """Caller is signed in but lacks the admin capability."""

    def __init__(
        self,
        message: str = "Admin access required",
        role: str | None = None,
    ) -> None:
        detail = {}
        if role:
            detail["role"] = role

        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            error_code="permission_denied",
            message=message,
            detail=detail,
        )


# ============================================================================
# Resource Exceptions (404, 409)
# ============================================================================


class NotFoundError(AppException):
    """Resource not found."""

    def __init__(
        self,
        resource: str,
        identifier: str | UUID | None = None,
    ) -> None:
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with id '{identifier}' not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="not_found",
            message=message,
            detail={"resource": resource},
        )


class AlreadyExistsError(AppException):
    """Resource already exists (conflict)."""

    def __init__(
        self,
        resource: str,
        field: str,
        value: str,
    ) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code="already_exists",
            message=f"{resource} with {field}='{value}' already exists",
            detail={"resource": resource, "field": field, "value": value},
        )


# ============================================================================
# Validation Exceptions (400)
# ============================================================================


class ValidationError(AppException):
    """Fields are missing or malformed."""

    def __init__(
        self,
        message: str,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        self.errors = errors or []
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="validation_error",
            message=message,
            detail={"errors": self.errors},
        )


# ============================================================================
# External collaborators (500, 502)
# ============================================================================


class AdapterError(AppException):
    """The generative-content service (or a page it needs) failed."""

    def __init__(
        self,
        message: str = "Content assistant unavailable",
        service: str = "content_assistant",
    ) -> None:
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            error_code="adapter_error",
            message=message,
            detail={"service": service},
        )


class ExternalServiceError(AppException):
    """Object storage or another side service failed."""

    def __init__(
        self,
        service: str,
        message: str = "External service unavailable",
    ) -> None:
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            error_code="external_service_error",
            message=message,
            detail={"service": service},
        )


class StoreError(AppException):
    """Database or network failure while talking to the store."""

    def __init__(self, message: str = "Database error occurred") -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="store_error",
            message=message,
        )
