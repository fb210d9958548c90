"""
Error taxonomy shared by services and routers.

Every error is an ``HTTPException`` so service code can raise it directly;
``main.py`` renders them as ``{"error": <code>, "detail": <message>}``.
"""
from fastapi import HTTPException, status


class AppError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "error"
    default_detail = "Request failed"

    def __init__(self, detail: str | None = None, headers: dict[str, str] | None = None):
        super().__init__(
            status_code=type(self).status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_detail = "Invalid input"


class DuplicateIdentity(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "duplicate_identity"
    default_detail = "Username or email already exists"


class SelfActionForbidden(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "self_action_forbidden"
    default_detail = "Admins cannot perform this action on their own account"


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"
    default_detail = "Access token required"

    def __init__(self, detail: str | None = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class InvalidCredentials(Unauthenticated):
    code = "invalid_credentials"
    default_detail = "Invalid credentials"


class TokenMalformed(Unauthenticated):
    code = "token_malformed"
    default_detail = "Malformed token"


class TokenSignatureInvalid(Unauthenticated):
    code = "token_signature_invalid"
    default_detail = "Invalid token signature"


class TokenExpired(Unauthenticated):
    code = "token_expired"
    default_detail = "Token has expired"


class PermissionDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "permission_denied"
    default_detail = "Permission denied"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_detail = "Not found"


class StorageError(AppError):
    code = "storage_error"
    default_detail = "Database error"
