from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    INVALID_TOKEN = "invalid_token"
    EXPIRED = "expired"
    NO_SENDER_RESOLVABLE = "no_sender_resolvable"


class AppError(Exception):
    """Base application error."""

    status_code = 500

    def __init__(self, detail: str = "", *, kind: ErrorKind | None = None) -> None:
        self.detail = detail
        self.kind = kind
        super().__init__(detail)


class ValidationError(AppError):
    status_code = 400


class AuthError(AppError):
    status_code = 401


class AccessDeniedError(AppError):
    status_code = 403

    @property
    def reason(self) -> str:
        return self.detail


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class UnexpectedError(AppError):
    """Persistence or transport failure. Clients only ever see a generic detail."""

    status_code = 500


class InvalidRoleIdsError(ValidationError):
    def __init__(self, invalid_role_ids: list[str]) -> None:
        super().__init__("Unknown role ids")
        self.invalid_role_ids = invalid_role_ids
