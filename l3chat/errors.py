"""Authentication errors and the names shared by the auth layer."""

from __future__ import annotations

from enum import Enum

AUTH_COOKIE_NAME = "auth_token"


class AuthErrorKind(Enum):
    """The kinds of authentication failure, each with its message template."""

    TOKEN_CREATION = "Failed to create token: {}"
    TOKEN_VERIFICATION = "Failed to verify token: {}"
    TOKEN_EXPIRED = "Token has expired"
    TOKEN_REFRESH_FAILED = "Failed to refresh token: {}"
    INVALID_CREDENTIALS = "Invalid username or password"
    MISSING_ENVIRONMENT_VAR = "Missing environment variable: {}"
    COOKIE_ERROR = "Cookie error: {}"
    DATABASE_ERROR = "Database error: {}"

    @property
    def takes_detail(self) -> bool:
        return "{}" in self.value


class AuthError(Exception):
    """An authentication failure of a given kind, with optional detail."""

    def __init__(self, kind: AuthErrorKind, detail: str | None = None) -> None:
        if kind.takes_detail and detail is None:
            raise ValueError(f"{kind.name} requires a detail message")
        if not kind.takes_detail and detail is not None:
            raise ValueError(f"{kind.name} takes no detail message")
        self.kind = kind
        self.detail = detail
        super().__init__(self._message())

    def _message(self) -> str:
        if self.kind.takes_detail:
            return self.kind.value.format(self.detail)
        return self.kind.value

    def __str__(self) -> str:
        return self._message()