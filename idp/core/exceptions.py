"""Exceptions raised by request handlers and business logic."""

from __future__ import annotations

from idp.core.error_codes import INVALID_AUTH_TOKEN
from idp.core.error_codes import INVALID_CLIENT_ID
from idp.core.error_codes import INVALID_REDIRECT_URI
from idp.core.error_codes import INVALID_TRANSACTION


class IdPError(Exception):
    """Base domain exception carrying a stable error code."""

    def __init__(self, error_code: str, message: str | None = None) -> None:
        if not error_code:
            raise ValueError("error_code is required")
        super().__init__(message or error_code)
        self.error_code = error_code


class InvalidClientError(IdPError):
    """Raised when the calling client cannot be authenticated."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(INVALID_CLIENT_ID, message)


class NotAuthenticatedError(IdPError):
    """Raised when the resource owner's access token is missing or invalid."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(INVALID_AUTH_TOKEN, message)


class InvalidTransactionError(IdPError):
    """Raised when an authorization transaction is unknown or has expired."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(INVALID_TRANSACTION, message)


class InvalidRedirectUriError(IdPError):
    """Raised when a redirect URI is not registered for the client."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(INVALID_REDIRECT_URI, message)


class MissingParameterError(Exception):
    """Raised when a required request parameter is absent."""

    def __init__(self, name: str, message: str | None = None) -> None:
        super().__init__(message or f"{name} is required")
        self.name = name
        self.message = message or f"{name} is required"


class UnacceptableMediaTypeError(Exception):
    """Raised when no acceptable representation can be produced."""

    def __init__(self, message: str = "Could not find acceptable representation") -> None:
        super().__init__(message)
        self.message = message
