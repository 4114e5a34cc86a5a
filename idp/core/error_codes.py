"""Stable error-code tokens shared by every API surface."""

from __future__ import annotations

INVALID_REQUEST = "invalid_request"
INVALID_CLIENT_ID = "invalid_client_id"
UNKNOWN_ERROR = "unknown_error"
INVALID_AUTH_TOKEN = "invalid_auth_token"
INVALID_INPUT = "invalid_input"
INVALID_TRANSACTION = "invalid_transaction"
INVALID_REDIRECT_URI = "invalid_redirect_uri"
INVALID_GRANT_TYPE = "invalid_grant_type"
INVALID_ASSERTION_TYPE = "invalid_assertion_type"
INVALID_ASSERTION = "invalid_assertion"
INVALID_ACR = "invalid_acr"
AUTH_FAILED = "auth_failed"

REGISTERED_ERROR_CODES = frozenset(
    {
        INVALID_REQUEST,
        INVALID_CLIENT_ID,
        UNKNOWN_ERROR,
        INVALID_AUTH_TOKEN,
        INVALID_INPUT,
        INVALID_TRANSACTION,
        INVALID_REDIRECT_URI,
        INVALID_GRANT_TYPE,
        INVALID_ASSERTION_TYPE,
        INVALID_ASSERTION,
        INVALID_ACR,
        AUTH_FAILED,
    }
)


def is_registered(code: str) -> bool:
    """Return whether ``code`` is a known error-code token."""
    return code in REGISTERED_ERROR_CODES
