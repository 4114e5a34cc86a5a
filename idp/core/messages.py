"""Localized error-message lookup."""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Protocol

from idp.core import error_codes
from idp.core.config import get_settings

logger = logging.getLogger(__name__)

DEFAULT_MESSAGES: Mapping[str, str] = MappingProxyType(
    {
        error_codes.INVALID_REQUEST: "Invalid request",
        error_codes.INVALID_CLIENT_ID: "Invalid client id",
        error_codes.UNKNOWN_ERROR: "Unknown error occurred",
        error_codes.INVALID_AUTH_TOKEN: "Invalid or expired auth token",
        error_codes.INVALID_INPUT: "Invalid input",
        error_codes.INVALID_TRANSACTION: "Invalid transaction",
        error_codes.INVALID_REDIRECT_URI: "Invalid redirect uri",
        error_codes.INVALID_GRANT_TYPE: "Unsupported grant type",
        error_codes.INVALID_ASSERTION_TYPE: "Unsupported client assertion type",
        error_codes.INVALID_ASSERTION: "Invalid client assertion",
        error_codes.INVALID_ACR: "Invalid authentication context reference",
        error_codes.AUTH_FAILED: "Authentication failed",
    }
)


class MessageResolver(Protocol):
    def lookup(self, code: str) -> str:
        """Return display text for ``code``; never raises for unknown codes."""


class CatalogMessageResolver:
    """Resolve error codes against an immutable message catalog.

    Codes missing from the catalog resolve to the code itself.
    """

    def __init__(self, catalog: Mapping[str, str] | None = None) -> None:
        self._catalog: Mapping[str, str] = MappingProxyType(dict(DEFAULT_MESSAGES if catalog is None else catalog))

    @property
    def catalog(self) -> Mapping[str, str]:
        return self._catalog

    def lookup(self, code: str) -> str:
        return self._catalog.get(code, code)


def load_message_catalog(path: Path | str) -> dict[str, str]:
    """Read a JSON code-to-text object and overlay it on the default messages."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"Message catalog {path} must be a JSON object")

    catalog = dict(DEFAULT_MESSAGES)
    for code, text in raw.items():
        if not isinstance(text, str):
            raise ValueError(f"Message for {code!r} in {path} must be a string")
        catalog[str(code)] = text
    return catalog


@lru_cache(maxsize=1)
def get_message_resolver() -> CatalogMessageResolver:
    """Build the process-wide resolver from settings."""
    settings = get_settings()
    if settings.messages_path is None:
        return CatalogMessageResolver()

    logger.info("Loading message catalog from %s", settings.messages_path)
    return CatalogMessageResolver(load_message_catalog(settings.messages_path))
