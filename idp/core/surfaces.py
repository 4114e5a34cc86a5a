"""Request-path classification into API surfaces."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from starlette.requests import Request


class Surface(str, Enum):
    """Response contract a failed request is answered with."""

    INTERNAL = "internal"
    OAUTH = "oauth"
    HEADER_CHALLENGE = "header_challenge"


# Evaluated top to bottom; the first matching prefix wins.
SURFACE_RULES: tuple[tuple[str, Surface], ...] = (
    ("/authorization", Surface.INTERNAL),
    ("/client-mgmt/", Surface.INTERNAL),
    ("/oidc/userinfo", Surface.HEADER_CHALLENGE),
    ("/oauth/", Surface.OAUTH),
)

DEFAULT_SURFACE = Surface.INTERNAL


def classify_path(
    path: str,
    rules: Sequence[tuple[str, Surface]] = SURFACE_RULES,
    default: Surface = DEFAULT_SURFACE,
) -> Surface:
    """Return the surface for ``path``; unmatched paths get ``default``."""
    for prefix, surface in rules:
        if path.startswith(prefix):
            return surface
    return default


def request_path(request: Request) -> str:
    """Return the request path relative to the application's mount point."""
    path = request.scope.get("path") or ""
    root_path = request.scope.get("root_path") or ""
    if root_path and path.startswith(root_path):
        path = path[len(root_path) :]
    return path or "/"
