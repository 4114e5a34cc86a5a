"""Unit tests for request-path surface classification."""

from __future__ import annotations

import pytest
from starlette.requests import Request

from idp.core.surfaces import SURFACE_RULES
from idp.core.surfaces import Surface
from idp.core.surfaces import classify_path
from idp.core.surfaces import request_path


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/authorization/clients", Surface.INTERNAL),
        ("/authorization", Surface.INTERNAL),
        ("/client-mgmt/oidc-client", Surface.INTERNAL),
        ("/oidc/userinfo", Surface.HEADER_CHALLENGE),
        ("/oauth/token", Surface.OAUTH),
        ("/oauth/.well-known/jwks.json", Surface.OAUTH),
        ("/health", Surface.INTERNAL),
        ("/", Surface.INTERNAL),
        ("", Surface.INTERNAL),
    ],
)
def test_classify_path_follows_prefix_rules(path: str, expected: Surface) -> None:
    assert classify_path(path) is expected


def test_prefix_matching_is_exact_about_trailing_slashes() -> None:
    assert classify_path("/client-mgmt") is Surface.INTERNAL
    assert classify_path("/oauth") is Surface.INTERNAL
    assert classify_path("/oidc/userinfo/extra") is Surface.HEADER_CHALLENGE


def test_rule_order_is_first_match_wins() -> None:
    rules = [("/oauth/", Surface.OAUTH), ("/oauth/client-mgmt/", Surface.INTERNAL)]

    assert classify_path("/oauth/client-mgmt/x", rules) is Surface.OAUTH
    assert classify_path("/oauth/client-mgmt/x", list(reversed(rules))) is Surface.INTERNAL


def test_internal_prefixes_precede_oauth_prefix() -> None:
    prefixes = [prefix for prefix, _ in SURFACE_RULES]

    assert prefixes.index("/client-mgmt/") < prefixes.index("/oauth/")
    assert prefixes.index("/authorization") < prefixes.index("/oidc/userinfo")


def test_unmatched_path_uses_declared_default() -> None:
    assert classify_path("/other", default=Surface.OAUTH) is Surface.OAUTH


def _request(path: str, root_path: str = "") -> Request:
    return Request({"type": "http", "method": "GET", "path": path, "root_path": root_path, "headers": []})


def test_request_path_strips_mount_point() -> None:
    assert request_path(_request("/v1/idp/oauth/token", root_path="/v1/idp")) == "/oauth/token"
    assert request_path(_request("/oauth/token")) == "/oauth/token"
    assert request_path(_request("/v1/idp", root_path="/v1/idp")) == "/"
