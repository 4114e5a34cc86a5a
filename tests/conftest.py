"""Shared pytest fixtures for the identity-provider test suites."""

from collections.abc import Mapping
from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


class StubMessageResolver:
    """Deterministic resolver rendering codes as ``text:<code>``."""

    def __init__(self, overrides: Mapping[str, str] | None = None) -> None:
        self._overrides = dict(overrides or {})
        self.lookups: list[str] = []

    def lookup(self, code: str) -> str:
        self.lookups.append(code)
        return self._overrides.get(code, f"text:{code}")


@pytest.fixture
def resolver() -> StubMessageResolver:
    return StubMessageResolver()


@pytest.fixture
def dispatcher(resolver: StubMessageResolver):
    from idp.core.errors import ErrorDispatcher

    return ErrorDispatcher(resolver)
