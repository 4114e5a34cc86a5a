"""Application configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path

DEFAULT_SERVICE_NAME = "idp"
DEFAULT_LOG_LEVEL = "INFO"


def _get_path_env(name: str) -> Path | None:
    raw = os.getenv(name)
    if not raw:
        return None
    return Path(raw)


@dataclass(frozen=True)
class IdPSettings:
    """Runtime settings for the identity-provider service."""

    service_name: str
    log_level: str
    messages_path: Path | None

    def safe_for_logging(self) -> dict[str, str | None]:
        """Return settings safe for logs."""
        return {
            "service_name": self.service_name,
            "log_level": self.log_level,
            "messages_path": str(self.messages_path) if self.messages_path else None,
        }


@lru_cache(maxsize=1)
def get_settings() -> IdPSettings:
    """Load service settings from the environment."""
    return IdPSettings(
        service_name=os.getenv("IDP_SERVICE_NAME", DEFAULT_SERVICE_NAME),
        log_level=os.getenv("IDP_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        messages_path=_get_path_env("IDP_MESSAGES_PATH"),
    )
