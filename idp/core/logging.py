"""Process-wide logging setup for the identity provider."""

from __future__ import annotations

import logging
import sys

from idp.core.config import IdPSettings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | {service} | %(name)s | %(message)s"


def configure_logging(settings: IdPSettings) -> None:
    """Send records at ``settings.log_level`` and above to stdout, tagged with the service name."""
    level = logging.getLevelName(settings.log_level)
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT.format(service=settings.service_name.replace("%", "%%")),
        stream=sys.stdout,
        force=True,
    )
